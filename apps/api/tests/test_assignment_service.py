from uuid import uuid4

import pytest

from flock.core.exceptions import MentorNotFoundError, PersonNotFoundError
from flock.db.enums import NotificationType, PersonStatus, Role, SettingKey
from flock.db.models import Notification
from flock.schemas.person import PersonCreate
from flock.services import assignment_service, person_service, settings_service


def _visitor(n: int = 1) -> PersonCreate:
    return PersonCreate(first_name=f"visitor{n}", last_name="test", gender="F")


def _notifications(db, user_id, type=NotificationType.NEW_ASSIGNMENT):
    return (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.type == type.value)
        .all()
    )


def test_find_available_mentor_picks_lowest_caseload(db, make_mentor, make_person):
    busy = make_mentor()
    free = make_mentor()
    make_person(mentor=busy)
    make_person(mentor=busy)
    make_person(mentor=free)

    assert assignment_service.find_available_mentor(db).id == free.id


def test_find_available_mentor_breaks_ties_by_id(db, make_mentor):
    mentors = [make_mentor() for _ in range(3)]
    expected = min(mentors, key=lambda m: str(m.id))

    assert assignment_service.find_available_mentor(db).id == expected.id


def test_caseload_counts_only_active_statuses(db, make_mentor, make_person):
    mentor = make_mentor()
    make_person(mentor=mentor, status=PersonStatus.TO_VISIT)
    make_person(mentor=mentor, status=PersonStatus.IN_FOLLOW_UP)
    make_person(mentor=mentor, status=PersonStatus.INTEGRATED)
    make_person(mentor=mentor, status=PersonStatus.TO_REDIRECT)
    make_person(mentor=mentor, status=PersonStatus.LONG_ABSENT)

    assert assignment_service.get_caseload(db, mentor.id) == 2
    loads = {user.id: count for user, count in assignment_service.get_mentor_caseloads(db)}
    assert loads == {mentor.id: 2}


def test_inactive_and_non_mentor_users_are_not_candidates(db, make_mentor):
    make_mentor(is_active=False)
    make_mentor(role=Role.PASTOR)

    assert assignment_service.find_available_mentor(db) is None


def test_find_available_mentor_respects_capacity_setting(db, make_mentor, make_person):
    settings_service.update_setting(db, SettingKey.MAX_PERSONS_PER_MENTOR, "2")
    full = make_mentor()
    make_person(mentor=full)
    make_person(mentor=full)

    assert assignment_service.find_available_mentor(db) is None

    # Integrated visitors free up capacity
    make_person(mentor=full, status=PersonStatus.INTEGRATED)
    assert assignment_service.find_available_mentor(db) is None

    other = make_mentor()
    assert assignment_service.find_available_mentor(db).id == other.id


def test_intake_spreads_visitors_evenly(db, make_mentor):
    mentors = [make_mentor() for _ in range(3)]

    for n in range(10):
        person_service.create_person(db, _visitor(n))

    loads = [assignment_service.get_caseload(db, m.id) for m in mentors]
    assert sum(loads) == 10
    assert max(loads) - min(loads) <= 1


def test_intake_without_capacity_creates_unassigned_person(db, make_mentor, make_person):
    settings_service.update_setting(db, SettingKey.MAX_PERSONS_PER_MENTOR, "1")
    mentor = make_mentor()
    make_person(mentor=mentor)

    person = person_service.create_person(db, _visitor())

    assert person.assigned_mentor_id is None
    assert person.status == PersonStatus.TO_VISIT.value
    assert db.query(Notification).count() == 0


def test_intake_notifies_assigned_mentor(db, make_mentor):
    mentor = make_mentor()

    person = person_service.create_person(db, _visitor())

    assert person.assigned_mentor_id == mentor.id
    notifications = _notifications(db, mentor.id)
    assert len(notifications) == 1
    assert notifications[0].person_id == person.id
    assert notifications[0].action_url == f"/persons/{person.id}"
    assert notifications[0].message == "Visitor1 Test has been assigned to you for follow-up"


def test_intake_skips_assignment_when_disabled(db, make_mentor):
    make_mentor()
    settings_service.update_setting(db, SettingKey.AUTO_ASSIGNMENT_ENABLED, "false")

    person = person_service.create_person(db, _visitor())

    assert person.assigned_mentor_id is None


def test_reassignment_notifies_only_new_mentor(db, make_mentor, make_person, now):
    mentor_a = make_mentor()
    mentor_b = make_mentor()
    person = make_person(mentor=mentor_a)

    updated = assignment_service.assign_mentor(db, person.id, mentor_b.id, now=now)

    assert updated.assigned_mentor_id == mentor_b.id
    assert updated.updated_at == now
    assert len(_notifications(db, mentor_b.id)) == 1
    assert db.query(Notification).filter(Notification.user_id == mentor_a.id).count() == 0


def test_assign_mentor_unknown_person(db, make_mentor):
    mentor = make_mentor()
    with pytest.raises(PersonNotFoundError):
        assignment_service.assign_mentor(db, uuid4(), mentor.id)


def test_assign_mentor_rejects_inactive_or_non_mentor(db, make_mentor, make_person):
    person = make_person()
    inactive = make_mentor(is_active=False)
    pastor = make_mentor(role=Role.PASTOR)

    with pytest.raises(MentorNotFoundError):
        assignment_service.assign_mentor(db, person.id, inactive.id)
    with pytest.raises(MentorNotFoundError):
        assignment_service.assign_mentor(db, person.id, pastor.id)
    with pytest.raises(MentorNotFoundError):
        assignment_service.assign_mentor(db, person.id, uuid4())


def test_mentor_workloads(db, make_mentor, make_person):
    settings_service.update_setting(db, SettingKey.MAX_PERSONS_PER_MENTOR, "1")
    busy = make_mentor()
    idle = make_mentor()
    make_person(mentor=busy)

    workloads = assignment_service.get_mentor_workloads(db)

    assert [w.mentor_id for w in workloads] == [idle.id, busy.id]
    assert workloads[0].is_available is True
    assert workloads[1].caseload == 1
    assert workloads[1].capacity == 1
    assert workloads[1].is_available is False
