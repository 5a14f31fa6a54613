from datetime import timedelta
from uuid import uuid4

import pytest

from flock.core.exceptions import MentorNotFoundError, UserNotFoundError, ValidationError
from flock.db.enums import PersonStatus, Role
from flock.schemas.user import UserUpdate
from flock.services import assignment_service, mentor_service


def test_deactivated_mentor_is_not_picked_for_assignment(db, make_mentor, make_person, now):
    leaving = make_mentor()
    staying = make_mentor()
    make_person(mentor=staying)
    assert assignment_service.find_available_mentor(db).id == leaving.id

    mentor_service.deactivate_user(db, leaving.id, now=now)

    assert assignment_service.find_available_mentor(db).id == staying.id
    with pytest.raises(MentorNotFoundError):
        mentor_service.get_mentor(db, leaving.id)


def test_deactivating_last_mentor_leaves_nobody_available(db, make_mentor):
    mentor = make_mentor()

    mentor_service.deactivate_user(db, mentor.id)

    assert assignment_service.find_available_mentor(db) is None


def test_deactivated_mentor_keeps_assigned_visitors(db, make_mentor, make_person, now):
    mentor = make_mentor()
    person = make_person(mentor=mentor)

    user = mentor_service.deactivate_user(db, mentor.id, now=now + timedelta(hours=1))

    assert user.is_active is False
    assert user.updated_at == now + timedelta(hours=1)
    db.refresh(person)
    assert person.assigned_mentor_id == mentor.id
    assert assignment_service.get_caseload(db, mentor.id) == 1


def test_deactivate_user_is_idempotent(db, make_mentor, now, caplog):
    mentor = make_mentor()
    mentor_service.deactivate_user(db, mentor.id, now=now)

    with caplog.at_level("INFO"):
        user = mentor_service.deactivate_user(db, mentor.id, now=now + timedelta(days=1))

    assert user.updated_at == now
    assert "User deactivated" not in caplog.text


def test_demoted_mentor_is_not_picked_for_assignment(db, make_mentor):
    mentor = make_mentor()

    mentor_service.update_user(db, mentor.id, UserUpdate(role=Role.PASTOR))

    assert assignment_service.find_available_mentor(db) is None


def test_update_user_changes_only_given_fields(db, make_mentor, now):
    mentor = make_mentor(first_name="Ama", last_name="Diallo")

    user = mentor_service.update_user(
        db, mentor.id, UserUpdate(last_name="  mensah ", phone="06 12 34 56 78"), now=now
    )

    assert user.first_name == "Ama"
    assert user.last_name == "Mensah"
    assert user.phone == "+33612345678"
    assert user.role == Role.MENTOR.value
    assert user.updated_at == now


def test_update_user_can_reactivate(db, make_mentor):
    mentor = make_mentor(is_active=False)

    mentor_service.update_user(db, mentor.id, UserUpdate(is_active=True))

    assert assignment_service.find_available_mentor(db).id == mentor.id


def test_update_unknown_user(db):
    with pytest.raises(UserNotFoundError):
        mentor_service.update_user(db, uuid4(), UserUpdate(first_name="Kofi"))


def test_list_users_filters(db):
    north = mentor_service.create_user(
        db, "ama@example.org", "ama", "diallo", church_section="Nord"
    )
    mentor_service.create_user(
        db, "kofi@example.org", "kofi", "mensah", role=Role.PASTOR, church_section="Sud"
    )
    inactive = mentor_service.create_user(db, "esi@example.org", "esi", "owusu")
    mentor_service.deactivate_user(db, inactive.id)

    assert [u.email for u in mentor_service.list_users(db)] == [
        "ama@example.org",
        "esi@example.org",
        "kofi@example.org",
    ]
    assert [u.id for u in mentor_service.list_users(db, role=Role.MENTOR, is_active=True)] == [north.id]
    assert [u.id for u in mentor_service.list_users(db, church_section="nord")] == [north.id]
    assert [u.id for u in mentor_service.list_users(db, is_active=False)] == [inactive.id]


def test_create_user_rejects_duplicate_email(db):
    mentor_service.create_user(db, "Ama@Example.org", "ama", "diallo")

    with pytest.raises(ValidationError):
        mentor_service.create_user(db, "ama@example.org", "ama", "diallo")


def test_get_user_by_email_is_case_insensitive(db, make_mentor):
    mentor = make_mentor()

    assert mentor_service.get_user_by_email(db, mentor.email.upper()).id == mentor.id
    assert mentor_service.get_user_by_email(db, "nobody@example.org") is None


def test_get_caseloads_defaults_to_zero(db, make_mentor, make_person):
    busy = make_mentor()
    idle = make_mentor()
    make_person(mentor=busy)
    make_person(mentor=busy, status=PersonStatus.IN_FOLLOW_UP)
    make_person(mentor=busy, status=PersonStatus.INTEGRATED)

    assert assignment_service.get_caseloads(db, [busy.id, idle.id]) == {busy.id: 2, idle.id: 0}
    assert assignment_service.get_caseloads(db, []) == {}
