from datetime import timedelta
from uuid import uuid4

import pytest

from flock.core.exceptions import PersonNotFoundError, UserNotFoundError
from flock.db.enums import FollowUpOutcome, InteractionType, NotificationType, PersonStatus, Role
from flock.db.models import FollowUp, Notification
from flock.schemas.follow_up import FollowUpCreate
from flock.services import follow_up_service, lifecycle_service
from flock.services.lifecycle_service import AUTOMATIC_TRANSITIONS, LifecycleTrigger


def _follow_up(person, mentor, when) -> FollowUpCreate:
    return FollowUpCreate.model_construct(
        person_id=person.id,
        mentor_id=mentor.id,
        interaction_type=InteractionType.CALL,
        interaction_date=when,
        outcome=FollowUpOutcome.NEUTRAL,
        notes=None,
        next_action_needed=False,
        next_action_date=None,
        next_action_notes=None,
    )


def test_transition_table_has_single_rule():
    assert AUTOMATIC_TRANSITIONS == {
        (LifecycleTrigger.FOLLOW_UP_RECORDED, PersonStatus.TO_VISIT): PersonStatus.IN_FOLLOW_UP,
    }


@pytest.mark.parametrize(
    "status",
    [
        PersonStatus.IN_FOLLOW_UP,
        PersonStatus.INTEGRATED,
        PersonStatus.TO_REDIRECT,
        PersonStatus.LONG_ABSENT,
    ],
)
def test_no_automatic_rule_outside_to_visit(status):
    assert lifecycle_service.next_status(LifecycleTrigger.FOLLOW_UP_RECORDED, status) is None


def test_first_follow_up_moves_to_in_follow_up(db, make_mentor, make_person, now):
    mentor = make_mentor()
    person = make_person(mentor=mentor)

    follow_up_service.record_follow_up(
        db, _follow_up(person, mentor, now - timedelta(hours=1)), mentor.id, now=now
    )

    db.refresh(person)
    assert person.status == PersonStatus.IN_FOLLOW_UP.value
    assert person.updated_at == now


def test_follow_up_keeps_in_follow_up(db, make_mentor, make_person, now):
    mentor = make_mentor()
    person = make_person(mentor=mentor, status=PersonStatus.IN_FOLLOW_UP)

    follow_up_service.record_follow_up(
        db, _follow_up(person, mentor, now - timedelta(hours=1)), mentor.id, now=now
    )

    db.refresh(person)
    assert person.status == PersonStatus.IN_FOLLOW_UP.value


def test_follow_up_does_not_reopen_integrated(db, make_mentor, make_person, now):
    mentor = make_mentor()
    person = make_person(mentor=mentor, status=PersonStatus.INTEGRATED)

    follow_up_service.record_follow_up(
        db, _follow_up(person, mentor, now - timedelta(hours=1)), mentor.id, now=now
    )

    db.refresh(person)
    assert person.status == PersonStatus.INTEGRATED.value


def test_automatic_transition_does_not_notify(db, make_mentor, make_person, now):
    mentor = make_mentor()
    person = make_person(mentor=mentor)

    follow_up_service.record_follow_up(
        db, _follow_up(person, mentor, now - timedelta(hours=1)), mentor.id, now=now
    )

    assert db.query(Notification).count() == 0


def test_follow_up_survives_failed_transition(db, make_mentor, make_person, now, monkeypatch):
    mentor = make_mentor()
    person = make_person(mentor=mentor)

    def boom(*args, **kwargs):
        raise RuntimeError("commit failed")

    monkeypatch.setattr(lifecycle_service, "apply_trigger", boom)

    with pytest.raises(RuntimeError):
        follow_up_service.record_follow_up(
            db, _follow_up(person, mentor, now - timedelta(hours=1)), mentor.id, now=now
        )

    db.rollback()
    assert db.query(FollowUp).filter(FollowUp.person_id == person.id).count() == 1
    db.refresh(person)
    assert person.status == PersonStatus.TO_VISIT.value

    monkeypatch.undo()
    follow_up_service.record_follow_up(
        db, _follow_up(person, mentor, now - timedelta(minutes=5)), mentor.id, now=now
    )
    db.refresh(person)
    assert person.status == PersonStatus.IN_FOLLOW_UP.value


def test_record_follow_up_unknown_person(db, make_mentor, make_person, now):
    mentor = make_mentor()
    ghost = make_person(mentor=mentor)
    data = _follow_up(ghost, mentor, now - timedelta(hours=1))
    data.person_id = uuid4()

    with pytest.raises(PersonNotFoundError):
        follow_up_service.record_follow_up(db, data, mentor.id, now=now)


def test_record_follow_up_unknown_mentor(db, make_mentor, make_person, now):
    mentor = make_mentor()
    person = make_person(mentor=mentor)

    with pytest.raises(UserNotFoundError):
        follow_up_service.record_follow_up(
            db, _follow_up(person, mentor, now - timedelta(hours=1)), uuid4(), now=now
        )
    assert db.query(FollowUp).count() == 0


def test_set_status_notifies_assigned_mentor(db, make_mentor, make_person, now):
    mentor = make_mentor()
    person = make_person(mentor=mentor, first_name="Awa", last_name="Kone")

    updated = lifecycle_service.set_status(db, person.id, PersonStatus.INTEGRATED, now=now)

    assert updated.status == PersonStatus.INTEGRATED.value
    notification = db.query(Notification).one()
    assert notification.user_id == mentor.id
    assert notification.type == NotificationType.STATUS_CHANGE.value
    assert notification.title == "Status change"
    assert notification.message == "Awa Kone is now integrated"


def test_set_status_allows_any_transition(db, make_person):
    person = make_person(status=PersonStatus.INTEGRATED)

    updated = lifecycle_service.set_status(db, person.id, PersonStatus.TO_VISIT)

    assert updated.status == PersonStatus.TO_VISIT.value


def test_set_same_status_still_notifies(db, make_mentor, make_person):
    mentor = make_mentor()
    person = make_person(mentor=mentor, status=PersonStatus.IN_FOLLOW_UP)

    lifecycle_service.set_status(db, person.id, PersonStatus.IN_FOLLOW_UP)
    lifecycle_service.set_status(db, person.id, PersonStatus.IN_FOLLOW_UP)

    assert db.query(Notification).filter(Notification.user_id == mentor.id).count() == 2


def test_set_status_without_mentor_emits_nothing(db, make_person):
    person = make_person()

    lifecycle_service.set_status(db, person.id, PersonStatus.LONG_ABSENT)

    assert db.query(Notification).count() == 0


def test_set_status_unknown_person(db):
    with pytest.raises(PersonNotFoundError):
        lifecycle_service.set_status(db, uuid4(), PersonStatus.INTEGRATED)


@pytest.mark.parametrize("role", [Role.PASTOR, Role.ADMIN])
def test_pastor_or_admin_can_record_follow_up(db, make_mentor, make_person, now, role):
    mentor = make_mentor()
    person = make_person(mentor=mentor)
    staff = make_mentor(first_name="Staff", role=role)

    follow_up = follow_up_service.record_follow_up(
        db, _follow_up(person, staff, now - timedelta(hours=1)), staff.id, now=now
    )

    assert follow_up.mentor_id == staff.id
    db.refresh(person)
    assert person.status == PersonStatus.IN_FOLLOW_UP.value
    assert person.assigned_mentor_id == mentor.id


@pytest.mark.parametrize("role, is_active", [(Role.CAN_COMMITTEE, True), (Role.MENTOR, False)])
def test_committee_or_inactive_user_cannot_record_follow_up(
    db, make_mentor, make_person, now, role, is_active
):
    person = make_person(mentor=make_mentor())
    user = make_mentor(role=role, is_active=is_active)

    with pytest.raises(UserNotFoundError):
        follow_up_service.record_follow_up(
            db, _follow_up(person, user, now - timedelta(hours=1)), user.id, now=now
        )
    assert db.query(FollowUp).count() == 0
