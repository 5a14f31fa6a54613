"""
Assignment service - balances visitors across mentors under a capacity cap.

Caseload is the number of a mentor's visitors in an active status
(to_visit, in_follow_up). It is counted on every call, never stored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from sqlalchemy import and_, func, select
from sqlalchemy.orm import Session

from flock.core.clock import resolve_now
from flock.core.exceptions import PersonNotFoundError
from flock.core.structured_logging import build_log_context
from flock.db.enums import PersonStatus, Role, SettingKey
from flock.db.models import Person, User
from flock.services import mentor_service, notification_facade, settings_service

logger = logging.getLogger(__name__)


@dataclass
class MentorWorkload:
    mentor_id: UUID
    first_name: str
    last_name: str
    email: str
    caseload: int
    capacity: int

    @property
    def is_available(self) -> bool:
        return self.caseload < self.capacity


def get_mentor_caseloads(db: Session) -> list[tuple[User, int]]:
    """Every active mentor with their current caseload (zero included)."""
    caseload = func.count(Person.id)
    stmt = (
        select(User, caseload)
        .outerjoin(
            Person,
            and_(
                Person.assigned_mentor_id == User.id,
                Person.status.in_(PersonStatus.caseload()),
            ),
        )
        .where(User.role == Role.MENTOR.value, User.is_active.is_(True))
        .group_by(User.id)
    )
    return [(user, count) for user, count in db.execute(stmt).all()]


def get_caseload(db: Session, mentor_id: UUID) -> int:
    return (
        db.query(func.count(Person.id))
        .filter(
            Person.assigned_mentor_id == mentor_id,
            Person.status.in_(PersonStatus.caseload()),
        )
        .scalar()
        or 0
    )


def get_caseloads(db: Session, user_ids: list[UUID]) -> dict[UUID, int]:
    """Caseload per user id; users without active visitors map to 0."""
    if not user_ids:
        return {}
    rows = (
        db.query(Person.assigned_mentor_id, func.count(Person.id))
        .filter(
            Person.assigned_mentor_id.in_(user_ids),
            Person.status.in_(PersonStatus.caseload()),
        )
        .group_by(Person.assigned_mentor_id)
        .all()
    )
    counts = dict.fromkeys(user_ids, 0)
    counts.update({user_id: count for user_id, count in rows})
    return counts


def find_available_mentor(db: Session) -> User | None:
    """
    Pick the least-loaded active mentor still under the cap.

    Ties go to the smallest mentor id (string order). Returns None when every
    mentor is at capacity or there are no mentors.
    """
    capacity = settings_service.get_int_setting(db, SettingKey.MAX_PERSONS_PER_MENTOR)
    candidates = [
        (count, str(user.id), user)
        for user, count in get_mentor_caseloads(db)
        if count < capacity
    ]
    if not candidates:
        logger.info("No mentor under capacity %s", capacity)
        return None
    candidates.sort(key=lambda item: (item[0], item[1]))
    return candidates[0][2]


def assign_mentor(
    db: Session,
    person_id: UUID,
    mentor_id: UUID,
    now: datetime | None = None,
) -> Person:
    """
    Assign (or reassign) a visitor to a mentor.

    The new mentor receives one new_assignment notification. The previous
    mentor, if any, is not notified.
    """
    person = db.get(Person, person_id)
    if not person:
        raise PersonNotFoundError(person_id)
    mentor = mentor_service.get_mentor(db, mentor_id)

    previous_mentor_id = person.assigned_mentor_id
    person.assigned_mentor_id = mentor.id
    person.updated_at = resolve_now(now)
    db.commit()
    db.refresh(person)

    logger.info(
        "Mentor assigned (previous=%s)",
        previous_mentor_id,
        extra=build_log_context(person_id=person.id, user_id=mentor.id),
    )
    notification_facade.notify_new_assignment(db, person.id, mentor.id)
    return person


def get_mentor_workloads(db: Session) -> list[MentorWorkload]:
    capacity = settings_service.get_int_setting(db, SettingKey.MAX_PERSONS_PER_MENTOR)
    workloads = [
        MentorWorkload(
            mentor_id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            caseload=count,
            capacity=capacity,
        )
        for user, count in get_mentor_caseloads(db)
    ]
    workloads.sort(key=lambda w: (w.caseload, str(w.mentor_id)))
    return workloads
