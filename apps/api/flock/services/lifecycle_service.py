"""
Lifecycle service - visitor status changes.

Explicit status changes are allowed between any two statuses. Automatic
changes come only from AUTOMATIC_TRANSITIONS, keyed by (trigger, current status).
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from uuid import UUID

from sqlalchemy.orm import Session

from flock.core.clock import resolve_now
from flock.core.exceptions import PersonNotFoundError
from flock.core.structured_logging import build_log_context
from flock.db.enums import PersonStatus
from flock.db.models import Person
from flock.services import notification_facade

logger = logging.getLogger(__name__)


class LifecycleTrigger(str, Enum):
    """Domain events that may move a visitor automatically."""

    FOLLOW_UP_RECORDED = "follow_up_recorded"


AUTOMATIC_TRANSITIONS: dict[tuple[LifecycleTrigger, PersonStatus], PersonStatus] = {
    (LifecycleTrigger.FOLLOW_UP_RECORDED, PersonStatus.TO_VISIT): PersonStatus.IN_FOLLOW_UP,
}


def next_status(trigger: LifecycleTrigger, current: PersonStatus | str) -> PersonStatus | None:
    """Target status for a trigger, or None when no rule matches."""
    return AUTOMATIC_TRANSITIONS.get((trigger, PersonStatus(current)))


def apply_trigger(
    db: Session,
    person: Person,
    trigger: LifecycleTrigger,
    now: datetime | None = None,
) -> PersonStatus | None:
    """
    Apply the automatic rule matching (trigger, person.status), if any.

    Commits and returns the new status. Returns None without writing when no
    rule applies. Automatic transitions do not notify the mentor.
    """
    target = next_status(trigger, person.status)
    if target is None:
        return None

    previous = person.status
    person.status = target.value
    person.updated_at = resolve_now(now)
    db.commit()
    db.refresh(person)
    logger.info(
        "Automatic transition %s -> %s on %s",
        previous,
        target.value,
        trigger.value,
        extra=build_log_context(person_id=person.id),
    )
    return target


def set_status(
    db: Session,
    person_id: UUID,
    new_status: PersonStatus,
    now: datetime | None = None,
) -> Person:
    """
    Set a visitor's status explicitly.

    Setting the current status again is allowed and still notifies the
    assigned mentor.
    """
    person = db.get(Person, person_id)
    if not person:
        raise PersonNotFoundError(person_id)

    new_status = PersonStatus(new_status)
    previous = person.status
    person.status = new_status.value
    person.updated_at = resolve_now(now)
    db.commit()
    db.refresh(person)
    logger.info(
        "Status changed %s -> %s",
        previous,
        new_status.value,
        extra=build_log_context(person_id=person.id),
    )

    if person.assigned_mentor_id:
        notification_facade.notify_status_change(
            db, person.id, person.assigned_mentor_id, new_status
        )
    return person
