"""Follow-up service - recording interactions and mentor statistics."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from flock.core.clock import resolve_now
from flock.core.exceptions import PersonNotFoundError
from flock.core.structured_logging import build_log_context
from flock.db.enums import FollowUpOutcome, StatsPeriod
from flock.db.models import FollowUp, Person
from flock.schemas.follow_up import FollowUpCreate
from flock.services import lifecycle_service, mentor_service
from flock.services.lifecycle_service import LifecycleTrigger

logger = logging.getLogger(__name__)


def record_follow_up(
    db: Session,
    data: FollowUpCreate,
    mentor_id: UUID,
    now: datetime | None = None,
) -> FollowUp:
    """
    Record an interaction and advance the visitor's lifecycle.

    The acting user may be any active mentor, pastor or admin, not only the
    visitor's assigned mentor.

    The follow-up is committed on its own first; the automatic status change
    is a second commit. If that second commit fails the error propagates and
    the follow-up stays recorded. The next follow-up re-applies the rule.
    """
    now = resolve_now(now)
    person = db.get(Person, data.person_id)
    if not person:
        raise PersonNotFoundError(data.person_id)
    mentor = mentor_service.get_follow_up_actor(db, mentor_id)

    follow_up = FollowUp(
        person_id=person.id,
        mentor_id=mentor.id,
        interaction_type=data.interaction_type.value,
        interaction_date=data.interaction_date,
        outcome=data.outcome.value,
        notes=data.notes,
        next_action_needed=data.next_action_needed,
        next_action_date=data.next_action_date if data.next_action_needed else None,
        next_action_notes=data.next_action_notes if data.next_action_needed else None,
        created_at=now,
    )
    db.add(follow_up)
    db.commit()
    db.refresh(follow_up)

    logger.info(
        "Follow-up %s recorded",
        follow_up.id,
        extra=build_log_context(person_id=person.id, user_id=mentor.id),
    )

    lifecycle_service.apply_trigger(db, person, LifecycleTrigger.FOLLOW_UP_RECORDED, now=now)
    return follow_up


def list_follow_ups(
    db: Session,
    page: int = 1,
    per_page: int = 20,
    person_id: UUID | None = None,
    mentor_id: UUID | None = None,
    outcome: FollowUpOutcome | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
) -> tuple[list[FollowUp], int]:
    """
    List follow-ups, latest interaction first (ties: most recently recorded first).

    Callers restrict a mentor to their own interactions by passing mentor_id.

    Returns:
        (follow_ups, total_count)
    """
    query = db.query(FollowUp)
    if person_id:
        query = query.filter(FollowUp.person_id == person_id)
    if mentor_id:
        query = query.filter(FollowUp.mentor_id == mentor_id)
    if outcome:
        query = query.filter(FollowUp.outcome == FollowUpOutcome(outcome).value)
    if date_from:
        query = query.filter(FollowUp.interaction_date >= resolve_now(date_from))
    if date_to:
        query = query.filter(FollowUp.interaction_date <= resolve_now(date_to))

    total = query.count()
    follow_ups = (
        query.order_by(FollowUp.interaction_date.desc(), FollowUp.id.desc())
        .offset((page - 1) * per_page)
        .limit(per_page)
        .all()
    )
    return follow_ups, total


def get_mentor_follow_up_stats(
    db: Session,
    mentor_id: UUID,
    period: StatsPeriod = StatsPeriod.MONTH,
    now: datetime | None = None,
) -> dict:
    """Counts of a mentor's interactions since now - period, by outcome and type."""
    period = StatsPeriod(period)
    since = resolve_now(now) - timedelta(days=period.days)
    base = [FollowUp.mentor_id == mentor_id, FollowUp.interaction_date >= since]

    total = db.query(func.count(FollowUp.id)).filter(*base).scalar() or 0
    by_outcome = (
        db.query(FollowUp.outcome, func.count(FollowUp.id))
        .filter(*base)
        .group_by(FollowUp.outcome)
        .all()
    )
    by_type = (
        db.query(FollowUp.interaction_type, func.count(FollowUp.id))
        .filter(*base)
        .group_by(FollowUp.interaction_type)
        .all()
    )

    return {
        "period": period,
        "since": since,
        "total_follow_ups": total,
        "by_outcome": {outcome: count for outcome, count in by_outcome},
        "by_type": {interaction_type: count for interaction_type, count in by_type},
    }
