"""
Follow-up scanner - derives overdue visitors and upcoming actions from history.

Read-only: nothing here writes, so repeated scans over unchanged data return
the same result.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, joinedload

from flock.core.clock import resolve_now
from flock.db.enums import PersonStatus
from flock.db.models import FollowUp, Person, User


@dataclass
class OverdueEntry:
    person: Person
    mentor: User
    days_since_contact: int
    last_interaction_date: datetime | None


def _days_since(person: Person, last_interaction: datetime | None, now: datetime) -> int:
    if last_interaction is not None:
        return max((now - last_interaction).days, 0)
    return max((now.date() - person.first_visit_date).days, 0)


def find_overdue(
    db: Session,
    threshold_days: int,
    now: datetime | None = None,
) -> list[OverdueEntry]:
    """
    Active, assigned visitors with no interaction in the last threshold_days.

    A visitor is overdue when they have no follow-up at all, or when their
    latest interaction_date is strictly before now - threshold_days.
    Ordered by days_since_contact descending, then person id.
    """
    now = resolve_now(now)
    cutoff = now - timedelta(days=threshold_days)

    latest = (
        select(
            FollowUp.person_id.label("person_id"),
            func.max(FollowUp.interaction_date).label("last_interaction"),
        )
        .group_by(FollowUp.person_id)
        .subquery()
    )
    stmt = (
        select(Person, latest.c.last_interaction)
        .outerjoin(latest, latest.c.person_id == Person.id)
        .options(joinedload(Person.assigned_mentor))
        .where(
            Person.status.in_(PersonStatus.caseload()),
            Person.assigned_mentor_id.is_not(None),
            or_(
                latest.c.last_interaction.is_(None),
                latest.c.last_interaction < cutoff,
            ),
        )
    )

    entries = [
        OverdueEntry(
            person=person,
            mentor=person.assigned_mentor,
            days_since_contact=_days_since(person, last_interaction, now),
            last_interaction_date=last_interaction,
        )
        for person, last_interaction in db.execute(stmt).unique().all()
    ]
    entries.sort(key=lambda e: (-e.days_since_contact, str(e.person.id)))
    return entries


def find_upcoming_actions(
    db: Session,
    mentor_id: UUID,
    days_ahead: int,
    now: datetime | None = None,
) -> list[FollowUp]:
    """
    Next actions a mentor declared for the window [now, now + days_ahead].

    Both bounds are inclusive. An unknown mentor simply has no actions.
    """
    now = resolve_now(now)
    end = now + timedelta(days=days_ahead)
    return (
        db.query(FollowUp)
        .options(joinedload(FollowUp.person))
        .filter(
            FollowUp.mentor_id == mentor_id,
            FollowUp.next_action_needed.is_(True),
            FollowUp.next_action_date >= now,
            FollowUp.next_action_date <= end,
        )
        .order_by(FollowUp.next_action_date, FollowUp.id)
        .all()
    )
