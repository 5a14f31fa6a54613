"""Dashboard statistics - grouped counts over visitors, mentors and follow-ups."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Any

from sqlalchemy import and_, func
from sqlalchemy.orm import Session

from flock.core.clock import resolve_now
from flock.core.exceptions import ValidationError
from flock.db.enums import PersonStatus, Role, StatsPeriod
from flock.db.models import FollowUp, Person, User

TOP_COMMUNES = 10


def resolve_range(
    period: StatsPeriod = StatsPeriod.MONTH,
    start_date: date | None = None,
    end_date: date | None = None,
    now: datetime | None = None,
) -> tuple[datetime, datetime]:
    """
    Window covered by the dashboard as [start, end) instants.

    An explicit start_date/end_date pair wins over the period and covers both
    days in full. Otherwise the window is the last `period.days` days up to now.
    """
    if (start_date is None) != (end_date is None):
        raise ValidationError("start_date and end_date must be given together")
    if start_date and end_date:
        if end_date < start_date:
            raise ValidationError("end_date must be on or after start_date")
        start = datetime.combine(start_date, time.min, tzinfo=timezone.utc)
        end = datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=timezone.utc)
        return start, end

    end = resolve_now(now)
    return end - timedelta(days=StatsPeriod(period).days), end


# ============================================================================
# Visitors
# ============================================================================

def count_new_visitors(db: Session, start: datetime, end: datetime) -> int:
    """Visitors whose first visit falls in the window (by calendar day)."""
    last_day = (end - timedelta(microseconds=1)).date()
    return (
        db.query(func.count(Person.id))
        .filter(Person.first_visit_date >= start.date(), Person.first_visit_date <= last_day)
        .scalar()
        or 0
    )


def get_status_distribution(db: Session) -> dict[str, int]:
    """Visitor count for every status, zero included."""
    rows = db.query(Person.status, func.count(Person.id)).group_by(Person.status).all()
    counts = {status.value: 0 for status in PersonStatus}
    counts.update({status: count for status, count in rows})
    return counts


def get_top_communes(db: Session, limit: int = TOP_COMMUNES) -> list[dict[str, Any]]:
    results = (
        db.query(Person.commune, func.count(Person.id).label("count"))
        .filter(Person.commune.is_not(None))
        .group_by(Person.commune)
        .order_by(func.count(Person.id).desc(), Person.commune)
        .limit(limit)
        .all()
    )
    return [{"commune": r.commune, "count": r.count} for r in results]


# ============================================================================
# Mentors
# ============================================================================

def get_mentor_activity(db: Session, start: datetime, end: datetime) -> list[dict[str, Any]]:
    """
    Per active mentor: visitors currently assigned (any status) and
    interactions recorded in the window.
    """
    assigned = (
        db.query(Person.assigned_mentor_id.label("mentor_id"), func.count(Person.id).label("n"))
        .filter(Person.assigned_mentor_id.is_not(None))
        .group_by(Person.assigned_mentor_id)
        .subquery()
    )
    interactions = (
        db.query(FollowUp.mentor_id.label("mentor_id"), func.count(FollowUp.id).label("n"))
        .filter(FollowUp.interaction_date >= start, FollowUp.interaction_date < end)
        .group_by(FollowUp.mentor_id)
        .subquery()
    )
    results = (
        db.query(
            User.id,
            User.first_name,
            User.last_name,
            func.coalesce(assigned.c.n, 0).label("assigned_count"),
            func.coalesce(interactions.c.n, 0).label("interactions_count"),
        )
        .select_from(User)
        .outerjoin(assigned, assigned.c.mentor_id == User.id)
        .outerjoin(interactions, interactions.c.mentor_id == User.id)
        .filter(User.role == Role.MENTOR.value, User.is_active.is_(True))
        .order_by(User.last_name, User.first_name, User.id)
        .all()
    )
    return [
        {
            "mentor_id": r.id,
            "mentor_name": f"{r.first_name} {r.last_name}",
            "assigned_count": r.assigned_count,
            "interactions_count": r.interactions_count,
        }
        for r in results
    ]


def count_active_mentors(db: Session, start: datetime, end: datetime) -> int:
    """Active mentors with at least one interaction in the window."""
    return (
        db.query(func.count(func.distinct(User.id)))
        .select_from(User)
        .join(
            FollowUp,
            and_(
                FollowUp.mentor_id == User.id,
                FollowUp.interaction_date >= start,
                FollowUp.interaction_date < end,
            ),
        )
        .filter(User.role == Role.MENTOR.value, User.is_active.is_(True))
        .scalar()
        or 0
    )


# ============================================================================
# Dashboard
# ============================================================================

def integration_rate(by_status: dict[str, int], total: int) -> float:
    """Share of integrated visitors as a percentage with one decimal."""
    if total <= 0:
        return 0.0
    return round(by_status.get(PersonStatus.INTEGRATED.value, 0) * 100 / total, 1)


def get_dashboard_stats(
    db: Session,
    period: StatsPeriod = StatsPeriod.MONTH,
    start_date: date | None = None,
    end_date: date | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    start, end = resolve_range(period, start_date, end_date, now=now)
    custom = start_date is not None

    total = db.query(func.count(Person.id)).scalar() or 0
    by_status = get_status_distribution(db)

    return {
        "period": None if custom else StatsPeriod(period),
        "start_date": start.date(),
        "end_date": (end - timedelta(microseconds=1)).date() if custom else end.date(),
        "new_visitors": count_new_visitors(db, start, end),
        "total_persons": total,
        "by_status": by_status,
        "by_commune": get_top_communes(db),
        "by_mentor": get_mentor_activity(db, start, end),
        "integration_rate": integration_rate(by_status, total),
        "active_mentors": count_active_mentors(db, start, end),
    }
