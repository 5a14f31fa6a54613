"""Service layer for automated follow-up reminders."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import TypedDict

from sqlalchemy import select
from sqlalchemy.orm import Session

from flock.core.clock import resolve_now
from flock.core.config import settings
from flock.db.enums import PersonStatus, SettingKey
from flock.db.models import FollowUp, Person
from flock.services import follow_up_scanner, notification_facade, settings_service

logger = logging.getLogger(__name__)


class ReminderPassResult(TypedDict):
    new_reminders: int  # New visitors selected for a follow_up_reminder
    overdue_reminders: int  # Overdue visitors selected for an overdue_visit
    skipped_duplicates: int  # Inline deliveries that created nothing (already sent today)


def find_new_visitors_without_follow_up(
    db: Session,
    days: int,
    now: datetime | None = None,
) -> list[Person]:
    """Assigned visitors still in to_visit, never contacted, registered at least `days` ago."""
    cutoff = resolve_now(now) - timedelta(days=days)
    has_follow_up = select(FollowUp.id).where(FollowUp.person_id == Person.id).exists()
    return (
        db.query(Person)
        .filter(
            Person.status == PersonStatus.TO_VISIT.value,
            Person.assigned_mentor_id.is_not(None),
            Person.created_at <= cutoff,
            ~has_follow_up,
        )
        .order_by(Person.created_at, Person.id)
        .all()
    )


def run_reminder_pass(db: Session, now: datetime | None = None) -> ReminderPassResult:
    """
    Create reminder notifications for mentors.

    - follow_up_reminder for new visitors nobody has contacted after
      reminder_days_new days
    - overdue_visit for active visitors without an interaction in the last
      reminder_days_follow_up days, counted from the first visit when they
      were never contacted (visitors already reminded above are skipped)

    Every reminder is keyed per (type, person, day), so a second pass on the
    same day creates nothing.
    """
    now = resolve_now(now)
    day = now.date()
    days_new = settings_service.get_int_setting(db, SettingKey.REMINDER_DAYS_NEW)
    days_follow_up = settings_service.get_int_setting(db, SettingKey.REMINDER_DAYS_FOLLOW_UP)
    inline = not settings.queue_notifications

    skipped = 0

    new_visitors = find_new_visitors_without_follow_up(db, days_new, now=now)
    reminded = set()
    for person in new_visitors:
        reminded.add(person.id)
        notification = notification_facade.notify_follow_up_reminder(
            db, person.id, person.assigned_mentor_id, days=days_new, day=day
        )
        if inline and notification is None:
            skipped += 1

    overdue = [
        entry
        for entry in follow_up_scanner.find_overdue(db, days_follow_up, now=now)
        if entry.person.id not in reminded and entry.days_since_contact >= days_follow_up
    ]
    for entry in overdue:
        notification = notification_facade.notify_overdue_visit(
            db, entry.person.id, entry.mentor.id, days=entry.days_since_contact, day=day
        )
        if inline and notification is None:
            skipped += 1

    result: ReminderPassResult = {
        "new_reminders": len(new_visitors),
        "overdue_reminders": len(overdue),
        "skipped_duplicates": skipped,
    }
    logger.info(
        "Reminder pass: %s new, %s overdue, %s skipped",
        result["new_reminders"],
        result["overdue_reminders"],
        result["skipped_duplicates"],
    )
    return result
