"""Notification facade for domain services.

Engines emit NotificationEvents here after their own state change is committed.
Delivery is inline (write the row now) or queued (a notification job for the
worker), per NOTIFICATION_DISPATCH. Either way a failure is logged and
swallowed: the caller's committed change is never undone by a notification.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from flock.core.config import settings
from flock.core.structured_logging import build_log_context
from flock.db.enums import JobType, NotificationType, PersonStatus
from flock.db.models import Notification
from flock.services import job_service, notification_service

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationEvent:
    """A notification to deliver to one user about one person."""

    user_id: UUID
    person_id: UUID
    type: NotificationType
    context: dict[str, Any] = field(default_factory=dict)
    dedupe_key: str | None = None

    def to_payload(self) -> dict:
        return {
            "user_id": str(self.user_id),
            "person_id": str(self.person_id),
            "type": self.type.value,
            "context": dict(self.context),
            "dedupe_key": self.dedupe_key,
        }

    @classmethod
    def from_payload(cls, payload: dict) -> "NotificationEvent":
        """Rebuild an event from a job payload. Raises ValueError/KeyError on bad input."""
        return cls(
            user_id=UUID(str(payload["user_id"])),
            person_id=UUID(str(payload["person_id"])),
            type=NotificationType(payload["type"]),
            context=dict(payload.get("context") or {}),
            dedupe_key=payload.get("dedupe_key"),
        )


def emit(db: Session, event: NotificationEvent) -> Optional[Notification]:
    """
    Deliver or enqueue a notification event.

    Returns the created Notification for inline delivery, otherwise None.
    Never raises.
    """
    try:
        if settings.queue_notifications:
            job_service.schedule_job(
                db,
                job_type=JobType.NOTIFICATION,
                payload=event.to_payload(),
            )
            return None
        return notification_service.deliver_event(db, event)
    except Exception:
        db.rollback()
        logger.exception(
            "Notification delivery failed",
            extra=build_log_context(
                person_id=event.person_id,
                user_id=event.user_id,
                notification_type=event.type.value,
            ),
        )
        return None


# =============================================================================
# Domain event notifications
# =============================================================================


def notify_new_assignment(db: Session, person_id: UUID, mentor_id: UUID) -> Optional[Notification]:
    return emit(
        db,
        NotificationEvent(
            user_id=mentor_id,
            person_id=person_id,
            type=NotificationType.NEW_ASSIGNMENT,
        ),
    )


def notify_status_change(
    db: Session,
    person_id: UUID,
    mentor_id: UUID,
    new_status: PersonStatus,
) -> Optional[Notification]:
    return emit(
        db,
        NotificationEvent(
            user_id=mentor_id,
            person_id=person_id,
            type=NotificationType.STATUS_CHANGE,
            context={"status": PersonStatus(new_status).value},
        ),
    )


def notify_follow_up_reminder(
    db: Session,
    person_id: UUID,
    mentor_id: UUID,
    days: int,
    day: date,
) -> Optional[Notification]:
    return emit(
        db,
        NotificationEvent(
            user_id=mentor_id,
            person_id=person_id,
            type=NotificationType.FOLLOW_UP_REMINDER,
            context={"days": days},
            dedupe_key=notification_service.dedupe_key_for(
                NotificationType.FOLLOW_UP_REMINDER, person_id, day
            ),
        ),
    )


def notify_overdue_visit(
    db: Session,
    person_id: UUID,
    mentor_id: UUID,
    days: int,
    day: date,
) -> Optional[Notification]:
    return emit(
        db,
        NotificationEvent(
            user_id=mentor_id,
            person_id=person_id,
            type=NotificationType.OVERDUE_VISIT,
            context={"days": days},
            dedupe_key=notification_service.dedupe_key_for(
                NotificationType.OVERDUE_VISIT, person_id, day
            ),
        ),
    )
