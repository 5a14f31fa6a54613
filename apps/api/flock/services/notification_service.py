"""
Notification Service - handles in-app notifications.

Provides CRUD for notifications, the message templates, and delivery of
NotificationEvents emitted by the lifecycle, assignment and reminder engines.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from flock.core.clock import utcnow
from flock.core.exceptions import NotificationNotFoundError
from flock.core.structured_logging import build_log_context
from flock.db.enums import NotificationType, PersonStatus
from flock.db.models import Notification, Person

if TYPE_CHECKING:
    from flock.services.notification_facade import NotificationEvent

logger = logging.getLogger(__name__)


# =============================================================================
# Templates
# =============================================================================

TEMPLATES: dict[NotificationType, tuple[str, str]] = {
    NotificationType.NEW_ASSIGNMENT: (
        "New assignment",
        "{name} has been assigned to you for follow-up",
    ),
    NotificationType.STATUS_CHANGE: (
        "Status change",
        "{name} is now {status_label}",
    ),
    NotificationType.FOLLOW_UP_REMINDER: (
        "Follow-up pending",
        "{name} has been waiting for a follow-up for {days} days",
    ),
    NotificationType.OVERDUE_VISIT: (
        "Overdue visit",
        "Visit to {name} is overdue by {days} days",
    ),
}


def render(type: NotificationType, name: str, context: dict | None = None) -> tuple[str, str]:
    """Render (title, message) for a notification type."""
    title, message = TEMPLATES[type]
    values = dict(context or {})
    values["name"] = name
    status = values.get("status")
    if status and "status_label" not in values:
        values["status_label"] = PersonStatus(status).label
    return title, message.format(**values)


def person_action_url(person_id: UUID) -> str:
    return f"/persons/{person_id}"


def dedupe_key_for(type: NotificationType, person_id: UUID, day) -> str:
    """Day-bucketed key: one notification per (type, person, day)."""
    return f"{type.value}:{person_id}:{day.isoformat()}"


# =============================================================================
# CRUD
# =============================================================================


def create_notification(
    db: Session,
    user_id: UUID,
    type: NotificationType,
    title: str,
    message: str,
    person_id: Optional[UUID] = None,
    action_url: Optional[str] = None,
    dedupe_key: Optional[str] = None,
) -> Optional[Notification]:
    """
    Create a notification.

    Returns None when dedupe_key is already taken. The unique index on
    dedupe_key backs the pre-check when two writers race.
    """
    if dedupe_key:
        existing = db.query(Notification.id).filter(
            Notification.dedupe_key == dedupe_key,
        ).first()
        if existing:
            return None  # Already notified

    notification = Notification(
        user_id=user_id,
        person_id=person_id,
        type=type.value,
        title=title,
        message=message,
        action_url=action_url,
        dedupe_key=dedupe_key,
    )
    db.add(notification)
    try:
        db.commit()
    except IntegrityError:
        if not dedupe_key:
            raise
        db.rollback()
        logger.info(
            "Duplicate notification skipped",
            extra=build_log_context(
                person_id=person_id, user_id=user_id, notification_type=type.value
            ),
        )
        return None
    db.refresh(notification)
    return notification


def deliver_event(db: Session, event: "NotificationEvent") -> Optional[Notification]:
    """
    Resolve the person, render the template and persist the notification.

    Returns None when the person no longer exists or the dedupe key is taken.
    """
    person = db.get(Person, event.person_id)
    if not person:
        logger.warning(
            "Notification target person not found",
            extra=build_log_context(
                person_id=event.person_id,
                user_id=event.user_id,
                notification_type=event.type.value,
            ),
        )
        return None

    title, message = render(event.type, person.full_name, event.context)
    return create_notification(
        db=db,
        user_id=event.user_id,
        type=event.type,
        title=title,
        message=message,
        person_id=person.id,
        action_url=person_action_url(person.id),
        dedupe_key=event.dedupe_key,
    )


def _user_query(
    db: Session,
    user_id: UUID,
    is_read: bool | None = None,
    notification_types: list[str] | None = None,
):
    query = db.query(Notification).filter(Notification.user_id == user_id)
    if is_read is not None:
        query = query.filter(Notification.is_read.is_(is_read))
    if notification_types:
        query = query.filter(Notification.type.in_(notification_types))
    return query


def get_notifications(
    db: Session,
    user_id: UUID,
    is_read: bool | None = None,
    notification_types: list[str] | None = None,
    limit: int = 20,
    offset: int = 0,
) -> list[Notification]:
    """Get notifications for user, newest first."""
    query = _user_query(db, user_id, is_read, notification_types)
    return (
        query.order_by(Notification.created_at.desc(), Notification.id)
        .offset(offset)
        .limit(limit)
        .all()
    )


def count_notifications(
    db: Session,
    user_id: UUID,
    is_read: bool | None = None,
    notification_types: list[str] | None = None,
) -> int:
    return _user_query(db, user_id, is_read, notification_types).count()


def get_unread_count(db: Session, user_id: UUID) -> int:
    """Get count of unread notifications."""
    return _user_query(db, user_id, is_read=False).count()


def mark_read(db: Session, notification_id: UUID, user_id: UUID) -> Notification:
    """Mark a notification as read (scoped to its recipient)."""
    notification = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.user_id == user_id,
    ).first()
    if not notification:
        raise NotificationNotFoundError(notification_id)

    if not notification.is_read:
        notification.is_read = True
        notification.read_at = utcnow()
        db.commit()
        db.refresh(notification)

    return notification


def mark_all_read(db: Session, user_id: UUID) -> int:
    """Mark all notifications as read. Returns count updated."""
    count = db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.is_read.is_(False),
    ).update({"is_read": True, "read_at": utcnow()}, synchronize_session=False)
    db.commit()
    return count
