"""
Notifications Router - /users/{user_id}/notifications endpoints.

Provides notification listing and read status.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from flock.core.deps import get_db
from flock.db.enums import NotificationType
from flock.schemas.notification import (
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationRead,
)
from flock.services import notification_service
from flock.utils.pagination import PaginationParams, get_pagination

router = APIRouter(prefix="/users/{user_id}/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListResponse)
def list_notifications(
    user_id: UUID,
    is_read: bool | None = Query(None),
    type: list[NotificationType] | None = Query(None),
    pagination: PaginationParams = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    """Get a user's notifications, newest first."""
    types = [t.value for t in type] if type else None
    notifications = notification_service.get_notifications(
        db=db,
        user_id=user_id,
        is_read=is_read,
        notification_types=types,
        limit=pagination.per_page,
        offset=pagination.offset,
    )
    total = notification_service.count_notifications(db, user_id, is_read, types)
    unread_count = notification_service.get_unread_count(db, user_id)

    return NotificationListResponse(
        items=[NotificationRead.model_validate(n) for n in notifications],
        total=total,
        unread_count=unread_count,
        page=pagination.page,
        per_page=pagination.per_page,
        pages=(total + pagination.per_page - 1) // pagination.per_page,
    )


@router.patch("/read-all", response_model=MarkAllReadResponse)
def mark_all_read(user_id: UUID, db: Session = Depends(get_db)):
    count = notification_service.mark_all_read(db, user_id)
    return MarkAllReadResponse(marked_read=count)


@router.patch("/{notification_id}/read", response_model=NotificationRead)
def mark_read(user_id: UUID, notification_id: UUID, db: Session = Depends(get_db)):
    """Mark one notification as read. Only the recipient's own notifications match."""
    return notification_service.mark_read(db, notification_id, user_id)
