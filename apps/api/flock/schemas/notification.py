"""Pydantic schemas for in-app notifications."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from flock.db.enums import NotificationType


class NotificationRead(BaseModel):
    id: UUID
    user_id: UUID
    person_id: UUID | None
    type: NotificationType
    title: str
    message: str
    action_url: str | None
    is_read: bool
    read_at: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}


class NotificationListResponse(BaseModel):
    items: list[NotificationRead]
    total: int
    unread_count: int
    page: int
    per_page: int
    pages: int


class MarkAllReadResponse(BaseModel):
    marked_read: int
