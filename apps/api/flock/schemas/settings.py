"""Pydantic schemas for system settings and mentor workload."""

from uuid import UUID

from pydantic import BaseModel, Field


class SettingRead(BaseModel):
    key: str
    value: str
    description: str | None = None
    is_default: bool = False

    model_config = {"from_attributes": True}


class SettingUpdate(BaseModel):
    value: str = Field(..., min_length=1, max_length=255)


class MentorWorkloadRead(BaseModel):
    mentor_id: UUID
    first_name: str
    last_name: str
    email: str
    caseload: int
    capacity: int
    is_available: bool

    model_config = {"from_attributes": True}


class ReminderPassRead(BaseModel):
    new_reminders: int
    overdue_reminders: int
    skipped_duplicates: int
