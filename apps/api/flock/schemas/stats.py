"""Pydantic schemas for the dashboard statistics."""

from datetime import date
from uuid import UUID

from pydantic import BaseModel

from flock.db.enums import StatsPeriod


class CommuneCount(BaseModel):
    commune: str
    count: int


class MentorActivity(BaseModel):
    mentor_id: UUID
    mentor_name: str
    assigned_count: int
    interactions_count: int


class DashboardStatsRead(BaseModel):
    period: StatsPeriod | None  # None when an explicit date range was requested
    start_date: date
    end_date: date
    new_visitors: int
    total_persons: int
    by_status: dict[str, int]
    by_commune: list[CommuneCount]
    by_mentor: list[MentorActivity]
    integration_rate: float  # Percentage of visitors integrated, one decimal
    active_mentors: int
