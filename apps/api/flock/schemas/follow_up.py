"""Pydantic schemas for follow-up interactions."""

from datetime import datetime, timedelta
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from flock.core.clock import resolve_now, utcnow
from flock.db.enums import FollowUpOutcome, InteractionType, StatsPeriod

MAX_LOOKBACK = timedelta(days=365)
MAX_LOOKAHEAD = timedelta(days=365)


class FollowUpCreate(BaseModel):
    """Request schema for recording an interaction."""

    person_id: UUID
    mentor_id: UUID
    interaction_type: InteractionType
    interaction_date: datetime
    outcome: FollowUpOutcome
    notes: str | None = Field(None, max_length=1000)
    next_action_needed: bool = False
    next_action_date: datetime | None = None
    next_action_notes: str | None = Field(None, max_length=500)

    @field_validator("interaction_date", "next_action_date")
    @classmethod
    def as_utc(cls, v: datetime | None) -> datetime | None:
        if v is None:
            return None
        return resolve_now(v)

    @model_validator(mode="after")
    def validate_dates(self) -> "FollowUpCreate":
        """Interaction within the past year; next action after it and within a year."""
        now = utcnow()
        if self.interaction_date > now:
            raise ValueError("interaction_date cannot be in the future")
        if self.interaction_date < now - MAX_LOOKBACK:
            raise ValueError("interaction_date cannot be more than one year ago")

        if self.next_action_needed:
            if self.next_action_date is None:
                raise ValueError("next_action_date is required when next_action_needed is set")
            if self.next_action_date <= self.interaction_date:
                raise ValueError("next_action_date must be after interaction_date")
            if self.next_action_date > now + MAX_LOOKAHEAD:
                raise ValueError("next_action_date cannot be more than one year ahead")
        else:
            self.next_action_date = None
            self.next_action_notes = None
        return self


class PersonRef(BaseModel):
    id: UUID
    first_name: str
    last_name: str
    phone: str | None = None
    status: str

    model_config = {"from_attributes": True}


class FollowUpRead(BaseModel):
    id: int
    person_id: UUID
    mentor_id: UUID
    interaction_type: InteractionType
    interaction_date: datetime
    outcome: FollowUpOutcome
    notes: str | None
    next_action_needed: bool
    next_action_date: datetime | None
    next_action_notes: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class UpcomingActionRead(FollowUpRead):
    person: PersonRef


class FollowUpListResponse(BaseModel):
    items: list[FollowUpRead]
    total: int
    page: int
    per_page: int
    pages: int


class FollowUpStatsRead(BaseModel):
    period: StatsPeriod
    since: datetime
    total_follow_ups: int
    by_outcome: dict[str, int]
    by_type: dict[str, int]
