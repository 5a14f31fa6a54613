"""Pydantic schemas for visitors (persons)."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from flock.db.enums import Gender, MaritalStatus, PersonStatus
from flock.utils.normalization import normalize_name, normalize_phone, normalize_text


class _PersonFields(BaseModel):
    @field_validator("first_name", "last_name", check_fields=False)
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            return None
        cleaned = normalize_name(v)
        if not cleaned:
            raise ValueError("Name cannot be blank")
        return cleaned

    @field_validator("phone", check_fields=False)
    @classmethod
    def validate_phone(cls, v: str | None) -> str | None:
        return normalize_phone(v)

    @field_validator("email", mode="before", check_fields=False)
    @classmethod
    def blank_email(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator(
        "address",
        "commune",
        "quartier",
        "profession",
        "how_heard_about_church",
        "prayer_requests",
        check_fields=False,
    )
    @classmethod
    def validate_text(cls, v: str | None) -> str | None:
        return normalize_text(v)


class PersonCreate(_PersonFields):
    """Request schema for registering a visitor."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    gender: Gender
    date_of_birth: date | None = None
    phone: str | None = Field(None, max_length=30)
    email: EmailStr | None = None
    address: str | None = None
    commune: str | None = Field(None, max_length=100)
    quartier: str | None = Field(None, max_length=100)
    profession: str | None = Field(None, max_length=100)
    marital_status: MaritalStatus | None = None
    how_heard_about_church: str | None = None
    prayer_requests: str | None = None
    first_visit_date: date | None = None  # Defaults to the intake day


class PersonUpdate(_PersonFields):
    """Partial update of free-form fields. Status, mentor and first visit are not editable here."""

    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    gender: Gender | None = None
    date_of_birth: date | None = None
    phone: str | None = Field(None, max_length=30)
    email: EmailStr | None = None
    address: str | None = None
    commune: str | None = Field(None, max_length=100)
    quartier: str | None = Field(None, max_length=100)
    profession: str | None = Field(None, max_length=100)
    marital_status: MaritalStatus | None = None
    how_heard_about_church: str | None = None
    prayer_requests: str | None = None


class PersonStatusUpdate(BaseModel):
    status: PersonStatus


class PersonMentorUpdate(BaseModel):
    mentor_id: UUID


class MentorSummary(BaseModel):
    id: UUID
    first_name: str
    last_name: str
    email: str

    model_config = {"from_attributes": True}


class PersonRead(BaseModel):
    """Full visitor response."""

    id: UUID
    first_name: str
    last_name: str
    gender: str
    date_of_birth: date | None
    phone: str | None
    email: str | None
    address: str | None
    commune: str | None
    quartier: str | None
    profession: str | None
    marital_status: str | None
    how_heard_about_church: str | None
    prayer_requests: str | None
    status: PersonStatus
    assigned_mentor_id: UUID | None
    assigned_mentor: MentorSummary | None = None
    first_visit_date: date
    created_by_user_id: UUID | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PersonListItem(BaseModel):
    id: UUID
    first_name: str
    last_name: str
    phone: str | None
    commune: str | None
    status: PersonStatus
    assigned_mentor_id: UUID | None
    first_visit_date: date
    created_at: datetime

    model_config = {"from_attributes": True}


class PersonListResponse(BaseModel):
    items: list[PersonListItem]
    total: int
    page: int
    per_page: int
    pages: int


class PersonBrief(BaseModel):
    id: UUID
    first_name: str
    last_name: str
    phone: str | None
    status: PersonStatus

    model_config = {"from_attributes": True}


class OverdueEntryRead(BaseModel):
    person: PersonBrief
    mentor: MentorSummary
    days_since_contact: int
    last_interaction_date: datetime | None

    model_config = {"from_attributes": True}
