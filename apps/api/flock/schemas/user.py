"""Pydantic schemas for users (mentors, pastors, admins, welcome committee)."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from flock.db.enums import Role
from flock.utils.normalization import normalize_name, normalize_phone, normalize_text


class _UserFields(BaseModel):
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

    @field_validator("church_section", check_fields=False)
    @classmethod
    def validate_section(cls, v: str | None) -> str | None:
        return normalize_text(v)


class UserCreate(_UserFields):
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: Role = Role.MENTOR
    phone: str | None = Field(None, max_length=50)
    church_section: str | None = Field(None, max_length=100)


class UserUpdate(_UserFields):
    """Partial update. Email is the login identity and is not editable."""

    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    role: Role | None = None
    phone: str | None = Field(None, max_length=50)
    church_section: str | None = Field(None, max_length=100)
    is_active: bool | None = None


class UserRead(BaseModel):
    id: UUID
    email: str
    first_name: str
    last_name: str
    phone: str | None
    church_section: str | None
    role: Role
    is_active: bool
    created_at: datetime
    updated_at: datetime
    caseload: int = 0  # Active visitors assigned to this user

    model_config = {"from_attributes": True}
