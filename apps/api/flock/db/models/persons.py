"""SQLAlchemy ORM models."""

from __future__ import annotations

from typing import TYPE_CHECKING

import uuid
from datetime import date, datetime

from sqlalchemy import Date, ForeignKey, Index, String, Text, func, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from flock.core.clock import utcnow
from flock.db.base import Base
from flock.db.enums import DEFAULT_PERSON_STATUS

if TYPE_CHECKING:
    from flock.db.models import FollowUp, User


class Person(Base):
    """
    A visitor tracked from first contact through integration.

    Never physically deleted. status and assigned_mentor_id are owned by the
    lifecycle and assignment services; first_visit_date is fixed at intake.
    """

    __tablename__ = "persons"
    __table_args__ = (
        Index("idx_persons_mentor_status", "assigned_mentor_id", "status"),
        Index("idx_persons_status_created", "status", "created_at"),
        Index("idx_persons_first_visit", "first_visit_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)

    # Identity / contact (free-form)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    gender: Mapped[str] = mapped_column(String(1), nullable=False)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    commune: Mapped[str | None] = mapped_column(String(100), nullable=True)
    quartier: Mapped[str | None] = mapped_column(String(100), nullable=True)
    profession: Mapped[str | None] = mapped_column(String(100), nullable=True)
    marital_status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    how_heard_about_church: Mapped[str | None] = mapped_column(Text, nullable=True)
    prayer_requests: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Lifecycle
    status: Mapped[str] = mapped_column(
        String(20),
        default=DEFAULT_PERSON_STATUS.value,
        server_default=text(f"'{DEFAULT_PERSON_STATUS.value}'"),
        nullable=False,
    )
    assigned_mentor_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    first_visit_date: Mapped[date] = mapped_column(Date, nullable=False)

    created_by_user_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )

    # Relationships
    assigned_mentor: Mapped["User | None"] = relationship(
        back_populates="assigned_persons",
        foreign_keys=[assigned_mentor_id],
    )
    created_by: Mapped["User | None"] = relationship(foreign_keys=[created_by_user_id])
    follow_ups: Mapped[list["FollowUp"]] = relationship(
        back_populates="person",
        order_by="FollowUp.id",
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()
