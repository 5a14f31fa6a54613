"""SQLAlchemy ORM models."""

from __future__ import annotations

from typing import TYPE_CHECKING

import uuid
from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text, false, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from flock.core.clock import utcnow
from flock.db.base import Base

if TYPE_CHECKING:
    from flock.db.models import Person, User


class FollowUp(Base):
    """
    One interaction between a mentor and a visitor.

    Append-only: rows are never updated or deleted. The integer id is
    assigned in insert order and breaks ties between equal interaction dates.
    """

    __tablename__ = "follow_ups"
    __table_args__ = (
        Index("idx_follow_ups_person_date", "person_id", "interaction_date"),
        Index("idx_follow_ups_mentor_date", "mentor_id", "interaction_date"),
        Index("idx_follow_ups_next_action", "mentor_id", "next_action_needed", "next_action_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    person_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("persons.id", ondelete="CASCADE"), nullable=False
    )
    # Acting mentor at the time of the interaction (not the current assignee)
    mentor_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )

    interaction_type: Mapped[str] = mapped_column(String(20), nullable=False)
    interaction_date: Mapped[datetime] = mapped_column(nullable=False)
    outcome: Mapped[str] = mapped_column(String(20), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    next_action_needed: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )
    next_action_date: Mapped[datetime | None] = mapped_column(nullable=True)
    next_action_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )

    # Relationships
    person: Mapped["Person"] = relationship(back_populates="follow_ups")
    mentor: Mapped["User"] = relationship()
