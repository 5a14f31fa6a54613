"""SQLAlchemy ORM models."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import JSON, Index, Integer, String, Text, func, text
from sqlalchemy.orm import Mapped, mapped_column

from flock.core.clock import utcnow
from flock.db.base import Base
from flock.db.enums import DEFAULT_JOB_STATUS


class Job(Base):
    """
    Background job for async processing.

    Used for: queued notification delivery and the periodic reminder pass.
    Worker polls for pending jobs and processes them.
    """

    __tablename__ = "jobs"
    __table_args__ = (
        Index("idx_jobs_pending", "status", "run_at"),
        Index("uq_job_idempotency", "idempotency_key", unique=True),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)

    job_type: Mapped[str] = mapped_column(String(50), nullable=False)
    payload: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    run_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(20),
        default=DEFAULT_JOB_STATUS.value,
        server_default=text(f"'{DEFAULT_JOB_STATUS.value}'"),
        nullable=False,
    )
    attempts: Mapped[int] = mapped_column(Integer, default=0, server_default=text("0"), nullable=False)
    max_attempts: Mapped[int] = mapped_column(Integer, default=3, server_default=text("3"), nullable=False)
    last_error: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    # Idempotency key for deduplication (unique index)
    idempotency_key: Mapped[str | None] = mapped_column(String(255), nullable=True)
