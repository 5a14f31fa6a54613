"""
Job queue - the jobs table backing queued notifications and reminder passes.

A job moves pending -> running -> completed, or back to pending after a
failure until max_attempts is spent, then failed.
"""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from flock.core.clock import resolve_now
from flock.core.structured_logging import build_log_context
from flock.db.enums import JobStatus, JobType
from flock.db.models import Job

logger = logging.getLogger(__name__)


def schedule_job(
    db: Session,
    job_type: JobType,
    payload: dict,
    run_at: datetime | None = None,
    idempotency_key: str | None = None,
) -> Job | None:
    """
    Enqueue a job, due immediately unless run_at is given.

    With an idempotency_key, a second call for the same key returns None
    instead of creating a duplicate (also when two writers race).
    """
    if idempotency_key and db.query(Job.id).filter(Job.idempotency_key == idempotency_key).first():
        return None

    job = Job(
        job_type=JobType(job_type).value,
        payload=payload,
        run_at=resolve_now(run_at),
        status=JobStatus.PENDING.value,
        idempotency_key=idempotency_key,
    )
    db.add(job)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if idempotency_key is None:
            raise
        return None
    db.refresh(job)
    return job


def claim_due_jobs(db: Session, limit: int = 10, now: datetime | None = None) -> list[Job]:
    """
    Take up to `limit` pending jobs whose run_at has passed, oldest first.

    Claimed jobs are flipped to running and their attempt counted in one commit.
    """
    now = resolve_now(now)
    jobs = (
        db.query(Job)
        .filter(Job.status == JobStatus.PENDING.value, Job.run_at <= now)
        .order_by(Job.run_at, Job.created_at)
        .limit(limit)
        .all()
    )
    for job in jobs:
        job.status = JobStatus.RUNNING.value
        job.attempts += 1
    if jobs:
        db.commit()
    return jobs


def finish_job(
    db: Session,
    job: Job,
    error: str | None = None,
    now: datetime | None = None,
) -> Job:
    """Record the outcome of a claimed job. A failure with attempts left goes back to pending."""
    if error is None:
        job.status = JobStatus.COMPLETED.value
        job.completed_at = resolve_now(now)
        job.last_error = None
    else:
        job.last_error = error
        retry = job.attempts < job.max_attempts
        job.status = JobStatus.PENDING.value if retry else JobStatus.FAILED.value
        logger.warning(
            "Job attempt %s/%s failed%s",
            job.attempts,
            job.max_attempts,
            "; will retry" if retry else "",
            extra=build_log_context(job_id=job.id),
        )
    db.commit()
    db.refresh(job)
    return job
