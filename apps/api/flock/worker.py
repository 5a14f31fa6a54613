"""
Background worker for processing scheduled jobs.

Usage:
    python -m flock.worker

The worker polls for pending jobs and processes them. Every
REMINDER_INTERVAL_HOURS it also enqueues one reminder_pass job; the
idempotency key is derived from the interval bucket, so several workers
running side by side still schedule a single pass per interval.
For production, run this as a separate process (e.g., systemd service, Docker container).
"""

import asyncio
import logging
from datetime import datetime

from flock.core.clock import resolve_now
from flock.core.config import settings
from flock.core.structured_logging import build_log_context, configure_logging
from flock.db.enums import JobType
from flock.db.models import Job
from flock.db.session import SessionLocal
from flock.jobs.registry import resolve_job_handler
from flock.services import job_service

logger = logging.getLogger(__name__)


async def process_job(db, job) -> None:
    logger.info(
        "Processing job %s",
        job.job_type,
        extra=build_log_context(job_id=job.id),
    )
    handler = resolve_job_handler(job.job_type)
    await handler(db, job)


def reminder_bucket_key(now: datetime | None = None) -> str:
    """Idempotency key for the reminder interval containing ``now``."""
    now = resolve_now(now)
    interval_hours = max(settings.REMINDER_INTERVAL_HOURS, 1)
    bucket = int(now.timestamp() // (interval_hours * 3600))
    return f"reminder_pass:{interval_hours}h:{bucket}"


def schedule_reminder_pass(db, now: datetime | None = None) -> Job | None:
    """Enqueue the reminder pass for the current interval. None if already scheduled."""
    return job_service.schedule_job(
        db,
        job_type=JobType.REMINDER_PASS,
        payload={},
        run_at=now,
        idempotency_key=reminder_bucket_key(now),
    )


async def run_once(db, now: datetime | None = None) -> int:
    """Schedule the reminder pass if due, then process one batch. Returns jobs processed."""
    scheduled = schedule_reminder_pass(db, now=now)
    if scheduled:
        logger.info("Scheduled reminder pass job %s", scheduled.id)

    jobs = job_service.claim_due_jobs(db, limit=settings.WORKER_BATCH_SIZE, now=now)
    if jobs:
        logger.info("Claimed %s due jobs", len(jobs))

    for job in jobs:
        try:
            await process_job(db, job)
            job_service.finish_job(db, job, now=now)
            logger.info("Job %s completed successfully", job.id)
        except Exception as e:
            db.rollback()
            job_service.finish_job(db, job, error=str(e), now=now)
            logger.error(
                "Job %s failed: %s",
                job.id,
                type(e).__name__,
                extra=build_log_context(job_id=job.id),
            )
    return len(jobs)


async def worker_loop() -> None:
    """Main worker loop - polls for and processes pending jobs."""
    logger.info(
        "Worker starting (poll interval: %ss, batch size: %s, reminder interval: %sh)",
        settings.WORKER_POLL_INTERVAL,
        settings.WORKER_BATCH_SIZE,
        settings.REMINDER_INTERVAL_HOURS,
    )

    while True:
        with SessionLocal() as db:
            try:
                await run_once(db)
            except Exception:
                logger.exception("Error in worker loop")

        await asyncio.sleep(settings.WORKER_POLL_INTERVAL)


def main() -> None:
    configure_logging(settings.LOG_LEVEL)
    try:
        asyncio.run(worker_loop())
    except KeyboardInterrupt:
        logger.info("Worker stopped")


if __name__ == "__main__":
    main()
