"""Reminder pass job handler."""

from __future__ import annotations

import logging

from flock.services import reminder_service

logger = logging.getLogger(__name__)


async def process_reminder_pass(db, job) -> None:
    """Run the follow-up reminder sweep."""
    logger.info("Processing reminder pass job %s", job.id)
    result = reminder_service.run_reminder_pass(db)
    logger.info(
        "Reminder pass job %s: %s new, %s overdue",
        job.id,
        result["new_reminders"],
        result["overdue_reminders"],
    )
