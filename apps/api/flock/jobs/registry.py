"""Job handler registry."""

from __future__ import annotations

from typing import Awaitable, Callable, Mapping

from flock.db.enums import JobType
from flock.jobs.handlers import notifications, reminders

JobHandler = Callable[[object, object], Awaitable[None]]

JOB_HANDLERS: Mapping[str, JobHandler] = {
    JobType.NOTIFICATION.value: notifications.process_notification,
    JobType.REMINDER_PASS.value: reminders.process_reminder_pass,
}


def resolve_job_handler(job_type: str) -> JobHandler:
    handler = JOB_HANDLERS.get(job_type)
    if not handler:
        raise ValueError(f"Unknown job type: {job_type}")
    return handler
