"""Notification job handlers."""

from __future__ import annotations

import logging

from flock.services import notification_service
from flock.services.notification_facade import NotificationEvent

logger = logging.getLogger(__name__)


async def process_notification(db, job) -> None:
    """
    Process notification job - create the in-app notification record.

    Malformed payloads are dropped with a warning instead of being retried.
    Delivery errors propagate so the worker retries the job.
    """
    logger.info("Processing notification job %s", job.id)
    try:
        event = NotificationEvent.from_payload(job.payload or {})
    except (KeyError, TypeError, ValueError):
        logger.warning("Invalid notification payload in job %s", job.id)
        return

    notification = notification_service.deliver_event(db, event)
    if notification:
        logger.info("Created notification %s", notification.id)
