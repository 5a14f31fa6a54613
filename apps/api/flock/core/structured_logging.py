"""Structured logging helpers (PII-safe: identifiers only, never names or contact data)."""

import logging
from typing import Any
from uuid import UUID


def build_log_context(
    *,
    person_id: UUID | str | None = None,
    user_id: UUID | str | None = None,
    job_id: UUID | str | None = None,
    notification_type: str | None = None,
    route: str | None = None,
    method: str | None = None,
) -> dict[str, Any]:
    """Return a PII-safe log context dict."""
    context: dict[str, Any] = {}
    if person_id:
        context["person_id"] = str(person_id)
    if user_id:
        context["user_id"] = str(user_id)
    if job_id:
        context["job_id"] = str(job_id)
    if notification_type:
        context["notification_type"] = notification_type
    if route:
        context["route"] = route
    if method:
        context["method"] = method
    return context


def configure_logging(level: str = "INFO") -> None:
    """Fallback stdout logging for the worker and CLI processes."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
