"""Time source for the core services.

Services take an optional ``now`` keyword and fall back to :func:`utcnow`, so
tests pin instants without patching the datetime module.
"""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def resolve_now(now: datetime | None) -> datetime:
    """Return ``now`` normalized to aware UTC, defaulting to the clock."""
    if now is None:
        return utcnow()
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)
