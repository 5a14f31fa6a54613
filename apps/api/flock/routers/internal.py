"""
Internal endpoints for scheduled/cron operations.

Protected by X-Internal-Secret header.
Call from an external cron when the worker is not running.
"""

from fastapi import APIRouter, Header, HTTPException

from flock.core.config import settings
from flock.db.session import SessionLocal
from flock.schemas.settings import ReminderPassRead
from flock.services import reminder_service

router = APIRouter(prefix="/internal/scheduled", tags=["internal"])


def verify_internal_secret(x_internal_secret: str = Header(...)):
    """Verify the internal secret header."""
    expected = settings.INTERNAL_SECRET
    if not expected:
        raise HTTPException(status_code=501, detail="INTERNAL_SECRET not configured")
    if x_internal_secret != expected:
        raise HTTPException(status_code=403, detail="Invalid internal secret")


@router.post("/reminders", response_model=ReminderPassRead)
def run_reminders(x_internal_secret: str = Header(...)):
    """
    Run the follow-up reminder pass.

    Safe to call repeatedly: reminders are deduplicated per visitor per day.
    """
    verify_internal_secret(x_internal_secret)

    with SessionLocal() as db:
        result = reminder_service.run_reminder_pass(db)

    return ReminderPassRead(**result)
