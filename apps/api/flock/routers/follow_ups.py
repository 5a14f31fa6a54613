"""Follow-ups router - record and list mentor interactions."""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from flock.core.clock import resolve_now
from flock.core.deps import get_db
from flock.db.enums import FollowUpOutcome
from flock.schemas.follow_up import FollowUpCreate, FollowUpListResponse, FollowUpRead
from flock.services import follow_up_service
from flock.utils.pagination import PaginationParams, get_pagination

router = APIRouter(prefix="/follow-ups", tags=["follow-ups"])


@router.post("", response_model=FollowUpRead, status_code=201)
def record_follow_up(data: FollowUpCreate, db: Session = Depends(get_db)):
    """Record an interaction. A visitor still to visit moves to in follow-up."""
    return follow_up_service.record_follow_up(db, data, mentor_id=data.mentor_id)


@router.get("", response_model=FollowUpListResponse)
def list_follow_ups(
    person_id: UUID | None = Query(None),
    mentor_id: UUID | None = Query(None),
    outcome: FollowUpOutcome | None = Query(None),
    date_from: datetime | None = Query(None),
    date_to: datetime | None = Query(None),
    pagination: PaginationParams = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    if date_from and date_to and resolve_now(date_to) < resolve_now(date_from):
        raise HTTPException(status_code=422, detail="date_to must be after date_from")

    follow_ups, total = follow_up_service.list_follow_ups(
        db,
        page=pagination.page,
        per_page=pagination.per_page,
        person_id=person_id,
        mentor_id=mentor_id,
        outcome=outcome,
        date_from=date_from,
        date_to=date_to,
    )
    pages = (total + pagination.per_page - 1) // pagination.per_page
    return FollowUpListResponse(
        items=[FollowUpRead.model_validate(f) for f in follow_ups],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        pages=pages,
    )
