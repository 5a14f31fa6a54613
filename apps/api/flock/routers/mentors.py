"""Mentors router - workload, upcoming actions and statistics."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from flock.core.deps import get_db
from flock.db.enums import StatsPeriod
from flock.schemas.follow_up import FollowUpStatsRead, UpcomingActionRead
from flock.schemas.settings import MentorWorkloadRead
from flock.services import assignment_service, follow_up_scanner, follow_up_service, mentor_service

router = APIRouter(prefix="/mentors", tags=["mentors"])


@router.get("/workload", response_model=list[MentorWorkloadRead])
def get_workload(db: Session = Depends(get_db)):
    """Active mentors with caseload and capacity, least loaded first."""
    return [
        MentorWorkloadRead(
            mentor_id=w.mentor_id,
            first_name=w.first_name,
            last_name=w.last_name,
            email=w.email,
            caseload=w.caseload,
            capacity=w.capacity,
            is_available=w.is_available,
        )
        for w in assignment_service.get_mentor_workloads(db)
    ]


@router.get("/{mentor_id}/upcoming-actions", response_model=list[UpcomingActionRead])
def get_upcoming_actions(
    mentor_id: UUID,
    days_ahead: int = Query(7, ge=1, le=365),
    db: Session = Depends(get_db),
):
    actions = follow_up_scanner.find_upcoming_actions(db, mentor_id, days_ahead)
    return [UpcomingActionRead.model_validate(a) for a in actions]


@router.get("/{mentor_id}/stats", response_model=FollowUpStatsRead)
def get_stats(
    mentor_id: UUID,
    period: StatsPeriod = Query(StatsPeriod.MONTH),
    db: Session = Depends(get_db),
):
    mentor_service.get_mentor(db, mentor_id)
    return FollowUpStatsRead(**follow_up_service.get_mentor_follow_up_stats(db, mentor_id, period))
