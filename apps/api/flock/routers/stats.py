"""Stats router - dashboard figures for pastors and admins."""

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from flock.core.deps import get_db
from flock.db.enums import StatsPeriod
from flock.schemas.stats import DashboardStatsRead
from flock.services import stats_service

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/dashboard", response_model=DashboardStatsRead)
def get_dashboard(
    period: StatsPeriod = Query(StatsPeriod.MONTH),
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    db: Session = Depends(get_db),
):
    """
    Visitor, status, commune and mentor figures.

    Pass start_date and end_date together for an explicit range; otherwise the
    last week, month, quarter or year is used.
    """
    return DashboardStatsRead(
        **stats_service.get_dashboard_stats(
            db, period=period, start_date=start_date, end_date=end_date
        )
    )
