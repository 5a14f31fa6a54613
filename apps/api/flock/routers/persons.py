"""Persons router - visitor intake, lookup, status and mentor changes."""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from flock.core.deps import get_db
from flock.db.enums import PersonStatus, SettingKey
from flock.schemas.person import (
    OverdueEntryRead,
    PersonCreate,
    PersonListItem,
    PersonListResponse,
    PersonMentorUpdate,
    PersonRead,
    PersonStatusUpdate,
    PersonUpdate,
)
from flock.services import (
    assignment_service,
    follow_up_scanner,
    lifecycle_service,
    person_service,
    settings_service,
)
from flock.utils.pagination import PaginatedResponse, PaginationParams, get_pagination

router = APIRouter(prefix="/persons", tags=["persons"])


@router.post("", response_model=PersonRead, status_code=201)
def create_person(
    data: PersonCreate,
    created_by_user_id: UUID | None = Query(None),
    db: Session = Depends(get_db),
):
    """Register a visitor and assign a mentor when one has room."""
    person = person_service.create_person(db, data, created_by_user_id=created_by_user_id)
    return person_service.get_person(db, person.id)


@router.get("", response_model=PersonListResponse)
def list_persons(
    status: PersonStatus | None = Query(None),
    mentor_id: UUID | None = Query(None),
    q: str | None = Query(None, max_length=100),
    commune: str | None = Query(None, max_length=100),
    first_visit_from: date | None = Query(None),
    first_visit_to: date | None = Query(None),
    pagination: PaginationParams = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    persons, total = person_service.list_persons(
        db,
        page=pagination.page,
        per_page=pagination.per_page,
        status=status,
        mentor_id=mentor_id,
        q=q,
        commune=commune,
        first_visit_from=first_visit_from,
        first_visit_to=first_visit_to,
    )
    page = PaginatedResponse.create(
        [PersonListItem.model_validate(p) for p in persons], total, pagination
    )
    return PersonListResponse(
        items=page.items,
        total=page.total,
        page=page.page,
        per_page=page.per_page,
        pages=page.pages,
    )


@router.get("/overdue", response_model=list[OverdueEntryRead])
def list_overdue(
    threshold_days: int | None = Query(None, ge=1, le=365),
    db: Session = Depends(get_db),
):
    """
    Active, assigned visitors without a recent interaction.

    threshold_days defaults to the reminder_days_follow_up setting.
    """
    if threshold_days is None:
        threshold_days = settings_service.get_int_setting(db, SettingKey.REMINDER_DAYS_FOLLOW_UP)
    entries = follow_up_scanner.find_overdue(db, threshold_days)
    return [OverdueEntryRead.model_validate(entry) for entry in entries]


@router.get("/{person_id}", response_model=PersonRead)
def get_person(person_id: UUID, db: Session = Depends(get_db)):
    return person_service.get_person(db, person_id)


@router.patch("/{person_id}", response_model=PersonRead)
def update_person(person_id: UUID, data: PersonUpdate, db: Session = Depends(get_db)):
    person_service.update_person(db, person_id, data)
    return person_service.get_person(db, person_id)


@router.patch("/{person_id}/status", response_model=PersonRead)
def change_status(person_id: UUID, data: PersonStatusUpdate, db: Session = Depends(get_db)):
    lifecycle_service.set_status(db, person_id, data.status)
    return person_service.get_person(db, person_id)


@router.patch("/{person_id}/mentor", response_model=PersonRead)
def assign_mentor(person_id: UUID, data: PersonMentorUpdate, db: Session = Depends(get_db)):
    assignment_service.assign_mentor(db, person_id, data.mentor_id)
    return person_service.get_person(db, person_id)
