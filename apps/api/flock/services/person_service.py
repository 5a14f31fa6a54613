"""Person service - visitor intake, lookup and free-form edits."""

from __future__ import annotations

import logging
from datetime import date, datetime
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from flock.core.clock import resolve_now
from flock.core.exceptions import PersonNotFoundError
from flock.core.structured_logging import build_log_context
from flock.db.enums import DEFAULT_PERSON_STATUS, PersonStatus, SettingKey
from flock.db.models import Person
from flock.schemas.person import PersonCreate, PersonUpdate
from flock.services import assignment_service, notification_facade, settings_service
from flock.utils.normalization import normalize_email

logger = logging.getLogger(__name__)


def create_person(
    db: Session,
    data: PersonCreate,
    created_by_user_id: UUID | None = None,
    now: datetime | None = None,
) -> Person:
    """
    Register a visitor.

    The least-loaded mentor under capacity is assigned when auto-assignment
    is on. When nobody has room the visitor is still created, unassigned.
    """
    now = resolve_now(now)

    mentor = None
    if settings_service.get_bool_setting(db, SettingKey.AUTO_ASSIGNMENT_ENABLED):
        mentor = assignment_service.find_available_mentor(db)

    person = Person(
        first_name=data.first_name,
        last_name=data.last_name,
        gender=data.gender.value,
        date_of_birth=data.date_of_birth,
        phone=data.phone,
        email=normalize_email(data.email),
        address=data.address,
        commune=data.commune,
        quartier=data.quartier,
        profession=data.profession,
        marital_status=data.marital_status.value if data.marital_status else None,
        how_heard_about_church=data.how_heard_about_church,
        prayer_requests=data.prayer_requests,
        status=DEFAULT_PERSON_STATUS.value,
        assigned_mentor_id=mentor.id if mentor else None,
        first_visit_date=data.first_visit_date or now.date(),
        created_by_user_id=created_by_user_id,
        created_at=now,
        updated_at=now,
    )
    db.add(person)
    db.commit()
    db.refresh(person)

    logger.info(
        "Person registered (assigned=%s)",
        bool(mentor),
        extra=build_log_context(person_id=person.id, user_id=created_by_user_id),
    )
    if mentor:
        notification_facade.notify_new_assignment(db, person.id, mentor.id)
    return person


def get_person(db: Session, person_id: UUID) -> Person:
    person = (
        db.query(Person)
        .options(selectinload(Person.assigned_mentor))
        .filter(Person.id == person_id)
        .first()
    )
    if not person:
        raise PersonNotFoundError(person_id)
    return person


def list_persons(
    db: Session,
    page: int = 1,
    per_page: int = 20,
    status: PersonStatus | None = None,
    mentor_id: UUID | None = None,
    q: str | None = None,
    commune: str | None = None,
    first_visit_from: date | None = None,
    first_visit_to: date | None = None,
) -> tuple[list[Person], int]:
    """
    List visitors with filters and pagination, newest first.

    Returns:
        (persons, total_count)
    """
    query = db.query(Person)

    if status:
        query = query.filter(Person.status == PersonStatus(status).value)
    if mentor_id:
        query = query.filter(Person.assigned_mentor_id == mentor_id)
    if commune:
        query = query.filter(Person.commune.ilike(f"%{commune.strip()}%"))
    if first_visit_from:
        query = query.filter(Person.first_visit_date >= first_visit_from)
    if first_visit_to:
        query = query.filter(Person.first_visit_date <= first_visit_to)
    if q and q.strip():
        pattern = f"%{q.strip()}%"
        query = query.filter(
            or_(
                Person.first_name.ilike(pattern),
                Person.last_name.ilike(pattern),
                Person.phone.ilike(pattern),
                Person.email.ilike(pattern),
            )
        )

    total = query.count()
    persons = (
        query.order_by(Person.created_at.desc(), Person.id)
        .offset((page - 1) * per_page)
        .limit(per_page)
        .all()
    )
    return persons, total


def update_person(
    db: Session,
    person_id: UUID,
    data: PersonUpdate,
    now: datetime | None = None,
) -> Person:
    """
    Update free-form visitor fields.

    Uses exclude_unset=True so only explicitly provided fields are updated.
    Required name and gender fields ignore explicit nulls.
    """
    person = get_person(db, person_id)
    update_data = data.model_dump(exclude_unset=True)

    for field, value in update_data.items():
        if field in ("first_name", "last_name", "gender") and value is None:
            continue
        if field == "email":
            value = normalize_email(value)
        if hasattr(value, "value"):
            value = value.value
        setattr(person, field, value)

    person.updated_at = resolve_now(now)
    db.commit()
    db.refresh(person)
    return person
