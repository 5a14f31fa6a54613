"""Users router - staff directory, profile edits and deactivation."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from flock.core.deps import get_db
from flock.db.enums import Role
from flock.db.models import User
from flock.schemas.user import UserCreate, UserRead, UserUpdate
from flock.services import assignment_service, mentor_service

router = APIRouter(prefix="/users", tags=["users"])


def _read(db: Session, user: User) -> UserRead:
    caseload = assignment_service.get_caseload(db, user.id)
    return UserRead.model_validate(user).model_copy(update={"caseload": caseload})


@router.get("", response_model=list[UserRead])
def list_users(
    role: Role | None = Query(None),
    is_active: bool | None = Query(None),
    church_section: str | None = Query(None, max_length=100),
    db: Session = Depends(get_db),
):
    """Users ordered by role then name, each with their current caseload."""
    users = mentor_service.list_users(
        db, role=role, is_active=is_active, church_section=church_section
    )
    caseloads = assignment_service.get_caseloads(db, [u.id for u in users])
    return [
        UserRead.model_validate(u).model_copy(update={"caseload": caseloads[u.id]})
        for u in users
    ]


@router.post("", response_model=UserRead, status_code=201)
def create_user(data: UserCreate, db: Session = Depends(get_db)):
    user = mentor_service.create_user(
        db,
        email=data.email,
        first_name=data.first_name,
        last_name=data.last_name,
        role=data.role,
        phone=data.phone,
        church_section=data.church_section,
    )
    return _read(db, user)


@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: UUID, db: Session = Depends(get_db)):
    return _read(db, mentor_service.get_user(db, user_id))


@router.patch("/{user_id}", response_model=UserRead)
def update_user(user_id: UUID, data: UserUpdate, db: Session = Depends(get_db)):
    return _read(db, mentor_service.update_user(db, user_id, data))


@router.delete("/{user_id}", response_model=UserRead)
def deactivate_user(user_id: UUID, db: Session = Depends(get_db)):
    """
    Deactivate a user (soft delete).

    A deactivated mentor is no longer picked for automatic assignment. Their
    current visitors stay assigned until reassigned.
    """
    return _read(db, mentor_service.deactivate_user(db, user_id))
