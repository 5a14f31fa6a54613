"""
User directory - mentors and the other staff roles.

Users are never deleted: deactivation takes a mentor out of automatic
assignment while their history stays intact.
"""

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy.orm import Session

from flock.core.clock import resolve_now
from flock.core.exceptions import MentorNotFoundError, UserNotFoundError, ValidationError
from flock.core.structured_logging import build_log_context
from flock.db.enums import Role
from flock.db.models import User
from flock.schemas.user import UserUpdate
from flock.utils.normalization import normalize_email, normalize_name, normalize_phone

logger = logging.getLogger(__name__)


def get_user(db: Session, user_id: UUID) -> User:
    user = db.get(User, user_id)
    if not user:
        raise UserNotFoundError(user_id)
    return user


def get_user_by_email(db: Session, email: str) -> User | None:
    """Case-insensitive lookup."""
    email = normalize_email(email)
    if not email:
        return None
    return db.query(User).filter(User.email == email).first()


def get_mentor(db: Session, mentor_id: UUID) -> User:
    """Return an active mentor or raise MentorNotFoundError."""
    user = db.get(User, mentor_id)
    if not user or not user.is_active or user.role != Role.MENTOR.value:
        raise MentorNotFoundError(mentor_id)
    return user


def get_follow_up_actor(db: Session, user_id: UUID) -> User:
    """
    Return the active user recording an interaction.

    Mentors, pastors and admins may record follow-ups; the welcome committee
    only registers visitors.
    """
    user = db.get(User, user_id)
    if not user or not user.is_active or user.role not in Role.follow_up_roles():
        raise UserNotFoundError(
            user_id, message=f"User {user_id} not found or not allowed to record follow-ups"
        )
    return user


def list_users(
    db: Session,
    role: Role | None = None,
    is_active: bool | None = None,
    church_section: str | None = None,
) -> list[User]:
    """Users filtered by role, active flag and church section, ordered by role then name."""
    query = db.query(User)
    if role:
        query = query.filter(User.role == Role(role).value)
    if is_active is not None:
        query = query.filter(User.is_active.is_(is_active))
    if church_section and church_section.strip():
        query = query.filter(User.church_section.ilike(f"%{church_section.strip()}%"))
    return query.order_by(User.role, User.last_name, User.first_name, User.id).all()


def create_user(
    db: Session,
    email: str,
    first_name: str,
    last_name: str,
    role: Role = Role.MENTOR,
    phone: str | None = None,
    church_section: str | None = None,
) -> User:
    """Create a user. Email must be unique (case-insensitive)."""
    email = normalize_email(email)
    if not email:
        raise ValidationError("Email is required")
    if db.query(User.id).filter(User.email == email).first():
        raise ValidationError(f"User with email {email} already exists")

    user = User(
        email=email,
        first_name=normalize_name(first_name),
        last_name=normalize_name(last_name),
        phone=normalize_phone(phone),
        church_section=church_section,
        role=Role(role).value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Created user %s with role %s", user.id, user.role)
    return user


def create_mentor(db: Session, email: str, first_name: str, last_name: str, **kwargs) -> User:
    return create_user(db, email, first_name, last_name, role=Role.MENTOR, **kwargs)


def update_user(
    db: Session,
    user_id: UUID,
    data: UserUpdate,
    now: datetime | None = None,
) -> User:
    """
    Apply the fields set on `data`.

    Visitors assigned to a user who stops being an active mentor keep their
    assignment; reassigning them is an explicit action.
    """
    user = get_user(db, user_id)
    changes = data.model_dump(exclude_unset=True)

    for field in ("first_name", "last_name", "role", "is_active"):
        if changes.get(field) is None:
            changes.pop(field, None)
    if "role" in changes:
        changes["role"] = Role(changes["role"]).value

    for field, value in changes.items():
        setattr(user, field, value)
    user.updated_at = resolve_now(now)
    db.commit()
    db.refresh(user)

    logger.info(
        "User updated (%s)",
        ", ".join(sorted(changes)) or "no changes",
        extra=build_log_context(user_id=user.id),
    )
    return user


def deactivate_user(db: Session, user_id: UUID, now: datetime | None = None) -> User:
    """Soft-delete a user. Idempotent."""
    user = get_user(db, user_id)
    if user.is_active:
        user.is_active = False
        user.updated_at = resolve_now(now)
        db.commit()
        db.refresh(user)
        logger.info("User deactivated", extra=build_log_context(user_id=user.id))
    return user
