"""
Test configuration and fixtures.

Provides:
- In-memory SQLite database, schema rebuilt for every test
- Factories for mentors, persons and follow-ups
- HTTPX AsyncClient bound to the app with the test session
"""
import itertools
import os
from datetime import date, datetime, timezone
from typing import AsyncGenerator, Generator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session

# Must be set before flock.core.config is imported
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["ENV"] = "test"
os.environ["NOTIFICATION_DISPATCH"] = "inline"
os.environ["INTERNAL_SECRET"] = ""

from flock.core.deps import get_db
from flock.db.base import Base
from flock.db.enums import FollowUpOutcome, InteractionType, PersonStatus, Role
from flock.db.models import FollowUp, Person, User
from flock.db.session import SessionLocal, engine
from flock.main import app

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Fresh schema per test.

    The in-memory engine uses a single shared connection, so app code that
    opens its own SessionLocal() sees the same data.
    """
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def now() -> datetime:
    return NOW


# =============================================================================
# Factories
# =============================================================================

@pytest.fixture
def make_mentor(db: Session):
    counter = itertools.count(1)

    def _make(
        first_name: str = "Mentor",
        last_name: str | None = None,
        is_active: bool = True,
        role: Role = Role.MENTOR,
    ) -> User:
        n = next(counter)
        user = User(
            email=f"mentor{n}@example.org",
            first_name=first_name,
            last_name=last_name or f"Number{n}",
            role=role.value,
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_person(db: Session):
    counter = itertools.count(1)

    def _make(
        mentor: User | None = None,
        status: PersonStatus = PersonStatus.TO_VISIT,
        created_at: datetime = NOW,
        first_visit_date: date | None = None,
        first_name: str = "Visitor",
        last_name: str | None = None,
    ) -> Person:
        n = next(counter)
        person = Person(
            first_name=first_name,
            last_name=last_name or f"Number{n}",
            gender="F",
            status=status.value,
            assigned_mentor_id=mentor.id if mentor else None,
            first_visit_date=first_visit_date or created_at.date(),
            created_at=created_at,
            updated_at=created_at,
        )
        db.add(person)
        db.commit()
        db.refresh(person)
        return person

    return _make


@pytest.fixture
def make_follow_up(db: Session):
    def _make(
        person: Person,
        mentor: User,
        interaction_date: datetime,
        outcome: FollowUpOutcome = FollowUpOutcome.POSITIVE,
        next_action_date: datetime | None = None,
    ) -> FollowUp:
        follow_up = FollowUp(
            person_id=person.id,
            mentor_id=mentor.id,
            interaction_type=InteractionType.VISIT.value,
            interaction_date=interaction_date,
            outcome=outcome.value,
            next_action_needed=next_action_date is not None,
            next_action_date=next_action_date,
        )
        db.add(follow_up)
        db.commit()
        db.refresh(follow_up)
        return follow_up

    return _make


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient for API tests, sharing the test session."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as c:
        yield c

    app.dependency_overrides.clear()
