"""Pytest configuration and shared fixtures for HabitGarden tests.

This module provides database fixtures, test data factories and a Flask test
client wired against a throwaway data directory, so nothing touches the real
application database.
"""

from __future__ import annotations

import tempfile
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

import pytest
from sqlmodel import SQLModel, create_engine

# Import all models to ensure they're registered with SQLModel metadata
from habitgarden.models import Habit, HabitEntry, User
from habitgarden.infra.database import create_session_factory
from habitgarden.infra.repositories import (
    SQLModelCategoryRepository,
    SQLModelDeviceTokenRepository,
    SQLModelHabitRepository,
)

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to the test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Transactional session factory matching the one the application uses."""

    return create_session_factory(db_engine)


@pytest.fixture
def user(session_factory) -> User:
    """Create a default user for scoping data."""

    with session_factory() as session:
        row = User(username="tester", password_hash="dummy-hash")
        session.add(row)
        session.commit()
        session.refresh(row)
        session.expunge(row)
        return row


@pytest.fixture
def other_user(session_factory) -> User:
    with session_factory() as session:
        row = User(username="someone-else", password_hash="dummy-hash")
        session.add(row)
        session.commit()
        session.refresh(row)
        session.expunge(row)
        return row


@pytest.fixture
def habit_repo(session_factory) -> SQLModelHabitRepository:
    return SQLModelHabitRepository(session_factory)


@pytest.fixture
def category_repo(session_factory) -> SQLModelCategoryRepository:
    return SQLModelCategoryRepository(session_factory)


@pytest.fixture
def token_repo(session_factory) -> SQLModelDeviceTokenRepository:
    return SQLModelDeviceTokenRepository(session_factory)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def habit_factory(session_factory, user):
    """Factory for creating stored habits with optional completion entries.

    Returns:
        Callable: Function that creates and persists Habit instances
    """

    def _create_habit(
        title: str = "Read",
        *,
        frequency_type: str = "daily",
        days_of_week: Iterable[int] = (),
        interval_days: Optional[int] = None,
        start_date: Optional[date] = None,
        category: str = "Study",
        completed_dates: Iterable[date] = (),
        notification_enabled: bool = False,
        reminder_time: Optional[str] = None,
        created_at: Optional[datetime] = None,
        owner: Optional[User] = None,
    ) -> Habit:
        owner = owner or user
        with session_factory() as session:
            habit = Habit(
                user_id=owner.id,
                title=title,
                category=category,
                frequency_type=frequency_type,
                days_of_week=sorted(days_of_week),
                interval_days=interval_days,
                start_date=start_date,
                notification_enabled=notification_enabled,
                reminder_time=reminder_time,
                created_at=created_at or datetime(2026, 2, 1, 0, 0, tzinfo=timezone.utc),
            )
            session.add(habit)
            session.commit()
            session.refresh(habit)
            for day in completed_dates:
                session.add(HabitEntry(habit_id=habit.id, occurred_on=day, user_id=owner.id))
            session.commit()
            session.expunge(habit)
            return habit

    return _create_habit


# =============================================================================
# Flask Fixtures
# =============================================================================


@pytest.fixture
def app(tmp_path, monkeypatch):
    """Application built through the factory with an isolated data directory."""

    monkeypatch.setenv("HABITGARDEN_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("HABITGARDEN_DATABASE_URL", raising=False)
    monkeypatch.setenv("HABITGARDEN_ENABLE_SCHEDULER", "false")

    from habitgarden import create_app

    application = create_app("testing")
    yield application


@pytest.fixture
def client(app):
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def signed_in_client(client):
    """Test client with a freshly registered account."""

    response = client.post(
        "/account/register", json={"username": "gardener", "password": "correct-horse"}
    )
    assert response.status_code == 201
    return client
