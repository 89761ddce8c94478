"""Pytest configuration and shared fixtures for Continuum tests.

Provides an isolated SQLite database per test, a repository-ready session
factory, a habit factory, and a fixed reference day so streak tests never
depend on the wall clock.
"""

from __future__ import annotations

import tempfile
from datetime import date, timedelta
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine

from continuum.models import Habit
from continuum.services.habits import new_habit

# Fixed "today" for deterministic streak tests
REFERENCE_DAY = date(2025, 3, 15)


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
def db_session(db_engine):
    """Database session for direct inserts and assertions."""
    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching what repositories expect (Callable[[], Session])."""

    def factory():
        return Session(db_engine, expire_on_commit=False)

    return factory


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def today() -> date:
    """The reference day used as ``as_of`` throughout the tests."""
    return REFERENCE_DAY


@pytest.fixture
def habit_factory(today):
    """Factory for in-memory habits.

    Returns:
        Callable: builds a Habit whose completed days are given as offsets
        back from the reference day (0 = today, 1 = yesterday, ...)
    """

    def _create_habit(name: str = "Test Habit", offsets=(), extra_days=()) -> Habit:
        days = [today - timedelta(days=offset) for offset in offsets]
        return new_habit(name, [*days, *extra_days])

    return _create_habit

