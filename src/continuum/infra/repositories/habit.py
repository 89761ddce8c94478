"""SQLModel implementation of Habit repository."""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable, ContextManager, Iterable, Optional, Union

from sqlalchemy.orm.attributes import flag_modified
from sqlmodel import Session, select

from ...logging_config import get_logger
from ...models.habit import Habit
from ...services.habits import new_habit

logger = get_logger(__name__)


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: Callable[[], ContextManager[Session]]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def create(self, name: str, initial_dates: Iterable[Union[date, datetime]] = ()) -> Habit:
        """Create a new habit with normalized initial completion days."""
        habit = new_habit(name, initial_dates)
        with self.session_factory() as session:
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
        logger.info("Created habit %s", habit.id, extra={"habit_name": habit.name})
        return habit

    def get_by_id(self, habit_id: str) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        with self.session_factory() as session:
            obj = session.get(Habit, habit_id)
            if obj:
                session.expunge(obj)
            return obj

    def persist(self, habit: Habit) -> Habit:
        """Write the habit's current field values."""
        with self.session_factory() as session:
            habit = session.merge(habit)
            # completed_dates is mutated in place, which the ORM cannot see
            flag_modified(habit, "completed_dates")
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def delete(self, habit: Habit) -> None:
        """Delete a habit."""
        with self.session_factory() as session:
            obj = session.get(Habit, habit.id)
            if obj:
                session.delete(obj)
                session.commit()
                logger.info("Deleted habit %s", habit.id)

    def list_all(self) -> list[Habit]:
        """List habits, newest first."""
        with self.session_factory() as session:
            statement = select(Habit).order_by(Habit.created_at.desc())  # type: ignore[union-attr]
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows
