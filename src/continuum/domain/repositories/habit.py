"""Habit repository protocol."""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Protocol, Union

from ...models.habit import Habit


class HabitRepository(Protocol):
    """Storage for habit records."""

    def create(self, name: str, initial_dates: Iterable[Union[date, datetime]] = ()) -> Habit:
        """Create and store a habit with a fresh id and creation timestamp."""
        ...

    def get_by_id(self, habit_id: str) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        ...

    def persist(self, habit: Habit) -> Habit:
        """Store the current field values of a habit."""
        ...

    def delete(self, habit: Habit) -> None:
        """Remove a habit."""
        ...

    def list_all(self) -> list[Habit]:
        """List habits, newest first."""
        ...
