"""Presentation-facing helpers: habit card read model and user actions.

A view reads a :class:`HabitCard` whenever it re-renders and hands user
gestures to :class:`HabitActionHandler`, which runs the engine operation and
stores the result through the habit repository.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Optional

from ..domain.repositories.habit import HabitRepository
from ..logging_config import get_logger
from ..models.habit import Habit
from . import habits as engine

logger = get_logger(__name__)

GRID_COLUMNS = 11


class InvalidHabitName(ValueError):
    """Raised when a habit name is empty after trimming whitespace."""


def clean_habit_name(raw: Optional[str]) -> str:
    """Trim ``raw`` and reject it when nothing is left."""

    trimmed = (raw or "").strip()
    if not trimmed:
        raise InvalidHabitName("Habit name cannot be empty")
    return trimmed


def streak_text(habit: Habit, as_of: Optional[engine.Moment] = None) -> str:
    if not habit.completed_dates:
        return "Start today"
    return f"{engine.display_streak(habit, as_of)} DAY STREAK"


def history_grid(
    habit: Habit,
    columns: int = GRID_COLUMNS,
    days_back: int = engine.HABIT_FORMATION_DAYS,
    as_of: Optional[engine.Moment] = None,
) -> list[list[bool]]:
    """History flags split into rows of ``columns`` cells, oldest first."""

    if columns <= 0:
        raise ValueError("columns must be positive")
    flags = engine.history_flags(habit, days_back=days_back, as_of=as_of)
    return [flags[start:start + columns] for start in range(0, len(flags), columns)]


@dataclass(frozen=True)
class HabitCard:
    """Everything a habit tile shows."""

    habit_id: str
    name: str
    as_of: date
    completed_today: bool
    display_streak: int
    show_streak_badge: bool
    streak_text: str
    history: list[bool] = field(default_factory=list)


def summarize(
    habit: Habit,
    as_of: Optional[engine.Moment] = None,
    days_back: int = engine.HABIT_FORMATION_DAYS,
) -> HabitCard:
    day = engine.today() if as_of is None else engine.normalize_day(as_of)
    return HabitCard(
        habit_id=habit.id,
        name=habit.name,
        as_of=day,
        completed_today=engine.is_completed(habit, day),
        display_streak=engine.display_streak(habit, day),
        show_streak_badge=engine.should_show_streak_badge(habit, day),
        streak_text=streak_text(habit, day),
        history=engine.history_flags(habit, days_back=days_back, as_of=day),
    )


class ActionKind(str, Enum):
    RESET = "reset"
    SET_STREAK = "set_streak"
    RENAME = "rename"
    DELETE = "delete"


@dataclass(frozen=True)
class HabitAction:
    """A context-menu action on a habit card."""

    kind: ActionKind
    value: Any = None

    @classmethod
    def reset(cls) -> "HabitAction":
        return cls(ActionKind.RESET)

    @classmethod
    def set_streak(cls, target: int) -> "HabitAction":
        return cls(ActionKind.SET_STREAK, target)

    @classmethod
    def rename(cls, name: str) -> "HabitAction":
        return cls(ActionKind.RENAME, name)

    @classmethod
    def delete(cls) -> "HabitAction":
        return cls(ActionKind.DELETE)


class HabitActionHandler:
    """Apply user actions to habits and persist every change."""

    def __init__(
        self,
        repository: HabitRepository,
        days_back: int = engine.HABIT_FORMATION_DAYS,
    ):
        self.repository = repository
        self.days_back = days_back

    def add_habit(self, name: str) -> Habit:
        return self.repository.create(clean_habit_name(name))

    def list_cards(self, as_of: Optional[engine.Moment] = None) -> list[HabitCard]:
        return [summarize(habit, as_of, self.days_back) for habit in self.repository.list_all()]

    def toggle(self, habit: Habit, on: Optional[engine.Moment] = None) -> Habit:
        """Tap on a card: flip the day's completion."""
        engine.toggle_completion(habit, on)
        return self.repository.persist(habit)

    def apply(
        self,
        habit: Habit,
        action: HabitAction,
        as_of: Optional[engine.Moment] = None,
    ) -> Optional[Habit]:
        """Run ``action`` against ``habit``.

        Returns the stored habit, or ``None`` once it has been deleted.
        Rename raises :class:`InvalidHabitName` before anything changes.
        """
        if action.kind is ActionKind.DELETE:
            self.repository.delete(habit)
            return None

        if action.kind is ActionKind.RESET:
            engine.reset_progress(habit)
        elif action.kind is ActionKind.SET_STREAK:
            engine.set_current_streak(habit, int(action.value), as_of)
        elif action.kind is ActionKind.RENAME:
            engine.rename_habit(habit, clean_habit_name(action.value))
        else:  # pragma: no cover - exhaustive
            raise ValueError(f"Unsupported habit action: {action.kind!r}")

        logger.debug("Applied %s to habit %s", action.kind.value, habit.id)
        return self.repository.persist(habit)


__all__ = [
    "ActionKind",
    "GRID_COLUMNS",
    "HabitAction",
    "HabitActionHandler",
    "HabitCard",
    "InvalidHabitName",
    "clean_habit_name",
    "history_grid",
    "streak_text",
    "summarize",
]
