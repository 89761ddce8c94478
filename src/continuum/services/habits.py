"""Streak and history computations over a habit's completion days.

Every read goes through :func:`completed_set`, so duplicated or unordered raw
entries in ``Habit.completed_dates`` never change a result. Every operation
accepts an explicit reference day; ``None`` means today in local time.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from ..days import Moment, normalize_day, today
from ..logging_config import get_logger
from ..models.habit import Habit

logger = get_logger(__name__)

MAX_STREAK = 1000
HABIT_FORMATION_DAYS = 66


def _resolve_day(moment: Optional[Moment]) -> date:
    return today() if moment is None else normalize_day(moment)


def _shift(day: date, days: int) -> Optional[date]:
    """Move ``day`` by ``days``; ``None`` when the result leaves the calendar."""

    try:
        return day + timedelta(days=days)
    except OverflowError:
        return None


def completed_set(habit: Habit) -> set[date]:
    """Distinct completion days of ``habit``."""

    return {normalize_day(entry) for entry in habit.completed_dates or ()}


def is_completed(habit: Habit, on: Optional[Moment] = None) -> bool:
    return _resolve_day(on) in completed_set(habit)


def _remove_day(habit: Habit, day: date) -> int:
    """Drop every raw entry falling on ``day``; return how many were removed."""

    kept = [entry for entry in habit.completed_dates if normalize_day(entry) != day]
    removed = len(habit.completed_dates) - len(kept)
    if removed:
        habit.completed_dates[:] = kept
    return removed


def _ensure_days(habit: Habit, days: Iterable[date]) -> int:
    """Append the given days that are not already completed."""

    present = completed_set(habit)
    added = 0
    for day in days:
        if day not in present:
            habit.completed_dates.append(day)
            present.add(day)
            added += 1
    return added


def _recent_days(end: date, count: int) -> Iterable[date]:
    """Yield ``end`` and the ``count - 1`` days before it, newest first."""

    for offset in range(count):
        day = _shift(end, -offset)
        if day is None:
            return
        yield day


def new_habit(
    name: str,
    completed_dates: Iterable[Moment] = (),
    *,
    created_at: Optional[datetime] = None,
) -> Habit:
    """Build a Habit with a fresh id and normalized completion days."""

    habit = Habit(
        name=name,
        completed_dates=[normalize_day(entry) for entry in completed_dates],
    )
    if created_at is not None:
        habit.created_at = created_at
    return habit


def rename_habit(habit: Habit, name: str) -> None:
    """Set the display name; content checks belong to the caller."""

    logger.debug("Renaming habit %s to %r", habit.id, name)
    habit.name = name


def toggle_completion(habit: Habit, on: Optional[Moment] = None) -> bool:
    """Flip whether the day is completed and return the new state.

    Clearing drops every raw entry on that day, not just the first, so a
    duplicated day still flips in one call and a second call restores it.
    """

    day = _resolve_day(on)
    if habit.completed_dates is None:
        habit.completed_dates = []
    if _remove_day(habit, day):
        logger.debug("Habit %s: cleared %s", habit.id, day)
        return False
    habit.completed_dates.append(day)
    logger.debug("Habit %s: completed %s", habit.id, day)
    return True


def current_streak(habit: Habit, as_of: Optional[Moment] = None) -> int:
    """Count consecutive completed days walking back from ``as_of``."""

    days = completed_set(habit)
    count = 0
    cursor: Optional[date] = _resolve_day(as_of)
    while cursor is not None and cursor in days:
        count += 1
        cursor = _shift(cursor, -1)
    return count


def longest_streak(habit: Habit) -> int:
    """Length of the longest run of consecutive completed days."""

    longest = 0
    run = 0
    last_day: Optional[date] = None
    for day in sorted(completed_set(habit)):
        if last_day is not None and _shift(last_day, 1) == day:
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        last_day = day
    return longest


def display_streak(habit: Habit, as_of: Optional[Moment] = None) -> int:
    """Streak to show on screen.

    Until the reference day is completed the streak ending the day before is
    shown, so a running streak does not read 0 right after midnight.
    """

    day = _resolve_day(as_of)
    if day in completed_set(habit):
        return current_streak(habit, day)
    yesterday = _shift(day, -1)
    if yesterday is None:
        return 0
    return current_streak(habit, yesterday)


def should_show_streak_badge(habit: Habit, as_of: Optional[Moment] = None) -> bool:
    """False only in the "start today" state: nothing running, today open."""

    day = _resolve_day(as_of)
    if day in completed_set(habit):
        return True
    return display_streak(habit, day) > 0


def history_flags(
    habit: Habit,
    days_back: int = HABIT_FORMATION_DAYS,
    as_of: Optional[Moment] = None,
) -> list[bool]:
    """Completion flags for the ``days_back`` days ending at ``as_of``.

    Index 0 is the oldest day and the last index is ``as_of`` itself.
    """

    if days_back <= 0:
        return []
    days = completed_set(habit)
    end = _resolve_day(as_of)
    flags = []
    for offset in range(days_back - 1, -1, -1):
        day = _shift(end, -offset)
        flags.append(day is not None and day in days)
    return flags


def reset_progress(habit: Habit) -> None:
    """Clear all completion history."""

    if habit.completed_dates:
        logger.info("Habit %s: reset %d completion entries", habit.id, len(habit.completed_dates))
        habit.completed_dates.clear()
    elif habit.completed_dates is None:
        habit.completed_dates = []


def add_recent_days(habit: Habit, count: int, as_of: Optional[Moment] = None) -> None:
    """Mark the ``count`` days ending at ``as_of`` as completed.

    Days already completed are not duplicated and nothing outside the window
    is touched. Non-positive counts do nothing.
    """

    if count <= 0:
        return
    if habit.completed_dates is None:
        habit.completed_dates = []
    added = _ensure_days(habit, _recent_days(_resolve_day(as_of), count))
    logger.debug("Habit %s: back-filled %d of %d days", habit.id, added, count)


def set_current_streak(habit: Habit, target: int, as_of: Optional[Moment] = None) -> None:
    """Rewrite history so the streak ending at ``as_of`` is exactly ``target``.

    ``target`` is clamped to ``[0, MAX_STREAK]``. The window of ``target``
    days ending at ``as_of`` is filled in and the day just before it is
    cleared, which caps any longer run. Older days are left alone.
    """

    clamped = max(0, min(MAX_STREAK, int(target)))
    end = _resolve_day(as_of)
    if habit.completed_dates is None:
        habit.completed_dates = []

    if clamped > 0:
        _ensure_days(habit, _recent_days(end, clamped))
    else:
        _remove_day(habit, end)

    break_day = _shift(end, -clamped)
    if break_day is not None:
        _remove_day(habit, break_day)

    logger.info(
        "Habit %s: streak set to %d as of %s",
        habit.id,
        clamped,
        end,
        extra={"requested": target},
    )


__all__ = [
    "HABIT_FORMATION_DAYS",
    "MAX_STREAK",
    "add_recent_days",
    "completed_set",
    "current_streak",
    "display_streak",
    "history_flags",
    "is_completed",
    "longest_streak",
    "new_habit",
    "normalize_day",
    "rename_habit",
    "reset_progress",
    "set_current_streak",
    "should_show_streak_badge",
    "today",
    "toggle_completion",
]
