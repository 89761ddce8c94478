"""SQLModel table exports."""

from .habit import DayListType, Habit, UTCDateTime

__all__ = ["DayListType", "Habit", "UTCDateTime"]
