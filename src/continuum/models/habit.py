"""Habit tracking data structures."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import ClassVar
from uuid import uuid4

from sqlalchemy import JSON, Column, DateTime
from sqlalchemy.types import TypeDecorator
from sqlmodel import Field, SQLModel

from ..days import normalize_day


class DayListType(TypeDecorator):
    """Store an ordered list of calendar days as a JSON array of ISO dates.

    Timestamps are reduced with :func:`continuum.days.normalize_day`, the same
    rule the streak engine reads them with, so a stored day never moves.
    """

    impl = JSON
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return []
        return [normalize_day(day).isoformat() for day in value]

    def process_result_value(self, value, dialect):
        if not value:
            return []
        return [date.fromisoformat(item) for item in value]


class UTCDateTime(TypeDecorator):
    """Timezone-aware timestamp kept in UTC; naive values are read as UTC."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


def _new_habit_id() -> str:
    return uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Habit(SQLModel, table=True):
    """A habit and the raw sequence of days it was completed on.

    ``completed_dates`` keeps insertion order and may contain duplicates;
    readers go through ``continuum.services.habits.completed_set``.
    """

    __tablename__: ClassVar[str] = "habit"

    id: str = Field(default_factory=_new_habit_id, primary_key=True, max_length=32)
    name: str = Field(nullable=False, max_length=100, index=True)
    created_at: datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(UTCDateTime, nullable=False, index=True),
    )
    completed_dates: list[date] = Field(
        default_factory=list,
        sa_column=Column(DayListType, nullable=False),
    )

    def __repr__(self) -> str:
        return f"Habit(id={self.id!r}, name={self.name!r}, days={len(self.completed_dates or [])})"


__all__ = ["DayListType", "Habit", "UTCDateTime"]
