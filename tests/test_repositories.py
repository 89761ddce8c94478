"""Tests for the SQLModel habit repository."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from sqlmodel import select

from continuum.infra.repositories.habit import SQLModelHabitRepository
from continuum.models import Habit
from continuum.services.habits import (
    add_recent_days,
    completed_set,
    current_streak,
    new_habit,
    reset_progress,
    toggle_completion,
)


def test_create_assigns_id_and_timestamp(session_factory):
    repo = SQLModelHabitRepository(session_factory)

    habit = repo.create("Meditate")

    assert habit.id
    assert len(habit.id) == 32
    assert isinstance(habit.created_at, datetime)
    assert habit.created_at.tzinfo is not None
    assert habit.created_at.utcoffset() == timedelta(0)
    assert habit.completed_dates == []


def test_create_generates_unique_ids(session_factory):
    repo = SQLModelHabitRepository(session_factory)

    ids = {repo.create(f"Habit {n}").id for n in range(5)}

    assert len(ids) == 5


def test_create_normalizes_initial_dates(session_factory, today):
    repo = SQLModelHabitRepository(session_factory)

    habit = repo.create("Stretch", [datetime(2025, 3, 15, 7, 30), today])
    loaded = repo.get_by_id(habit.id)

    assert loaded is not None
    assert loaded.completed_dates == [today, today]
    assert all(type(day) is date for day in loaded.completed_dates)


def test_get_by_id_missing_returns_none(session_factory):
    repo = SQLModelHabitRepository(session_factory)

    assert repo.get_by_id("does-not-exist") is None


def test_persist_stores_in_place_mutations(session_factory, today):
    repo = SQLModelHabitRepository(session_factory)
    habit = repo.create("Read")

    toggle_completion(habit, today)
    add_recent_days(habit, 3, today)
    repo.persist(habit)

    loaded = repo.get_by_id(habit.id)
    assert loaded is not None
    assert current_streak(loaded, today) == 3


def test_persist_after_reset(session_factory, today):
    repo = SQLModelHabitRepository(session_factory)
    habit = repo.create("Read", [today - timedelta(days=n) for n in range(4)])

    reset_progress(habit)
    repo.persist(habit)

    loaded = repo.get_by_id(habit.id)
    assert loaded is not None
    assert loaded.completed_dates == []


def test_persist_stores_rename(session_factory):
    repo = SQLModelHabitRepository(session_factory)
    habit = repo.create("Read")

    habit.name = "Read 20 pages"
    repo.persist(habit)

    assert repo.get_by_id(habit.id).name == "Read 20 pages"


def test_list_all_newest_first(session_factory, db_session):
    base = datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)
    for offset, name in enumerate(["Oldest", "Middle", "Newest"]):
        db_session.add(new_habit(name, created_at=base + timedelta(days=offset)))
    db_session.commit()
    repo = SQLModelHabitRepository(session_factory)

    names = [habit.name for habit in repo.list_all()]

    assert names == ["Newest", "Middle", "Oldest"]


def test_delete_removes_record(session_factory, db_session):
    repo = SQLModelHabitRepository(session_factory)
    keep = repo.create("Keep")
    drop = repo.create("Drop")

    repo.delete(drop)

    remaining = db_session.exec(select(Habit)).all()
    assert [habit.id for habit in remaining] == [keep.id]


def test_delete_unknown_habit_is_noop(session_factory):
    repo = SQLModelHabitRepository(session_factory)
    repo.create("Keep")

    repo.delete(new_habit("Never stored"))

    assert len(repo.list_all()) == 1


def test_created_at_round_trips_as_utc(session_factory):
    repo = SQLModelHabitRepository(session_factory)
    local_noon = datetime(2025, 6, 1, 12, 0, tzinfo=timezone(timedelta(hours=5)))
    habit = new_habit("Swim", created_at=local_noon)

    stored = repo.persist(habit)
    loaded = repo.get_by_id(stored.id)

    assert loaded.created_at == local_noon
    assert loaded.created_at.utcoffset() == timedelta(0)
    assert loaded.created_at.hour == 7


def test_naive_created_at_is_read_as_utc(session_factory):
    repo = SQLModelHabitRepository(session_factory)
    habit = new_habit("Swim", created_at=datetime(2025, 6, 1, 12, 0))

    loaded = repo.get_by_id(repo.persist(habit).id)

    assert loaded.created_at == datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def test_aware_timestamp_near_midnight_keeps_its_day(session_factory, today):
    repo = SQLModelHabitRepository(session_factory)
    habit = repo.create("Read", [today - timedelta(days=1)])
    late_evening = datetime(2025, 3, 15, 23, 30, tzinfo=timezone(timedelta(hours=-10)))
    habit.completed_dates.append(late_evening)
    before = completed_set(habit)

    repo.persist(habit)
    loaded = repo.get_by_id(habit.id)

    assert completed_set(loaded) == before
    assert all(type(day) is date for day in loaded.completed_dates)
