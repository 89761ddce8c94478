"""Tests for the rolling completion history window."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from continuum.services.habits import HABIT_FORMATION_DAYS, history_flags, new_habit


def test_three_most_recent_days(habit_factory, today):
    habit = habit_factory(offsets=[0, 1, 2])

    assert history_flags(habit, 7, today) == [False, False, False, False, True, True, True]


def test_oldest_day_comes_first(habit_factory, today):
    habit = habit_factory(offsets=[6])

    assert history_flags(habit, 7, today) == [True] + [False] * 6


@pytest.mark.parametrize("offsets", [(), (0,), tuple(range(0, 200, 3)), tuple(range(500))])
def test_length_is_always_days_back(habit_factory, today, offsets):
    habit = habit_factory(offsets=offsets)

    assert len(history_flags(habit, 66, today)) == 66


def test_default_window_is_habit_formation_period(habit_factory, today):
    assert len(history_flags(habit_factory(), as_of=today)) == HABIT_FORMATION_DAYS == 66


def test_days_outside_window_are_ignored(habit_factory, today):
    habit = habit_factory(offsets=[-1, 7, 30])

    assert history_flags(habit, 7, today) == [False] * 7


def test_dense_history(habit_factory, today):
    habit = habit_factory(offsets=range(100))

    assert history_flags(habit, 66, today) == [True] * 66


def test_duplicates_do_not_shift_flags(habit_factory, today):
    habit = habit_factory(offsets=[0, 0, 0, 2])

    assert history_flags(habit, 3, today) == [True, False, True]


def test_non_positive_window_is_empty(habit_factory, today):
    habit = habit_factory(offsets=[0])

    assert history_flags(habit, 0, today) == []
    assert history_flags(habit, -4, today) == []


def test_window_before_earliest_day_is_padded_false():
    first = date.min + timedelta(days=1)
    habit = new_habit("Journal", [date.min, first])

    assert history_flags(habit, 4, first) == [False, False, True, True]
