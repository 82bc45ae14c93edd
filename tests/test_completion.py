"""Tests for completion rates, calendar status rows and monthly trends."""

from __future__ import annotations

from datetime import date

import pytest

from habitgarden.core import (
    HabitSnapshot,
    calculate_completion_rate,
    calculate_monthly_trend,
    get_completion_status_for_period,
    round_for_display,
)
from habitgarden.core.completion import round_rate


def days(*values: str) -> frozenset[date]:
    return frozenset(date.fromisoformat(value) for value in values)


class TestCompletionRate:
    def test_full_completion_over_three_day_window(self):
        habit = HabitSnapshot(completed_dates=days("2026-02-08", "2026-02-09", "2026-02-10"))
        assert calculate_completion_rate(habit, "2026-02-08", "2026-02-10") == 100.0

    def test_two_of_three_rounds_to_one_decimal(self):
        habit = HabitSnapshot(completed_dates=days("2026-02-08", "2026-02-10"))
        rate = calculate_completion_rate(habit, "2026-02-08", "2026-02-10")
        assert rate == 66.7
        assert round_for_display(rate) == 67

    def test_no_due_days_in_range_is_zero(self):
        habit = HabitSnapshot(
            frequency_type="weekly",
            days_of_week=frozenset({3}),
            completed_dates=days("2026-02-11"),
        )
        # Sunday through Tuesday contains no Wednesday
        assert calculate_completion_rate(habit, "2026-02-08", "2026-02-10") == 0.0

    def test_no_completions_is_zero(self):
        assert calculate_completion_rate(HabitSnapshot(), "2026-02-01", "2026-02-10") == 0.0

    def test_inverted_range_is_zero(self):
        habit = HabitSnapshot(completed_dates=days("2026-02-08"))
        assert calculate_completion_rate(habit, "2026-02-10", "2026-02-08") == 0.0

    def test_completions_on_non_due_days_are_ignored(self):
        habit = HabitSnapshot(
            frequency_type="weekly",
            days_of_week=frozenset({0, 3}),
            completed_dates=days("2026-02-08", "2026-02-09", "2026-02-10"),
        )
        # due: 02-08 (done), 02-11 (missed)
        assert calculate_completion_rate(habit, "2026-02-08", "2026-02-14") == 50.0

    def test_interval_rate_counts_only_due_days(self):
        habit = HabitSnapshot(
            frequency_type="interval",
            start_date=date(2026, 2, 9),
            interval_days=3,
            completed_dates=days("2026-02-09", "2026-02-12"),
        )
        # due: 09, 12, 15
        assert calculate_completion_rate(habit, "2026-02-01", "2026-02-16") == 66.7


@pytest.mark.parametrize(
    "value, expected",
    [(66.66666, 66.7), (33.33333, 33.3), (12.25, 12.3), (0.0, 0.0), (100.0, 100.0)],
)
def test_round_rate_is_half_up_to_one_decimal(value, expected):
    assert round_rate(value) == expected


@pytest.mark.parametrize("value, expected", [(66.7, 67), (12.5, 13), (49.4, 49), (0.0, 0)])
def test_round_for_display_is_whole_number(value, expected):
    assert round_for_display(value) == expected


def test_completion_status_rows():
    habit = HabitSnapshot(
        frequency_type="weekly",
        days_of_week=frozenset({0}),
        completed_dates=days("2026-02-08"),
    )
    rows = get_completion_status_for_period(habit, "2026-02-08", "2026-02-10")
    assert [(row.date.day, row.completed, row.is_due) for row in rows] == [
        (8, True, True),
        (9, False, False),
        (10, False, False),
    ]


def test_monthly_trend_is_cumulative_from_first_of_month():
    habit = HabitSnapshot(completed_dates=days("2026-02-01", "2026-02-03"))
    points = calculate_monthly_trend(habit, today="2026-02-04")
    assert [point.date.day for point in points] == [1, 2, 3, 4]
    assert [point.completion_rate for point in points] == [100.0, 50.0, 66.7, 50.0]


def test_monthly_trend_on_first_day_has_one_point():
    points = calculate_monthly_trend(HabitSnapshot(), today=date(2026, 3, 1))
    assert len(points) == 1
    assert points[0].completion_rate == 0.0
