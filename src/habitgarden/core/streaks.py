"""Longest and current streak computation over a habit's own schedule."""

from __future__ import annotations

from datetime import date
from typing import Optional

from .dates import DateLike, as_date
from .dates import today as local_today
from .schedule import is_due, previous_due_date
from .types import HabitSnapshot, StreakSummary


def _longest_streak(habit: HabitSnapshot) -> int:
    ordered = sorted(habit.completed_dates)
    if not ordered:
        return 0

    longest = 1
    run = 1
    for previous, current in zip(ordered, ordered[1:]):
        if previous_due_date(habit, current) == previous:
            run += 1
            longest = max(longest, run)
        else:
            run = 1
    return longest


def _count_back(habit: HabitSnapshot, anchor: date) -> int:
    """Count ``anchor`` plus each completed due date directly behind it."""

    count = 1
    cursor = anchor
    while True:
        predecessor = previous_due_date(habit, cursor)
        if predecessor is None or predecessor not in habit.completed_dates:
            return count
        count += 1
        cursor = predecessor


def _current_streak(habit: HabitSnapshot, today: date) -> int:
    if is_due(habit, today) and today in habit.completed_dates:
        return _count_back(habit, today)

    # An open due window today, or a day off, does not break the streak yet.
    previous = previous_due_date(habit, today)
    if previous is not None and previous in habit.completed_dates:
        return _count_back(habit, previous)
    return 0


def calculate_streaks(habit: HabitSnapshot, *, today: Optional[DateLike] = None) -> StreakSummary:
    """Return the longest and current streaks for ``habit`` as of ``today``.

    Two completions belong to the same streak when the earlier one is the
    previous due date of the later one, so weekly and interval schedules are
    not broken by their off days.
    """

    as_of = as_date(today) if today is not None else local_today()
    return StreakSummary(
        longest_streak=_longest_streak(habit),
        current_streak=_current_streak(habit, as_of),
    )


__all__ = ["calculate_streaks"]
