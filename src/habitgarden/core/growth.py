"""Garden-facing aggregates: growth score, tree level and weather."""

from __future__ import annotations

from datetime import timedelta, tzinfo
from typing import Optional, Sequence

from .completion import calculate_completion_rate
from .dates import DateLike, as_date, local_day
from .dates import today as local_today
from .types import HabitSnapshot, Weather

COMPLETION_WEIGHT = 0.8
STREAK_BONUS_MAX = 20.0
STREAK_BONUS_CAP_DAYS = 30
WEATHER_WINDOW_DAYS = 7

# (minimum growth rate, tree level), highest first
_TREE_LEVELS = ((90, 5), (70, 4), (50, 3), (25, 2))
_WEATHER_BANDS = ((75, Weather.SUNNY), (50, Weather.CLOUDY), (25, Weather.RAINY))
DEFAULT_WEATHER = Weather.CLOUDY


def calculate_growth_rate(
    habit: HabitSnapshot,
    *,
    today: Optional[DateLike] = None,
    zone: Optional[tzinfo] = None,
) -> float:
    """Blend all-time completion rate (80%) with a capped current-streak bonus (20%).

    The all-time window runs from the habit's creation day through ``today``;
    the streak bonus reads the cached ``current_streak`` and saturates at
    30 days. A timezone-aware ``created_at`` is read on the wall clock of
    ``zone``. The result is clamped to ``[0, 100]``.
    """

    as_of = as_date(today) if today is not None else local_today()
    created = local_day(habit.created_at, zone) if habit.created_at is not None else as_of
    completion_rate = calculate_completion_rate(habit, created, as_of)

    streak = max(habit.current_streak or 0, 0)
    streak_bonus = min(streak, STREAK_BONUS_CAP_DAYS) / STREAK_BONUS_CAP_DAYS * STREAK_BONUS_MAX
    growth = completion_rate * COMPLETION_WEIGHT + streak_bonus
    return min(100.0, max(0.0, growth))


def tree_level(growth_rate: float) -> int:
    """Map a growth rate onto the five tree levels."""

    for threshold, level in _TREE_LEVELS:
        if growth_rate >= threshold:
            return level
    return 1


def garden_weather(
    habits: Sequence[HabitSnapshot], *, today: Optional[DateLike] = None
) -> Weather:
    """Average the trailing seven-day completion rate across habits and bucket it."""

    if not habits:
        return DEFAULT_WEATHER

    as_of = as_date(today) if today is not None else local_today()
    window_start = as_of - timedelta(days=WEATHER_WINDOW_DAYS - 1)
    total = sum(calculate_completion_rate(habit, window_start, as_of) for habit in habits)
    average = total / len(habits)

    for threshold, weather in _WEATHER_BANDS:
        if average >= threshold:
            return weather
    return Weather.STORMY


def find_most_consistent_habits(habits: Sequence[HabitSnapshot]) -> list[HabitSnapshot]:
    """Return every habit tied for the highest cached current streak.

    Empty when there are no habits or nobody has an active streak.
    """

    if not habits:
        return []
    best = max(habit.current_streak or 0 for habit in habits)
    if best <= 0:
        return []
    return [habit for habit in habits if (habit.current_streak or 0) == best]


__all__ = [
    "DEFAULT_WEATHER",
    "calculate_growth_rate",
    "find_most_consistent_habits",
    "garden_weather",
    "tree_level",
]
