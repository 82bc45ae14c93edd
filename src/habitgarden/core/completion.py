"""Completion rate, calendar status and monthly trend series."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from .dates import DateLike, as_date, current_month_range, date_range
from .dates import today as local_today
from .schedule import is_due
from .types import DayStatus, HabitSnapshot, TrendPoint

_ONE_DECIMAL = Decimal("0.1")
_WHOLE = Decimal("1")


def _round_half_up(value: float, quantum: Decimal) -> float:
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def round_rate(value: float) -> float:
    """Canonical engine rounding: one decimal place, halves away from zero."""

    return _round_half_up(value, _ONE_DECIMAL)


def round_for_display(value: float) -> int:
    """Whole-number rounding applied only at the presentation boundary."""

    return int(_round_half_up(value, _WHOLE))


def calculate_completion_rate(habit: HabitSnapshot, start: DateLike, end: DateLike) -> float:
    """Percentage (0-100) of due days between ``start`` and ``end`` that were completed.

    Completions on days that were not due are ignored. An empty or inverted
    range, a range without due days, or a habit with no completions at all
    yields ``0.0``.
    """

    scheduled = [day for day in date_range(start, end) if is_due(habit, day)]
    target_days = len(scheduled)
    if target_days == 0 or not habit.completed_dates:
        return 0.0

    completed_days = sum(1 for day in scheduled if day in habit.completed_dates)
    return round_rate(completed_days / target_days * 100)


def get_completion_status_for_period(
    habit: HabitSnapshot, start: DateLike, end: DateLike
) -> list[DayStatus]:
    """Materialize per-day ``(date, completed, is_due)`` rows for a calendar grid."""

    return [
        DayStatus(date=day, completed=day in habit.completed_dates, is_due=is_due(habit, day))
        for day in date_range(start, end)
    ]


def calculate_monthly_trend(
    habit: HabitSnapshot, *, today: Optional[DateLike] = None
) -> list[TrendPoint]:
    """Cumulative completion rate from the 1st of this month through each day up to today."""

    as_of = as_date(today) if today is not None else local_today()
    first_of_month, _ = current_month_range(as_of)
    return [
        TrendPoint(date=day, completion_rate=calculate_completion_rate(habit, first_of_month, day))
        for day in date_range(first_of_month, as_of)
    ]


__all__ = [
    "calculate_completion_rate",
    "calculate_monthly_trend",
    "get_completion_status_for_period",
    "round_for_display",
    "round_rate",
]
