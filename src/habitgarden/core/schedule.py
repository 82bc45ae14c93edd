"""Due-date predicate and previous-due-date lookup for habit schedules."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

from .dates import DateLike, as_date, weekday_number
from .types import FrequencyType, HabitSnapshot


def _frequency(habit: HabitSnapshot) -> Optional[FrequencyType]:
    try:
        return FrequencyType(habit.frequency_type)
    except ValueError:
        return None


def _interval_config(habit: HabitSnapshot) -> Optional[tuple[date, int]]:
    """Return ``(start_date, interval_days)`` or ``None`` when malformed."""

    if habit.start_date is None or not habit.interval_days or habit.interval_days < 1:
        return None
    return as_date(habit.start_date), int(habit.interval_days)


def _weekdays(habit: HabitSnapshot) -> frozenset[int]:
    """Scheduled weekdays; values outside 0 (Sunday) to 6 never match."""

    return frozenset(int(value) for value in habit.days_of_week if 0 <= int(value) <= 6)


def is_due(habit: HabitSnapshot, day: DateLike) -> bool:
    """Return True when ``habit`` is scheduled on ``day``.

    Malformed schedules (weekly without weekdays, interval without a start date
    or a positive interval) are never due.
    """

    target = as_date(day)
    frequency = _frequency(habit)

    if frequency is FrequencyType.DAILY:
        return True
    if frequency is FrequencyType.WEEKLY:
        return weekday_number(target) in _weekdays(habit)
    if frequency is FrequencyType.INTERVAL:
        config = _interval_config(habit)
        if config is None:
            return False
        start, interval = config
        offset = (target - start).days
        if offset < 0:
            return False
        return offset % interval == 0
    return False


def _days_back_to(current_weekday: int, target_weekday: int) -> int:
    # Same weekday maps to a full week back so the result is strictly earlier.
    return (current_weekday - target_weekday) % 7 or 7


def previous_due_date(habit: HabitSnapshot, day: DateLike) -> Optional[date]:
    """Return the latest due date strictly before ``day``.

    ``day`` itself need not be due. ``None`` means no predecessor can be
    computed: no valid weekday, a day on or before an interval's start
    date, or a malformed schedule.
    """

    current = as_date(day)
    frequency = _frequency(habit)

    if frequency is FrequencyType.DAILY:
        return current - timedelta(days=1)

    if frequency is FrequencyType.WEEKLY:
        weekdays = _weekdays(habit)
        if not weekdays:
            return None
        current_weekday = weekday_number(current)
        step_back = min(_days_back_to(current_weekday, weekday) for weekday in weekdays)
        return current - timedelta(days=step_back)

    if frequency is FrequencyType.INTERVAL:
        config = _interval_config(habit)
        if config is None:
            return None
        start, interval = config
        diff_days = (current - start).days
        if diff_days <= 0:
            return None
        quotient = diff_days // interval
        if is_due(habit, current):
            offset = (quotient - 1) * interval
        else:
            offset = quotient * interval
        return start + timedelta(days=offset)

    return None


__all__ = ["is_due", "previous_due_date"]
