"""Habit service helpers: snapshot conversion, cached fields and statistics."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timezone, tzinfo
from typing import Any, Iterable, Mapping, Optional

from ..core import (
    HabitSnapshot,
    Notification,
    calculate_completion_rate,
    calculate_growth_rate,
    calculate_streaks,
    format_date,
    parse_date,
    round_for_display,
    tree_level,
)
from ..core.dates import current_month_range, local_day, previous_week_range, week_range
from ..models.habit import Habit

DEFAULT_HABIT_COLOR = "#f3f4f6"


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Stored creation times are UTC; attach the zone when the driver drops it."""

    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_snapshot(habit: Habit, completed_dates: Iterable[date]) -> HabitSnapshot:
    """Build the engine's immutable view of a stored habit."""

    return HabitSnapshot(
        id=habit.id,
        title=habit.title,
        category=habit.category,
        color=habit.color or DEFAULT_HABIT_COLOR,
        frequency_type=habit.frequency_type,
        days_of_week=frozenset(habit.days_of_week or ()),
        interval_days=habit.interval_days,
        start_date=habit.start_date,
        completed_dates=frozenset(completed_dates),
        completed=habit.completed,
        current_streak=habit.current_streak,
        longest_streak=habit.longest_streak,
        created_at=as_utc(habit.created_at),
        notification=Notification(
            enabled=habit.notification_enabled,
            reminder_time=habit.reminder_time,
        ),
    )


def refresh_cached_fields(habit: HabitSnapshot, *, today: date) -> dict[str, Any]:
    """Recompute the denormalized ``completed``/streak fields from the completion set.

    This is the one place cached values are derived; every mutation boundary
    (toggle, edit, fetch) goes through it instead of trusting stored values.
    """

    streaks = calculate_streaks(habit, today=today)
    return {
        "completed": today in habit.completed_dates,
        "current_streak": streaks.current_streak,
        "longest_streak": streaks.longest_streak,
    }


def stale_cached_fields(habit: HabitSnapshot, *, today: date) -> dict[str, Any]:
    """Return only the cached fields (and missing color) that differ from storage."""

    fresh = refresh_cached_fields(habit, today=today)
    changes = {key: value for key, value in fresh.items() if getattr(habit, key) != value}
    if not habit.color:
        changes["color"] = DEFAULT_HABIT_COLOR
    return changes


def apply_cached_fields(habit: HabitSnapshot, *, today: date) -> HabitSnapshot:
    fresh = refresh_cached_fields(habit, today=today)
    return replace(habit, color=habit.color or DEFAULT_HABIT_COLOR, **fresh)


def habit_statistics(
    habit: HabitSnapshot, *, today: date, zone: Optional[tzinfo] = None
) -> dict[str, Any]:
    """Dashboard statistics for a single habit.

    Rates are the engine's one-decimal values; ``display`` carries the
    whole-number values shown to users.
    """

    this_week = week_range(today)
    last_week = previous_week_range(today)
    month_start, _ = current_month_range(today)
    created = local_day(habit.created_at, zone) if habit.created_at is not None else today

    rates = {
        "this_week": calculate_completion_rate(habit, *this_week),
        "last_week": calculate_completion_rate(habit, *last_week),
        "this_month": calculate_completion_rate(habit, month_start, today),
        "all_time": calculate_completion_rate(habit, created, today),
    }
    streaks = calculate_streaks(habit, today=today)
    growth = calculate_growth_rate(
        replace(habit, current_streak=streaks.current_streak), today=today, zone=zone
    )
    return {
        "current_streak": streaks.current_streak,
        "longest_streak": streaks.longest_streak,
        "completion_rates": rates,
        "growth_rate": growth,
        "tree_level": tree_level(growth),
        "display": {
            "completion_rates": {key: round_for_display(value) for key, value in rates.items()},
            "growth_rate": round_for_display(growth),
        },
    }


def habit_to_payload(habit: HabitSnapshot) -> dict[str, Any]:
    """Serialize a snapshot into JSON-friendly primitives."""

    created = habit.created_at
    return {
        "id": habit.id,
        "title": habit.title,
        "category": habit.category,
        "color": habit.color or DEFAULT_HABIT_COLOR,
        "frequency_type": str(getattr(habit.frequency_type, "value", habit.frequency_type)),
        "days_of_week": sorted(habit.days_of_week),
        "interval_days": habit.interval_days,
        "start_date": format_date(habit.start_date) if habit.start_date else None,
        "completed_dates": sorted(format_date(day) for day in habit.completed_dates),
        "completed": habit.completed,
        "current_streak": habit.current_streak,
        "longest_streak": habit.longest_streak,
        "created_at": created.isoformat() if created is not None else None,
        "notification": {
            "enabled": habit.notification.enabled,
            "reminder_time": habit.notification.reminder_time,
        },
    }


def snapshot_from_payload(payload: Mapping[str, Any]) -> HabitSnapshot:
    """Inverse of :func:`habit_to_payload`, used for guest habits kept in the session."""

    created_raw = payload.get("created_at")
    created = as_utc(datetime.fromisoformat(created_raw)) if created_raw else None
    notification = payload.get("notification") or {}
    start_raw = payload.get("start_date")
    return HabitSnapshot(
        id=payload.get("id"),
        title=payload.get("title", ""),
        category=payload.get("category", ""),
        color=payload.get("color") or DEFAULT_HABIT_COLOR,
        frequency_type=payload.get("frequency_type", "daily"),
        days_of_week=frozenset(payload.get("days_of_week") or ()),
        interval_days=payload.get("interval_days"),
        start_date=parse_date(start_raw) if start_raw else None,
        completed_dates=frozenset(parse_date(raw) for raw in payload.get("completed_dates") or ()),
        completed=bool(payload.get("completed", False)),
        current_streak=int(payload.get("current_streak") or 0),
        longest_streak=int(payload.get("longest_streak") or 0),
        created_at=created,
        notification=Notification(
            enabled=bool(notification.get("enabled", False)),
            reminder_time=notification.get("reminder_time"),
        ),
    )


def snapshot_to_model(habit: HabitSnapshot, *, user_id: int) -> Habit:
    """Build a table row from a snapshot (completion entries are stored separately)."""

    return Habit(
        id=habit.id if isinstance(habit.id, int) else None,
        user_id=user_id,
        title=habit.title,
        category=habit.category,
        color=habit.color or DEFAULT_HABIT_COLOR,
        frequency_type=str(getattr(habit.frequency_type, "value", habit.frequency_type)),
        days_of_week=sorted(habit.days_of_week),
        interval_days=habit.interval_days,
        start_date=habit.start_date,
        completed=habit.completed,
        current_streak=habit.current_streak,
        longest_streak=habit.longest_streak,
        notification_enabled=habit.notification.enabled,
        reminder_time=habit.notification.reminder_time,
        created_at=as_utc(habit.created_at) or datetime.now(timezone.utc),
    )


__all__ = [
    "DEFAULT_HABIT_COLOR",
    "apply_cached_fields",
    "as_utc",
    "habit_statistics",
    "habit_to_payload",
    "refresh_cached_fields",
    "snapshot_from_payload",
    "snapshot_to_model",
    "stale_cached_fields",
    "to_snapshot",
]
