"""Reminder matching shared by the HTTP endpoint and the scheduled job."""

from __future__ import annotations

from datetime import datetime, time
from typing import Iterable, Union

from .dates import DateLike
from .schedule import is_due
from .types import HabitSnapshot, ReminderMessage

REMINDER_TITLE = "Habit reminder"


def format_clock(moment: Union[datetime, time]) -> str:
    """Return the ``HH:MM`` wall-clock minute for ``moment``."""

    return f"{moment.hour:02d}:{moment.minute:02d}"


def should_remind(habit: HabitSnapshot, current_time: str, today: DateLike) -> bool:
    """True when reminders are on, the minute matches exactly and the habit is due today."""

    notification = habit.notification
    if not notification.enabled:
        return False
    if notification.reminder_time != current_time:
        return False
    return is_due(habit, today)


def habits_to_remind(
    habits: Iterable[HabitSnapshot], current_time: str, today: DateLike
) -> list[HabitSnapshot]:
    return [habit for habit in habits if should_remind(habit, current_time, today)]


def build_reminder_message(habit: HabitSnapshot) -> ReminderMessage:
    return ReminderMessage(
        title=REMINDER_TITLE,
        body=f"Keep it going today: “{habit.title}”",
    )


__all__ = [
    "REMINDER_TITLE",
    "build_reminder_message",
    "format_clock",
    "habits_to_remind",
    "should_remind",
]
