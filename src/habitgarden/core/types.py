"""Plain value types consumed by the scheduling and statistics engine."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Iterable, Optional, Union

HabitId = Union[int, str, None]


class FrequencyType(str, Enum):
    """Supported schedule variants for a habit."""

    DAILY = "daily"
    WEEKLY = "weekly"
    INTERVAL = "interval"


class Weather(str, Enum):
    """Aggregate garden weather derived from recent completion rates."""

    SUNNY = "sunny"
    CLOUDY = "cloudy"
    RAINY = "rainy"
    STORMY = "stormy"


@dataclass(frozen=True, slots=True)
class Notification:
    """Reminder preferences attached to a habit."""

    enabled: bool = False
    reminder_time: Optional[str] = None


@dataclass(frozen=True, slots=True)
class HabitSnapshot:
    """Immutable view of a habit record.

    ``completed_dates`` is the source of truth; ``completed``,
    ``current_streak`` and ``longest_streak`` are cached values that can always
    be recomputed from it.
    """

    frequency_type: Union[FrequencyType, str] = FrequencyType.DAILY
    days_of_week: frozenset[int] = frozenset()
    interval_days: Optional[int] = None
    start_date: Optional[date] = None
    completed_dates: frozenset[date] = frozenset()
    id: HabitId = None
    title: str = ""
    category: str = ""
    color: str = ""
    completed: bool = False
    current_streak: int = 0
    longest_streak: int = 0
    created_at: Union[datetime, date, None] = None
    notification: Notification = field(default_factory=Notification)

    def with_completed_dates(self, dates: Iterable[date]) -> "HabitSnapshot":
        """Return a copy carrying a different completion set."""

        return replace(self, completed_dates=frozenset(dates))


@dataclass(frozen=True, slots=True)
class StreakSummary:
    longest_streak: int
    current_streak: int


@dataclass(frozen=True, slots=True)
class DayStatus:
    """Per-day completion state used for calendar grids."""

    date: date
    completed: bool
    is_due: bool


@dataclass(frozen=True, slots=True)
class TrendPoint:
    date: date
    completion_rate: float


@dataclass(frozen=True, slots=True)
class ReminderMessage:
    title: str
    body: str


__all__ = [
    "DayStatus",
    "FrequencyType",
    "HabitId",
    "HabitSnapshot",
    "Notification",
    "ReminderMessage",
    "StreakSummary",
    "TrendPoint",
    "Weather",
]
