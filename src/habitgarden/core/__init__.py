"""Pure scheduling, streak and statistics engine.

This package depends only on the standard library and is shared by the web
application and the scheduled reminder job.
"""

from .completion import (
    calculate_completion_rate,
    calculate_monthly_trend,
    get_completion_status_for_period,
    round_for_display,
)
from .dates import date_range, format_date, parse_date, today
from .growth import calculate_growth_rate, find_most_consistent_habits, garden_weather, tree_level
from .reminders import habits_to_remind, should_remind
from .schedule import is_due, previous_due_date
from .streaks import calculate_streaks
from .types import (
    DayStatus,
    FrequencyType,
    HabitSnapshot,
    Notification,
    StreakSummary,
    TrendPoint,
    Weather,
)

__all__ = [
    "DayStatus",
    "FrequencyType",
    "HabitSnapshot",
    "Notification",
    "StreakSummary",
    "TrendPoint",
    "Weather",
    "calculate_completion_rate",
    "calculate_growth_rate",
    "calculate_monthly_trend",
    "calculate_streaks",
    "date_range",
    "find_most_consistent_habits",
    "format_date",
    "garden_weather",
    "get_completion_status_for_period",
    "habits_to_remind",
    "is_due",
    "parse_date",
    "previous_due_date",
    "round_for_display",
    "should_remind",
    "today",
    "tree_level",
]
