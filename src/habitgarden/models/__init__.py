"""SQLModel table exports."""

from .category import CustomCategory
from .habit import Habit, HabitEntry
from .user import DeviceToken, User

__all__ = [
    "CustomCategory",
    "DeviceToken",
    "Habit",
    "HabitEntry",
    "User",
]
