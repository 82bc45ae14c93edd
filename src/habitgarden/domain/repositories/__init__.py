"""Repository protocol definitions for the domain layer."""

from .category import CategoryRepository
from .device_token import DeviceTokenRepository
from .habit import HabitRepository

__all__ = [
    "CategoryRepository",
    "DeviceTokenRepository",
    "HabitRepository",
]
