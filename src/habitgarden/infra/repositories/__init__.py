"""Concrete repository implementations using SQLModel."""

from .category import SQLModelCategoryRepository
from .device_token import SQLModelDeviceTokenRepository
from .habit import SQLModelHabitRepository

__all__ = [
    "SQLModelCategoryRepository",
    "SQLModelDeviceTokenRepository",
    "SQLModelHabitRepository",
]
