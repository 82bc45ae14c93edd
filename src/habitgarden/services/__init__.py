"""Service module exports."""

from . import auth, categories, charts, habits, reminders, store

__all__ = [
    "auth",
    "categories",
    "charts",
    "habits",
    "reminders",
    "store",
]
