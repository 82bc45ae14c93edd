"""Exceptions raised by the service layer and mapped to HTTP errors by blueprints."""

from __future__ import annotations


class HabitGardenError(Exception):
    """Base class for expected, user-facing failures."""

    status_code = 400

    def __init__(self, message: str, *, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class HabitNotFoundError(HabitGardenError):
    status_code = 404


class HabitNotDueError(HabitGardenError):
    """Raised when completion is toggled on a day the habit is not scheduled."""

    status_code = 409


class CategoryError(HabitGardenError):
    pass


class CategoryInUseError(CategoryError):
    status_code = 409


class AuthError(HabitGardenError):
    status_code = 401


class FormValidationError(HabitGardenError):
    """Structured form errors keyed by field name."""

    def __init__(self, errors: dict[str, list[str]]):
        super().__init__("Invalid habit data.", details=errors)
        self.errors = errors


__all__ = [
    "AuthError",
    "CategoryError",
    "CategoryInUseError",
    "FormValidationError",
    "HabitGardenError",
    "HabitNotDueError",
    "HabitNotFoundError",
]
