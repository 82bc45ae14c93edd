"""Habit form definitions."""

from __future__ import annotations

from datetime import date
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ...core import FrequencyType
from ...errors import FormValidationError
from ...services.habits import DEFAULT_HABIT_COLOR

MAX_INTERVAL_DAYS = 365


class HabitForm(BaseModel):
    """Form model for creating or editing a habit."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    title: str = Field(default="", description="Short label for the habit", max_length=100)
    category: str = Field(default="", max_length=64)
    color: str = Field(default=DEFAULT_HABIT_COLOR, pattern=r"^#[0-9a-fA-F]{6}$")
    frequency_type: FrequencyType = Field(default=FrequencyType.DAILY)
    days_of_week: list[int] = Field(default_factory=list, description="Sunday-based weekday numbers")
    interval_days: int | None = Field(default=None, ge=1, le=MAX_INTERVAL_DAYS)
    start_date: date | None = None
    notification_enabled: bool = False
    reminder_time: str | None = Field(default=None, pattern=r"^([01]\d|2[0-3]):[0-5]\d$")

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        """Ensure the habit title is present when validating submissions."""

        if not value:
            raise ValueError("Please provide a habit title.")
        return value

    @field_validator("days_of_week")
    @classmethod
    def validate_days(cls, value: list[int]) -> list[int]:
        if any(day < 0 or day > 6 for day in value):
            raise ValueError("Weekdays must be between 0 (Sunday) and 6 (Saturday).")
        return sorted(set(value))

    @field_validator("reminder_time", "start_date", "interval_days", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def ensure_schedule(self) -> "HabitForm":
        """Check the frequency-specific fields and the reminder pairing."""

        if self.frequency_type is FrequencyType.WEEKLY and not self.days_of_week:
            raise ValueError("Pick at least one weekday for a weekly habit.")
        if self.frequency_type is FrequencyType.INTERVAL:
            if self.start_date is None:
                raise ValueError("Set a start date for an interval habit.")
            if self.interval_days is None:
                raise ValueError("Set the number of days between repetitions.")
        if self.notification_enabled and not self.reminder_time:
            raise ValueError("Choose a reminder time to enable notifications.")
        return self

    def to_fields(self) -> dict[str, Any]:
        """Values in the shape the habit store applies."""

        fields = self.model_dump()
        fields["frequency_type"] = self.frequency_type.value
        return fields

    @classmethod
    def validation_errors(cls, payload: Mapping[str, Any]) -> dict[str, list[str]]:
        """Return validation errors for ``payload`` keyed by field name."""

        try:
            cls.model_validate(dict(payload))
        except ValidationError as exc:
            structured: dict[str, list[str]] = {}
            for error in exc.errors(include_url=False):
                loc = error.get("loc", ())
                key = str(loc[0]) if loc else "__root__"
                structured.setdefault(key, []).append(error.get("msg", "Invalid value"))
            return structured
        return {}

    @classmethod
    def parse(cls, payload: Mapping[str, Any]) -> "HabitForm":
        """Validate ``payload`` or raise :class:`FormValidationError`."""

        errors = cls.validation_errors(payload)
        if errors:
            raise FormValidationError(errors)
        return cls.model_validate(dict(payload))


def form_data_for(habit_payload: Mapping[str, Any]) -> dict[str, Any]:
    """Flatten a stored habit payload into form fields, for partial edits."""

    notification = habit_payload.get("notification") or {}
    return {
        "title": habit_payload.get("title", ""),
        "category": habit_payload.get("category", ""),
        "color": habit_payload.get("color") or DEFAULT_HABIT_COLOR,
        "frequency_type": habit_payload.get("frequency_type", FrequencyType.DAILY.value),
        "days_of_week": habit_payload.get("days_of_week") or [],
        "interval_days": habit_payload.get("interval_days"),
        "start_date": habit_payload.get("start_date"),
        "notification_enabled": bool(notification.get("enabled", False)),
        "reminder_time": notification.get("reminder_time"),
    }


__all__ = ["HabitForm", "form_data_for"]
