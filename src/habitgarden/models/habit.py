"""Habit tracking tables."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import ClassVar, Optional

from sqlalchemy import JSON, Column
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel


class Habit(SQLModel, table=True):
    """A recurring habit with its schedule and cached streak values."""

    __tablename__: ClassVar[str] = "habit"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    title: str = Field(nullable=False, max_length=100)
    category: str = Field(default="", max_length=64, index=True)
    color: str = Field(default="#f3f4f6", max_length=7)

    frequency_type: str = Field(default="daily", max_length=16)
    days_of_week: list[int] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    interval_days: Optional[int] = Field(default=None)
    start_date: Optional[date] = Field(default=None)

    # Cached values derived from the entries; recomputed on every mutation.
    completed: bool = Field(default=False, nullable=False)
    current_streak: int = Field(default=0, nullable=False)
    longest_streak: int = Field(default=0, nullable=False)

    notification_enabled: bool = Field(default=False, nullable=False)
    reminder_time: Optional[str] = Field(default=None, max_length=5)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    entries: list["HabitEntry"] = Relationship(
        sa_relationship=relationship(
            "HabitEntry", back_populates="habit", cascade="all, delete-orphan"
        ),
    )


class HabitEntry(SQLModel, table=True):
    """A calendar day on which the habit was marked done."""

    __tablename__: ClassVar[str] = "habit_entry"

    habit_id: int = Field(foreign_key="habit.id", primary_key=True)
    occurred_on: date = Field(primary_key=True, index=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)

    habit: Optional["Habit"] = Relationship(
        sa_relationship=relationship("Habit", back_populates="entries")
    )
