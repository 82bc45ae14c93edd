"""Habit repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ...models.habit import Habit


class HabitRepository(Protocol):
    """Repository for habits and their completion entries, scoped per user."""

    def get_by_id(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        ...

    def list_all(self, *, user_id: int) -> list[Habit]:
        """List a user's habits, oldest first."""
        ...

    def create(self, habit: Habit, *, user_id: int) -> Habit:
        """Create a new habit."""
        ...

    def update(self, habit: Habit, *, user_id: int) -> Habit:
        """Persist changes to an existing habit."""
        ...

    def delete(self, habit_id: int, *, user_id: int) -> bool:
        """Delete a habit and its entries; False when it did not exist."""
        ...

    def completed_dates(self, habit_id: int, *, user_id: int) -> set[date]:
        """Return every completed calendar date for a habit."""
        ...

    def completed_dates_for(self, habit_ids: list[int], *, user_id: int) -> dict[int, set[date]]:
        """Return completed dates for several habits in one query."""
        ...

    def add_completion(self, habit_id: int, occurred_on: date, *, user_id: int) -> None:
        """Record a completion (idempotent)."""
        ...

    def remove_completion(self, habit_id: int, occurred_on: date, *, user_id: int) -> None:
        """Remove a completion if present."""
        ...

    def update_cached_fields(self, habit_id: int, fields: dict, *, user_id: int) -> None:
        """Write back recomputed cache fields."""
        ...

    def count_by_category(self, category: str, *, user_id: int) -> int:
        """Number of habits using ``category``."""
        ...
