"""SQLModel implementation of the habit repository."""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Optional

from sqlalchemy import func
from sqlmodel import select

from ...models.habit import Habit, HabitEntry
from ..database import SessionFactory

_CACHED_FIELDS = frozenset({"completed", "current_streak", "longest_streak", "color"})


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: int) -> list[Habit]:
        """List a user's habits ordered by creation time (oldest first)."""
        with self.session_factory() as session:
            statement = (
                select(Habit)
                .where(Habit.user_id == user_id)
                .order_by(Habit.created_at, Habit.id)  # type: ignore[arg-type]
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, habit: Habit, *, user_id: int) -> Habit:
        """Create a new habit; the database assigns the durable id."""
        with self.session_factory() as session:
            habit.id = None
            habit.user_id = user_id
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def update(self, habit: Habit, *, user_id: int) -> Habit:
        """Update an existing habit."""
        with self.session_factory() as session:
            habit.user_id = user_id
            merged = session.merge(habit)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged

    def delete(self, habit_id: int, *, user_id: int) -> bool:
        """Delete a habit by ID along with its entries."""
        with self.session_factory() as session:
            habit = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if habit is None:
                return False
            session.delete(habit)
            session.commit()
            return True

    def completed_dates(self, habit_id: int, *, user_id: int) -> set[date]:
        """Return every completed day for the habit."""
        with self.session_factory() as session:
            statement = select(HabitEntry.occurred_on).where(
                HabitEntry.user_id == user_id, HabitEntry.habit_id == habit_id
            )
            return set(session.exec(statement).all())

    def completed_dates_for(self, habit_ids: list[int], *, user_id: int) -> dict[int, set[date]]:
        """Return completed days grouped by habit id."""
        grouped: dict[int, set[date]] = defaultdict(set)
        if not habit_ids:
            return dict(grouped)
        with self.session_factory() as session:
            statement = select(HabitEntry.habit_id, HabitEntry.occurred_on).where(
                HabitEntry.user_id == user_id,
                HabitEntry.habit_id.in_(habit_ids),  # type: ignore[union-attr]
            )
            for habit_id, occurred_on in session.exec(statement).all():
                grouped[habit_id].add(occurred_on)
        return dict(grouped)

    def add_completion(self, habit_id: int, occurred_on: date, *, user_id: int) -> None:
        """Record a completion; a second call for the same day is a no-op."""
        with self.session_factory() as session:
            existing = session.get(HabitEntry, (habit_id, occurred_on))
            if existing is None:
                session.add(HabitEntry(habit_id=habit_id, occurred_on=occurred_on, user_id=user_id))
                session.commit()

    def remove_completion(self, habit_id: int, occurred_on: date, *, user_id: int) -> None:
        """Remove a completion if present."""
        with self.session_factory() as session:
            entry = session.exec(
                select(HabitEntry)
                .where(HabitEntry.user_id == user_id)
                .where(HabitEntry.habit_id == habit_id)
                .where(HabitEntry.occurred_on == occurred_on)
            ).first()
            if entry:
                session.delete(entry)
                session.commit()

    def update_cached_fields(self, habit_id: int, fields: dict, *, user_id: int) -> None:
        """Write recomputed cache fields back onto the stored habit."""
        unknown = set(fields) - _CACHED_FIELDS
        if unknown:
            raise ValueError(f"Not a cached habit field: {sorted(unknown)}")
        with self.session_factory() as session:
            habit = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if habit is None:
                return
            for key, value in fields.items():
                setattr(habit, key, value)
            session.add(habit)
            session.commit()

    def count_by_category(self, category: str, *, user_id: int) -> int:
        """Count habits that reference ``category``."""
        with self.session_factory() as session:
            statement = select(func.count()).select_from(Habit).where(
                Habit.user_id == user_id, Habit.category == category
            )
            return int(session.exec(statement).one())
