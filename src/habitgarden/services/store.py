"""Explicit application state for one client session.

``HabitStore`` keeps server-backed habits (``remote_habits``) and guest habits
that only live in the client session (``local_habits``) in separate
collections. Every operation takes ``user_id`` explicitly; ``None`` selects the
guest branch. Nothing here reads an ambient "current user".
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any, Mapping, Optional, Sequence

from ..config import DEFAULT_CATEGORIES
from ..core import HabitSnapshot, Notification, is_due
from ..domain.repositories import CategoryRepository, HabitRepository
from ..errors import AuthError, HabitNotDueError, HabitNotFoundError
from ..logging_config import get_logger
from .categories import ensure_category_unused, merge_categories, normalize_category_name
from .habits import (
    DEFAULT_HABIT_COLOR,
    apply_cached_fields,
    as_utc,
    refresh_cached_fields,
    snapshot_to_model,
    stale_cached_fields,
    to_snapshot,
)

logger = get_logger(__name__)

_MODEL_FIELDS = {
    "title",
    "category",
    "color",
    "frequency_type",
    "days_of_week",
    "interval_days",
    "start_date",
}


def sync_remote_habits(
    habit_repo: HabitRepository, *, user_id: int, today: date
) -> list[HabitSnapshot]:
    """Load a user's habits, recompute cached fields and persist only what changed.

    Concurrent writers may race here; that is tolerated because the cached
    values are always recomputable from the completion entries.
    """

    rows = habit_repo.list_all(user_id=user_id)
    dates_by_habit = habit_repo.completed_dates_for(
        [row.id for row in rows if row.id is not None], user_id=user_id
    )

    synced: list[HabitSnapshot] = []
    for row in rows:
        snapshot = to_snapshot(row, dates_by_habit.get(row.id, set()))
        changes = stale_cached_fields(snapshot, today=today)
        if changes:
            habit_repo.update_cached_fields(row.id, changes, user_id=user_id)
            logger.debug("Refreshed cached fields for habit %s: %s", row.id, sorted(changes))
        synced.append(apply_cached_fields(snapshot, today=today))
    return synced


def _apply_fields(habit: HabitSnapshot, fields: Mapping[str, Any]) -> HabitSnapshot:
    changes: dict[str, Any] = {key: value for key, value in fields.items() if key in _MODEL_FIELDS}
    if "days_of_week" in changes:
        changes["days_of_week"] = frozenset(changes["days_of_week"] or ())
    if "notification_enabled" in fields or "reminder_time" in fields:
        changes["notification"] = Notification(
            enabled=bool(fields.get("notification_enabled", habit.notification.enabled)),
            reminder_time=fields.get("reminder_time", habit.notification.reminder_time),
        )
    return replace(habit, **changes)


@dataclass
class HabitStore:
    """Per-client habit and category state with explicit sync functions."""

    habit_repo: HabitRepository
    category_repo: CategoryRepository
    default_categories: Sequence[str] = DEFAULT_CATEGORIES
    remote_habits: list[HabitSnapshot] = field(default_factory=list)
    local_habits: list[HabitSnapshot] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)

    # ------------------------------------------------------------------ habits
    def habits_for(self, user_id: Optional[int]) -> list[HabitSnapshot]:
        return self.remote_habits if user_id is not None else self.local_habits

    def fetch_habits(self, *, user_id: Optional[int], today: date) -> list[HabitSnapshot]:
        """Refresh the active collection and recompute every cached field."""

        if user_id is not None:
            self.remote_habits = sync_remote_habits(self.habit_repo, user_id=user_id, today=today)
            return self.remote_habits
        self.local_habits = [apply_cached_fields(habit, today=today) for habit in self.local_habits]
        return self.local_habits

    def get_habit(self, habit_id: Any, *, user_id: Optional[int]) -> HabitSnapshot:
        for habit in self.habits_for(user_id):
            if str(habit.id) == str(habit_id):
                return habit
        raise HabitNotFoundError(f"Habit {habit_id} was not found.")

    def add_habit(
        self,
        fields: Mapping[str, Any],
        *,
        user_id: Optional[int],
        now: datetime,
        today: Optional[date] = None,
    ) -> HabitSnapshot:
        """Create a habit; guests get a provisional id, signed-in users a durable one.

        ``now`` is stored as the UTC creation time; ``today`` is the local day
        the cached fields are computed for (defaults to ``now``'s date).
        """

        draft = _apply_fields(
            HabitSnapshot(id=uuid.uuid4().hex, color=DEFAULT_HABIT_COLOR, created_at=as_utc(now)),
            fields,
        )
        draft = apply_cached_fields(draft, today=today or now.date())

        if user_id is None:
            self.local_habits.append(draft)
            return draft

        stored = self.habit_repo.create(snapshot_to_model(draft, user_id=user_id), user_id=user_id)
        created = replace(draft, id=stored.id, created_at=as_utc(stored.created_at))
        self.remote_habits.append(created)
        logger.info("Created habit %s for user %s", stored.id, user_id)
        return created

    def toggle_completion(
        self, habit_id: Any, *, user_id: Optional[int], today: date
    ) -> HabitSnapshot:
        """Flip today's completion and recompute the cached fields."""

        habit = self.get_habit(habit_id, user_id=user_id)
        if not is_due(habit, today):
            raise HabitNotDueError("This habit is not scheduled for today.")

        completing = today not in habit.completed_dates
        if completing:
            dates = habit.completed_dates | {today}
        else:
            dates = habit.completed_dates - {today}
        updated = apply_cached_fields(habit.with_completed_dates(dates), today=today)

        if user_id is not None:
            if completing:
                self.habit_repo.add_completion(habit.id, today, user_id=user_id)
            else:
                self.habit_repo.remove_completion(habit.id, today, user_id=user_id)
            self.habit_repo.update_cached_fields(
                habit.id, refresh_cached_fields(updated, today=today), user_id=user_id
            )
        self._replace(updated, user_id=user_id)
        return updated

    def update_habit(
        self, habit_id: Any, fields: Mapping[str, Any], *, user_id: Optional[int], today: date
    ) -> HabitSnapshot:
        """Apply field edits; streaks are recomputed because the schedule may have changed."""

        habit = self.get_habit(habit_id, user_id=user_id)
        updated = apply_cached_fields(_apply_fields(habit, fields), today=today)

        if user_id is not None:
            self.habit_repo.update(snapshot_to_model(updated, user_id=user_id), user_id=user_id)
        self._replace(updated, user_id=user_id)
        return updated

    def delete_habit(self, habit_id: Any, *, user_id: Optional[int]) -> None:
        habit = self.get_habit(habit_id, user_id=user_id)
        if user_id is not None:
            self.habit_repo.delete(habit.id, user_id=user_id)
            self.remote_habits = [h for h in self.remote_habits if h.id != habit.id]
            logger.info("Deleted habit %s for user %s", habit.id, user_id)
        else:
            self.local_habits = [h for h in self.local_habits if h.id != habit.id]

    def import_local_habits(self, *, user_id: int, today: date) -> list[HabitSnapshot]:
        """Move guest habits into the signed-in account and clear the local list."""

        imported: list[HabitSnapshot] = []
        for habit in self.local_habits:
            stored = self.habit_repo.create(snapshot_to_model(habit, user_id=user_id), user_id=user_id)
            for day in habit.completed_dates:
                self.habit_repo.add_completion(stored.id, day, user_id=user_id)
            imported.append(replace(habit, id=stored.id))
        self.local_habits = []
        if imported:
            logger.info("Imported %d guest habit(s) into user %s", len(imported), user_id)
        self.fetch_habits(user_id=user_id, today=today)
        return imported

    def _replace(self, habit: HabitSnapshot, *, user_id: Optional[int]) -> None:
        collection = self.habits_for(user_id)
        for index, existing in enumerate(collection):
            if existing.id == habit.id:
                collection[index] = habit
                return

    # -------------------------------------------------------------- categories
    def fetch_categories(
        self, *, user_id: Optional[int], saved_local: Optional[Sequence[str]] = None
    ) -> list[str]:
        """Defaults plus custom categories; guests restore their saved list when present."""

        if user_id is not None:
            custom = self.category_repo.list_names(user_id=user_id)
            self.categories = merge_categories(custom, self.default_categories)
        elif saved_local:
            self.categories = list(saved_local)
        else:
            self.categories = list(self.default_categories)
        return self.categories

    def add_category(self, raw_name: str, *, user_id: Optional[int]) -> str:
        if user_id is None:
            raise AuthError("Sign in to add categories.")
        name = normalize_category_name(raw_name, existing=self.categories)
        self.category_repo.add(name, user_id=user_id)
        self.categories.append(name)
        return name

    def delete_category(self, name: str, *, user_id: Optional[int]) -> None:
        """Remove a category unless a habit still references it.

        Default categories are only dropped from the in-memory list; custom
        ones are also deleted from storage.
        """

        if user_id is not None:
            usage = self.habit_repo.count_by_category(name, user_id=user_id)
        else:
            usage = sum(1 for habit in self.local_habits if habit.category == name)
        ensure_category_unused(name, usage)

        if user_id is not None and name not in self.default_categories:
            self.category_repo.delete(name, user_id=user_id)
        self.categories = [category for category in self.categories if category != name]


__all__ = ["HabitStore", "sync_remote_habits"]
