"""Tests for the per-client habit store and cached-field sync."""

from __future__ import annotations

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from habitgarden.core import HabitSnapshot
from habitgarden.errors import AuthError, CategoryError, CategoryInUseError, HabitNotDueError, HabitNotFoundError
from habitgarden.services.habits import habit_statistics, habit_to_payload, snapshot_from_payload
from habitgarden.services.store import HabitStore, sync_remote_habits

TODAY = date(2026, 2, 10)  # Tuesday
NOW = datetime(2026, 2, 9, 23, 0, tzinfo=timezone.utc)  # 08:00 on TODAY in Tokyo


@pytest.fixture
def store(habit_repo, category_repo) -> HabitStore:
    return HabitStore(habit_repo=habit_repo, category_repo=category_repo)


class TestSyncRemoteHabits:
    def test_recomputes_and_persists_stale_cache(self, habit_factory, habit_repo, user):
        habit = habit_factory(completed_dates=[date(2026, 2, 8), date(2026, 2, 9), TODAY])
        synced = sync_remote_habits(habit_repo, user_id=user.id, today=TODAY)

        assert synced[0].current_streak == 3
        assert synced[0].completed is True
        stored = habit_repo.get_by_id(habit.id, user_id=user.id)
        assert (stored.completed, stored.current_streak, stored.longest_streak) == (True, 3, 3)

    def test_unchanged_habits_are_not_rewritten(self, habit_factory, habit_repo, user, monkeypatch):
        habit_factory()
        calls = []
        monkeypatch.setattr(habit_repo, "update_cached_fields", lambda *a, **k: calls.append(a))
        sync_remote_habits(habit_repo, user_id=user.id, today=TODAY)
        assert calls == []


class TestSignedInHabits:
    def test_add_habit_gets_database_id(self, store, habit_repo, user):
        habit = store.add_habit({"title": "Run", "category": "Exercise"}, user_id=user.id, now=NOW)
        assert isinstance(habit.id, int)
        assert store.remote_habits == [habit]
        assert store.local_habits == []
        assert habit_repo.get_by_id(habit.id, user_id=user.id).title == "Run"

    def test_add_habit_stores_utc_creation_time(self, store, habit_repo, user):
        habit = store.add_habit({"title": "Run"}, user_id=user.id, now=NOW, today=TODAY)

        assert habit.created_at == NOW
        assert habit.created_at.tzinfo is not None
        stored = habit_repo.get_by_id(habit.id, user_id=user.id)
        assert stored.created_at.replace(tzinfo=timezone.utc) == NOW

        refetched = store.fetch_habits(user_id=user.id, today=TODAY)
        assert refetched[0].created_at == NOW

    def test_add_habit_reads_naive_now_as_utc(self, store, user):
        habit = store.add_habit({"title": "Run"}, user_id=user.id, now=datetime(2026, 2, 10, 8, 0))
        assert habit.created_at == datetime(2026, 2, 10, 8, 0, tzinfo=timezone.utc)

    def test_toggle_persists_entry_and_cache(self, store, habit_factory, habit_repo, user):
        stored = habit_factory(completed_dates=[date(2026, 2, 9)])
        store.fetch_habits(user_id=user.id, today=TODAY)

        toggled = store.toggle_completion(stored.id, user_id=user.id, today=TODAY)
        assert toggled.completed is True
        assert toggled.current_streak == 2
        assert habit_repo.completed_dates(stored.id, user_id=user.id) == {date(2026, 2, 9), TODAY}
        assert habit_repo.get_by_id(stored.id, user_id=user.id).current_streak == 2

        untoggled = store.toggle_completion(str(stored.id), user_id=user.id, today=TODAY)
        assert untoggled.completed is False
        assert untoggled.current_streak == 1
        assert habit_repo.completed_dates(stored.id, user_id=user.id) == {date(2026, 2, 9)}

    def test_toggle_rejects_days_that_are_not_due(self, store, habit_factory, user):
        stored = habit_factory(frequency_type="weekly", days_of_week=[0])
        store.fetch_habits(user_id=user.id, today=TODAY)
        with pytest.raises(HabitNotDueError):
            store.toggle_completion(stored.id, user_id=user.id, today=TODAY)

    def test_schedule_edit_recomputes_streaks(self, store, habit_factory, habit_repo, user):
        stored = habit_factory(completed_dates=[date(2026, 2, 8), date(2026, 2, 9)])
        store.fetch_habits(user_id=user.id, today=TODAY)
        assert store.get_habit(stored.id, user_id=user.id).current_streak == 2

        updated = store.update_habit(
            stored.id,
            {"frequency_type": "weekly", "days_of_week": [1]},  # Mondays
            user_id=user.id,
            today=TODAY,
        )
        # Only 2026-02-09 is a Monday completion now
        assert updated.current_streak == 1
        assert updated.longest_streak == 1
        row = habit_repo.get_by_id(stored.id, user_id=user.id)
        assert row.frequency_type == "weekly"
        assert row.days_of_week == [1]
        assert row.current_streak == 1

    def test_update_notification_fields(self, store, habit_factory, habit_repo, user):
        stored = habit_factory()
        store.fetch_habits(user_id=user.id, today=TODAY)
        updated = store.update_habit(
            stored.id, {"notification_enabled": True, "reminder_time": "07:15"}, user_id=user.id, today=TODAY
        )
        assert updated.notification.enabled is True
        row = habit_repo.get_by_id(stored.id, user_id=user.id)
        assert (row.notification_enabled, row.reminder_time) == (True, "07:15")

    def test_delete_habit(self, store, habit_factory, habit_repo, user):
        stored = habit_factory()
        store.fetch_habits(user_id=user.id, today=TODAY)
        store.delete_habit(stored.id, user_id=user.id)
        assert store.remote_habits == []
        assert habit_repo.get_by_id(stored.id, user_id=user.id) is None

    def test_unknown_habit(self, store, user):
        with pytest.raises(HabitNotFoundError):
            store.get_habit(999, user_id=user.id)


class TestGuestHabits:
    def test_guest_habits_stay_local(self, store, habit_repo, user):
        habit = store.add_habit({"title": "Journal"}, user_id=None, now=NOW)
        assert isinstance(habit.id, str)
        assert store.local_habits == [habit]
        assert store.remote_habits == []
        assert habit_repo.list_all(user_id=user.id) == []

    def test_guest_toggle_updates_cache(self, store):
        habit = store.add_habit({"title": "Journal"}, user_id=None, now=NOW)
        toggled = store.toggle_completion(habit.id, user_id=None, today=TODAY)
        assert toggled.completed is True
        assert toggled.completed_dates == frozenset({TODAY})
        assert store.local_habits[0].current_streak == 1

    def test_guest_toggle_rejects_non_due_day(self, store):
        habit = store.add_habit(
            {"title": "Swim", "frequency_type": "weekly", "days_of_week": [0]}, user_id=None, now=NOW
        )
        with pytest.raises(HabitNotDueError):
            store.toggle_completion(habit.id, user_id=None, today=TODAY)

    def test_import_local_habits_moves_them_to_the_account(self, store, habit_repo, user):
        habit = store.add_habit({"title": "Journal"}, user_id=None, now=NOW)
        store.toggle_completion(habit.id, user_id=None, today=TODAY)

        imported = store.import_local_habits(user_id=user.id, today=TODAY)
        assert len(imported) == 1
        assert store.local_habits == []
        assert [h.title for h in store.remote_habits] == ["Journal"]
        row = habit_repo.list_all(user_id=user.id)[0]
        assert habit_repo.completed_dates(row.id, user_id=user.id) == {TODAY}
        assert row.current_streak == 1

    def test_payload_round_trip_keeps_schedule_and_dates(self, store):
        habit = store.add_habit(
            {
                "title": "Water plants",
                "frequency_type": "interval",
                "interval_days": 3,
                "start_date": date(2026, 2, 1),
                "notification_enabled": True,
                "reminder_time": "18:00",
            },
            user_id=None,
            now=NOW,
        )
        restored = snapshot_from_payload(habit_to_payload(habit))
        assert restored == habit


class TestCategories:
    def test_defaults_then_custom_for_signed_in_users(self, store, category_repo, user):
        category_repo.add("Music", user_id=user.id)
        categories = store.fetch_categories(user_id=user.id)
        assert categories[0] == "Lifestyle"
        assert categories[-1] == "Music"

    def test_guest_restores_saved_list(self, store):
        assert store.fetch_categories(user_id=None, saved_local=["Only"]) == ["Only"]
        assert "Health" in store.fetch_categories(user_id=None)

    def test_guests_cannot_add_categories(self, store):
        store.fetch_categories(user_id=None)
        with pytest.raises(AuthError):
            store.add_category("Music", user_id=None)

    def test_add_rejects_duplicates_and_blank(self, store, user):
        store.fetch_categories(user_id=user.id)
        assert store.add_category("  Music ", user_id=user.id) == "Music"
        with pytest.raises(CategoryError):
            store.add_category("Music", user_id=user.id)
        with pytest.raises(CategoryError):
            store.add_category("   ", user_id=user.id)

    def test_delete_in_use_category_is_refused(self, store, habit_factory, user):
        habit_factory(category="Health")
        store.fetch_categories(user_id=user.id)
        with pytest.raises(CategoryInUseError):
            store.delete_category("Health", user_id=user.id)

    def test_delete_custom_category(self, store, category_repo, user):
        store.fetch_categories(user_id=user.id)
        store.add_category("Music", user_id=user.id)
        store.delete_category("Music", user_id=user.id)
        assert "Music" not in store.categories
        assert category_repo.list_names(user_id=user.id) == []


class TestHabitStatistics:
    def test_all_time_window_starts_on_the_local_creation_day(self):
        habit = HabitSnapshot(
            created_at=NOW,
            completed_dates=frozenset({TODAY}),
            current_streak=1,
        )

        local = habit_statistics(habit, today=TODAY, zone=ZoneInfo("Asia/Tokyo"))
        assert local["completion_rates"]["all_time"] == 100.0

        # read as UTC the habit was created the day before
        utc = habit_statistics(habit, today=TODAY, zone=timezone.utc)
        assert utc["completion_rates"]["all_time"] == 50.0
