"""Request helpers shared by the HabitGarden blueprints."""

from __future__ import annotations

from datetime import date, tzinfo
from typing import Any, Optional

from flask import Flask, jsonify, request, session

from ..errors import HabitGardenError
from ..extensions import get_context
from ..logging_config import get_logger
from ..services.habits import habit_to_payload, snapshot_from_payload
from ..services.store import HabitStore

logger = get_logger(__name__)

LOCAL_HABITS_KEY = "local_habits"
LOCAL_CATEGORIES_KEY = "local_categories"
USER_KEY = "user_id"


def current_user_id() -> Optional[int]:
    """Signed-in account id, or ``None`` for guests."""

    return session.get(USER_KEY)


def request_today() -> date:
    """Today on the configured wall clock, the same day reminders use."""

    return get_context().config.local_today()


def request_zone() -> tzinfo:
    return get_context().config.reminder_zone()


def load_store(*, user_id: Optional[int], today: date) -> HabitStore:
    """Build the per-request store and refresh the active habit collection."""

    local = [snapshot_from_payload(item) for item in session.get(LOCAL_HABITS_KEY, [])]
    store = get_context().new_store(local_habits=local)
    store.fetch_habits(user_id=user_id, today=today)
    store.fetch_categories(user_id=user_id, saved_local=session.get(LOCAL_CATEGORIES_KEY))
    return store


def save_store(store: HabitStore) -> None:
    """Persist guest state back into the session cookie."""

    session[LOCAL_HABITS_KEY] = [habit_to_payload(habit) for habit in store.local_habits]
    session[LOCAL_CATEGORIES_KEY] = list(store.categories)


def json_body() -> dict[str, Any]:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def register_error_handlers(app: Flask) -> None:
    """Render service-layer failures as JSON responses."""

    @app.errorhandler(HabitGardenError)
    def handle_habitgarden_error(exc: HabitGardenError):
        logger.info("Request failed: %s", exc.message, extra={"status": exc.status_code})
        body: dict[str, Any] = {"error": exc.message}
        if exc.details:
            body["details"] = exc.details
        return jsonify(body), exc.status_code


__all__ = [
    "current_user_id",
    "json_body",
    "load_store",
    "register_error_handlers",
    "request_today",
    "request_zone",
    "save_store",
]
