"""Push token registration and the interactive reminder check."""

from __future__ import annotations

import re

from flask import jsonify, request

from . import bp
from ...core import format_date, habits_to_remind
from ...core.reminders import format_clock
from ...errors import AuthError, FormValidationError
from ...extensions import get_context
from ..common import current_user_id, json_body, load_store

_CLOCK_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _require_user() -> int:
    user_id = current_user_id()
    if user_id is None:
        raise AuthError("Sign in to receive push reminders.")
    return user_id


def _token_from_body() -> str:
    token = str(json_body().get("token", "")).strip()
    if not token:
        raise FormValidationError({"token": ["A device token is required."]})
    return token


@bp.post("/tokens")
def register_token():
    user_id = _require_user()
    token = _token_from_body()
    created = get_context().token_repo.add(token, user_id=user_id)
    return jsonify({"registered": True, "created": created}), 201 if created else 200


@bp.delete("/tokens")
def unregister_token():
    user_id = _require_user()
    get_context().token_repo.remove(_token_from_body(), user_id=user_id)
    return "", 204


@bp.get("/due")
def due_reminders():
    """Habits whose reminder fires at ``time`` (default: now on the reminder clock)."""

    ctx = get_context()
    now = ctx.config.local_now()
    current_time, today = format_clock(now), now.date()
    requested = request.args.get("time")
    if requested:
        if not _CLOCK_RE.match(requested):
            raise FormValidationError({"time": ["Use the HH:MM format."]})
        current_time = requested

    user_id = current_user_id()
    store = load_store(user_id=user_id, today=today)
    matched = habits_to_remind(store.habits_for(user_id), current_time, today)
    return jsonify(
        {
            "time": current_time,
            "today": format_date(today),
            "habits": [{"id": habit.id, "title": habit.title} for habit in matched],
        }
    )
