"""Habit routes."""

from __future__ import annotations

from datetime import datetime, timezone

from flask import Response, jsonify, request

from . import bp
from ...core import (
    calculate_monthly_trend,
    format_date,
    get_completion_status_for_period,
    is_due,
    parse_date,
)
from ...core.dates import current_month_range
from ...errors import FormValidationError
from ...logging_config import get_logger
from ...services.charts import build_trend_chart, render_png
from ...services.habits import habit_statistics, habit_to_payload
from ..common import current_user_id, json_body, load_store, request_today, request_zone, save_store
from .forms import HabitForm, form_data_for

logger = get_logger(__name__)

# Longest range the calendar endpoint will expand in one request
MAX_CALENDAR_DAYS = 366


def _habit_json(habit, today) -> dict:
    payload = habit_to_payload(habit)
    payload["is_due_today"] = is_due(habit, today)
    return payload


@bp.get("/")
def list_habits():
    """Return the active habits with freshly recomputed cached fields."""

    user_id = current_user_id()
    today = request_today()
    store = load_store(user_id=user_id, today=today)
    save_store(store)
    habits = store.habits_for(user_id)
    return jsonify(
        {
            "today": format_date(today),
            "signed_in": user_id is not None,
            "habits": [_habit_json(habit, today) for habit in habits],
        }
    )


@bp.post("/")
def create_habit():
    user_id = current_user_id()
    today = request_today()
    form = HabitForm.parse(json_body())
    store = load_store(user_id=user_id, today=today)
    habit = store.add_habit(form.to_fields(), user_id=user_id, now=datetime.now(timezone.utc), today=today)
    save_store(store)
    return jsonify(_habit_json(habit, today)), 201


@bp.get("/<habit_id>")
def get_habit(habit_id: str):
    user_id = current_user_id()
    today = request_today()
    store = load_store(user_id=user_id, today=today)
    return jsonify(_habit_json(store.get_habit(habit_id, user_id=user_id), today))


@bp.patch("/<habit_id>")
def update_habit(habit_id: str):
    """Apply a partial edit; the merged habit is validated as a whole."""

    user_id = current_user_id()
    today = request_today()
    store = load_store(user_id=user_id, today=today)
    existing = store.get_habit(habit_id, user_id=user_id)

    merged = form_data_for(habit_to_payload(existing))
    merged.update(json_body())
    form = HabitForm.parse(merged)

    habit = store.update_habit(habit_id, form.to_fields(), user_id=user_id, today=today)
    save_store(store)
    return jsonify(_habit_json(habit, today))


@bp.delete("/<habit_id>")
def delete_habit(habit_id: str):
    user_id = current_user_id()
    store = load_store(user_id=user_id, today=request_today())
    store.delete_habit(habit_id, user_id=user_id)
    save_store(store)
    return "", 204


@bp.post("/<habit_id>/toggle")
def toggle_habit(habit_id: str):
    """Toggle habit completion state for today."""

    user_id = current_user_id()
    today = request_today()
    store = load_store(user_id=user_id, today=today)
    habit = store.toggle_completion(habit_id, user_id=user_id, today=today)
    save_store(store)
    logger.info(
        "Habit %s %s for %s",
        habit.id,
        "completed" if habit.completed else "reopened",
        format_date(today),
    )
    return jsonify(_habit_json(habit, today))


@bp.get("/<habit_id>/stats")
def habit_stats(habit_id: str):
    user_id = current_user_id()
    today = request_today()
    store = load_store(user_id=user_id, today=today)
    habit = store.get_habit(habit_id, user_id=user_id)
    return jsonify({"id": habit.id, **habit_statistics(habit, today=today, zone=request_zone())})


@bp.get("/<habit_id>/calendar")
def habit_calendar(habit_id: str):
    """Per-day completion grid; defaults to the current month."""

    user_id = current_user_id()
    today = request_today()
    default_start, default_end = current_month_range(today)
    try:
        start = parse_date(request.args.get("start") or default_start)
        end = parse_date(request.args.get("end") or default_end)
    except ValueError:
        raise FormValidationError({"start": ["Dates must use YYYY-MM-DD."]}) from None
    if end >= start and (end - start).days + 1 > MAX_CALENDAR_DAYS:
        raise FormValidationError({"end": [f"A calendar covers at most {MAX_CALENDAR_DAYS} days."]})

    store = load_store(user_id=user_id, today=today)
    habit = store.get_habit(habit_id, user_id=user_id)
    days = get_completion_status_for_period(habit, start, end)
    return jsonify(
        {
            "id": habit.id,
            "start": format_date(start),
            "end": format_date(end),
            "days": [
                {"date": format_date(day.date), "completed": day.completed, "is_due": day.is_due}
                for day in days
            ],
        }
    )


@bp.get("/<habit_id>/trend")
def habit_trend(habit_id: str):
    user_id = current_user_id()
    today = request_today()
    store = load_store(user_id=user_id, today=today)
    habit = store.get_habit(habit_id, user_id=user_id)
    points = calculate_monthly_trend(habit, today=today)
    return jsonify(
        {
            "id": habit.id,
            "points": [
                {"date": format_date(point.date), "completion_rate": point.completion_rate}
                for point in points
            ],
        }
    )


@bp.get("/<habit_id>/trend.png")
def habit_trend_png(habit_id: str):
    user_id = current_user_id()
    today = request_today()
    store = load_store(user_id=user_id, today=today)
    habit = store.get_habit(habit_id, user_id=user_id)
    figure = build_trend_chart(calculate_monthly_trend(habit, today=today), title=habit.title, color=habit.color)
    return Response(render_png(figure), mimetype="image/png")
