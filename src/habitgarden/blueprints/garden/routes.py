"""Garden overview: weather plus one tree per habit."""

from __future__ import annotations

from flask import jsonify

from . import bp
from ...core import calculate_growth_rate, find_most_consistent_habits, format_date, garden_weather, tree_level
from ...core.completion import round_for_display
from ..common import current_user_id, load_store, request_today, request_zone, save_store


@bp.get("/")
def garden_overview():
    user_id = current_user_id()
    today = request_today()
    zone = request_zone()
    store = load_store(user_id=user_id, today=today)
    save_store(store)
    habits = store.habits_for(user_id)

    trees = []
    for habit in habits:
        growth = calculate_growth_rate(habit, today=today, zone=zone)
        trees.append(
            {
                "id": habit.id,
                "title": habit.title,
                "color": habit.color,
                "growth_rate": growth,
                "growth_display": round_for_display(growth),
                "tree_level": tree_level(growth),
                "current_streak": habit.current_streak,
            }
        )

    return jsonify(
        {
            "today": format_date(today),
            "weather": garden_weather(habits, today=today).value,
            "trees": trees,
            "most_consistent": [habit.id for habit in find_most_consistent_habits(habits)],
        }
    )
