"""Category routes."""

from __future__ import annotations

from flask import jsonify

from . import bp
from ..common import current_user_id, json_body, load_store, request_today, save_store


@bp.get("/")
def list_categories():
    store = load_store(user_id=current_user_id(), today=request_today())
    return jsonify({"categories": store.categories})


@bp.post("/")
def add_category():
    """Add a custom category; only signed-in accounts keep custom names."""

    user_id = current_user_id()
    store = load_store(user_id=user_id, today=request_today())
    name = store.add_category(str(json_body().get("name", "")), user_id=user_id)
    save_store(store)
    return jsonify({"name": name, "categories": store.categories}), 201


@bp.delete("/<path:name>")
def delete_category(name: str):
    user_id = current_user_id()
    store = load_store(user_id=user_id, today=request_today())
    store.delete_category(name, user_id=user_id)
    save_store(store)
    return jsonify({"categories": store.categories})
