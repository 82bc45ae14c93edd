"""Account routes: registration, sign-in and sign-out."""

from __future__ import annotations

from flask import jsonify, session

from . import bp
from ...errors import AuthError
from ...extensions import get_context
from ...logging_config import get_logger
from ...services.auth import authenticate, create_user
from ..common import USER_KEY, json_body, load_store, request_today, save_store

logger = get_logger(__name__)


def _sign_in(user_id: int) -> int:
    """Attach the account to the session and move guest habits into it."""

    today = request_today()
    store = load_store(user_id=None, today=today)
    imported = store.import_local_habits(user_id=user_id, today=today)
    session[USER_KEY] = user_id
    save_store(store)
    return len(imported)


@bp.post("/register")
def register():
    payload = json_body()
    ctx = get_context()
    user = create_user(
        username=str(payload.get("username", "")),
        password=str(payload.get("password", "")),
        session_factory=ctx.session_factory,
    )
    imported = _sign_in(user.id)
    logger.info("Registered user %s", user.id)
    return jsonify({"id": user.id, "username": user.username, "imported_habits": imported}), 201


@bp.post("/login")
def login():
    payload = json_body()
    ctx = get_context()
    user = authenticate(
        username=str(payload.get("username", "")),
        password=str(payload.get("password", "")),
        session_factory=ctx.session_factory,
    )
    if user is None:
        raise AuthError("Invalid username or password.")
    imported = _sign_in(user.id)
    return jsonify({"id": user.id, "username": user.username, "imported_habits": imported})


@bp.post("/logout")
def logout():
    """Forget the account; guest state starts empty again."""

    session.clear()
    return jsonify({"signed_in": False})
