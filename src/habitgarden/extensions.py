"""Attach the application context and scheduler to a Flask app."""

from __future__ import annotations

from typing import Optional

from flask import Flask, current_app

from .context import AppContext
from .scheduler import ReminderScheduler, create_scheduler

_EXTENSION_KEY = "habitgarden"


def init_extensions(app: Flask, ctx: AppContext) -> None:
    """Store the context on the app and start the reminder job when enabled."""

    start = bool(ctx.config.ENABLE_SCHEDULER) and not app.testing
    state = app.extensions.setdefault(_EXTENSION_KEY, {})
    state["context"] = ctx
    state["scheduler"] = create_scheduler(ctx, auto_start=start)


def get_context(app: Optional[Flask] = None) -> AppContext:
    """Return the context for ``app`` (default: the active app)."""

    target = app or current_app
    try:
        return target.extensions[_EXTENSION_KEY]["context"]
    except KeyError:  # pragma: no cover - misconfigured app
        raise RuntimeError("HabitGarden context not initialized") from None


def get_scheduler(app: Optional[Flask] = None) -> ReminderScheduler:
    target = app or current_app
    return target.extensions[_EXTENSION_KEY]["scheduler"]


__all__ = ["get_context", "get_scheduler", "init_extensions"]
