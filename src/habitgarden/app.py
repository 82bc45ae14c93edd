"""HabitGarden application factory."""

from __future__ import annotations

from importlib import import_module
from typing import Iterable, Optional

from flask import Flask

from . import cli as _cli
from .config import BaseConfig, DevConfig, TestConfig
from .context import create_app_context
from .extensions import init_extensions
from .logging_config import get_logger, setup_logging
from .services.reminders import PushSender

logger = get_logger(__name__)

_CONFIG_MAP = {
    "development": DevConfig,
    "testing": TestConfig,
    "default": BaseConfig,
}


def _resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return BaseConfig
    return _CONFIG_MAP.get(name.lower(), BaseConfig)


def _blueprint_paths() -> Iterable[str]:
    """Yield blueprint import paths in registration order."""

    yield "habitgarden.blueprints.account"
    yield "habitgarden.blueprints.habits"
    yield "habitgarden.blueprints.garden"
    yield "habitgarden.blueprints.categories"
    yield "habitgarden.blueprints.notifications"


def create_app(
    config_name: str | None = None,
    *,
    config: Optional[BaseConfig] = None,
    push_sender: Optional[PushSender] = None,
) -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__, instance_relative_config=True)
    config_obj = config or _resolve_config(config_name)()
    app.config.from_object(config_obj)
    app.config["HABITGARDEN_CONFIG"] = config_obj
    app.json.ensure_ascii = False

    setup_logging(config_obj)

    ctx = create_app_context(config_obj, push_sender=push_sender)
    init_extensions(app, ctx)
    _register_blueprints(app)
    _cli.init_app(app)

    logger.info("Application created", extra={"database_url": config_obj.DATABASE_URL})
    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    from .blueprints.common import register_error_handlers

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        blueprint = getattr(module, "bp")
        app.register_blueprint(blueprint)
    register_error_handlers(app)


__all__ = ["create_app"]
