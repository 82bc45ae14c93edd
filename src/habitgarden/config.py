"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from datetime import date, datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

load_dotenv()

DEFAULT_CATEGORIES: tuple[str, ...] = (
    "Lifestyle",
    "Exercise",
    "Health",
    "Study",
    "Work",
    "Hobby",
    "Money",
)


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "HabitGarden"
    DB_FILENAME = "habitgarden.db"
    SQLITE_PRAGMAS = {"journal_mode": "wal", "foreign_keys": "on"}
    DEFAULT_CATEGORIES = DEFAULT_CATEGORIES
    TESTING = False

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("HABITGARDEN_SECRET_KEY", "replace-me")
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("HABITGARDEN_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("HABITGARDEN_DATABASE_URL", self._build_sqlite_url())
        self.REMINDER_TIMEZONE = os.getenv("HABITGARDEN_REMINDER_TIMEZONE", "Asia/Tokyo")
        self.ENABLE_SCHEDULER = _env_bool("HABITGARDEN_ENABLE_SCHEDULER", default=False)
        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("HABITGARDEN_SECRET_KEY must be set in non-dev mode.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("HABITGARDEN_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def reminder_zone(self) -> ZoneInfo:
        """Timezone whose wall clock defines "today" and drives reminder matching."""

        return ZoneInfo(self.REMINDER_TIMEZONE)

    def local_now(self) -> datetime:
        return datetime.now(self.reminder_zone())

    def local_today(self) -> date:
        """The calendar day used by requests, sync and reminders alike."""

        return self.local_now().date()

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        connect_args: dict[str, Any] = {"check_same_thread": False}
        return {"connect_args": connect_args}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True
    TESTING = False


class TestConfig(BaseConfig):
    """Configuration for the pytest suite; never starts background jobs."""

    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.ENABLE_SCHEDULER = False


__all__ = ["BaseConfig", "DEFAULT_CATEGORIES", "DevConfig", "TestConfig"]
