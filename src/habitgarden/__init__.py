"""HabitGarden habit tracker package."""

from __future__ import annotations

from .app import create_app
from .config import BaseConfig, DevConfig, TestConfig

__version__ = "0.1.0"

__all__ = ["BaseConfig", "DevConfig", "TestConfig", "create_app"]
