"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from .config import BaseConfig
from .infra.database import SessionFactory, bootstrap_database
from .infra.repositories import (
    SQLModelCategoryRepository,
    SQLModelDeviceTokenRepository,
    SQLModelHabitRepository,
)
from .services.reminders import LoggingPushSender, PushSender
from .services.store import HabitStore


@dataclass
class AppContext:
    """Shared services wired once per process (web app, CLI, or scheduler)."""

    config: BaseConfig
    session_factory: SessionFactory

    habit_repo: SQLModelHabitRepository
    category_repo: SQLModelCategoryRepository
    token_repo: SQLModelDeviceTokenRepository

    push_sender: PushSender

    def new_store(self, *, local_habits: Sequence = (), categories: Sequence[str] = ()) -> HabitStore:
        """Create a fresh per-client state object backed by the shared repositories."""

        return HabitStore(
            habit_repo=self.habit_repo,
            category_repo=self.category_repo,
            default_categories=self.config.DEFAULT_CATEGORIES,
            local_habits=list(local_habits),
            categories=list(categories),
        )


def create_app_context(
    config: Optional[BaseConfig] = None, *, push_sender: Optional[PushSender] = None
) -> AppContext:
    """Create the engine, initialize the schema and wire repositories."""

    if config is None:
        config = BaseConfig()

    _, session_factory = bootstrap_database(config)

    return AppContext(
        config=config,
        session_factory=session_factory,
        habit_repo=SQLModelHabitRepository(session_factory),
        category_repo=SQLModelCategoryRepository(session_factory),
        token_repo=SQLModelDeviceTokenRepository(session_factory),
        push_sender=push_sender or LoggingPushSender(),
    )


__all__ = ["AppContext", "create_app_context"]
