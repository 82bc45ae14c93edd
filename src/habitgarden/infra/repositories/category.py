"""SQLModel implementation of the custom category repository."""

from __future__ import annotations

from sqlmodel import select

from ...models.category import CustomCategory
from ..database import SessionFactory


class SQLModelCategoryRepository:
    """SQLModel-based category repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def list_names(self, *, user_id: int) -> list[str]:
        """List custom category names in the order they were added."""
        with self.session_factory() as session:
            statement = (
                select(CustomCategory.name)
                .where(CustomCategory.user_id == user_id)
                .order_by(CustomCategory.created_at, CustomCategory.id)  # type: ignore[arg-type]
            )
            return list(session.exec(statement).all())

    def add(self, name: str, *, user_id: int) -> None:
        """Persist a new custom category."""
        with self.session_factory() as session:
            session.add(CustomCategory(name=name, user_id=user_id))
            session.commit()

    def delete(self, name: str, *, user_id: int) -> int:
        """Delete all custom categories named ``name``."""
        with self.session_factory() as session:
            rows = list(
                session.exec(
                    select(CustomCategory).where(
                        CustomCategory.user_id == user_id, CustomCategory.name == name
                    )
                ).all()
            )
            for row in rows:
                session.delete(row)
            session.commit()
            return len(rows)
