"""SQLModel implementation of the push token repository."""

from __future__ import annotations

from collections import defaultdict

from sqlmodel import select

from ...models.user import DeviceToken
from ..database import SessionFactory


class SQLModelDeviceTokenRepository:
    """SQLModel-based device token repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def add(self, token: str, *, user_id: int) -> bool:
        """Register ``token`` for the user unless it is already stored."""
        with self.session_factory() as session:
            existing = session.exec(
                select(DeviceToken).where(DeviceToken.user_id == user_id, DeviceToken.token == token)
            ).first()
            if existing is not None:
                return False
            session.add(DeviceToken(user_id=user_id, token=token))
            session.commit()
            return True

    def remove(self, token: str, *, user_id: int) -> None:
        """Forget a token."""
        with self.session_factory() as session:
            rows = session.exec(
                select(DeviceToken).where(DeviceToken.user_id == user_id, DeviceToken.token == token)
            ).all()
            for row in rows:
                session.delete(row)
            session.commit()

    def list_tokens(self, *, user_id: int) -> list[str]:
        """Tokens for one user, oldest first."""
        with self.session_factory() as session:
            statement = (
                select(DeviceToken.token)
                .where(DeviceToken.user_id == user_id)
                .order_by(DeviceToken.id)  # type: ignore[arg-type]
            )
            return list(session.exec(statement).all())

    def tokens_by_user(self) -> dict[int, list[str]]:
        """Group every stored token by its owner."""
        grouped: dict[int, list[str]] = defaultdict(list)
        with self.session_factory() as session:
            statement = select(DeviceToken.user_id, DeviceToken.token).order_by(
                DeviceToken.user_id, DeviceToken.id  # type: ignore[arg-type]
            )
            for user_id, token in session.exec(statement).all():
                grouped[user_id].append(token)
        return dict(grouped)
