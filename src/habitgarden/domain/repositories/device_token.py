"""Push token repository protocol."""

from __future__ import annotations

from typing import Protocol


class DeviceTokenRepository(Protocol):
    """Repository for push delivery targets."""

    def add(self, token: str, *, user_id: int) -> bool:
        """Register a token; False when it was already stored."""
        ...

    def remove(self, token: str, *, user_id: int) -> None:
        """Forget a token."""
        ...

    def list_tokens(self, *, user_id: int) -> list[str]:
        """Tokens registered for one user."""
        ...

    def tokens_by_user(self) -> dict[int, list[str]]:
        """Every user that has at least one token, with their tokens."""
        ...
