"""Custom category repository protocol."""

from __future__ import annotations

from typing import Protocol


class CategoryRepository(Protocol):
    """Repository for user-added habit categories."""

    def list_names(self, *, user_id: int) -> list[str]:
        """Custom category names in creation order."""
        ...

    def add(self, name: str, *, user_id: int) -> None:
        """Persist a new custom category."""
        ...

    def delete(self, name: str, *, user_id: int) -> int:
        """Delete every custom category with ``name``; return how many were removed."""
        ...
