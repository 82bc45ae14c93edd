"""Category list rules shared by signed-in and guest flows."""

from __future__ import annotations

from typing import Iterable, Sequence

from ..config import DEFAULT_CATEGORIES
from ..errors import CategoryError, CategoryInUseError

MAX_CATEGORY_LENGTH = 64


def merge_categories(custom: Iterable[str], defaults: Sequence[str] = DEFAULT_CATEGORIES) -> list[str]:
    """Default seed first, then custom entries, without duplicates."""

    merged = list(defaults)
    for name in custom:
        if name not in merged:
            merged.append(name)
    return merged


def normalize_category_name(raw: str, *, existing: Iterable[str]) -> str:
    """Trim ``raw`` and reject empty, overlong or duplicate names."""

    name = (raw or "").strip()
    if not name:
        raise CategoryError("Please enter a category name.")
    if len(name) > MAX_CATEGORY_LENGTH:
        raise CategoryError(f"Category names are limited to {MAX_CATEGORY_LENGTH} characters.")
    if name in set(existing):
        raise CategoryError("This category already exists.")
    return name


def ensure_category_unused(name: str, usage_count: int) -> None:
    """Refuse to delete a category that habits still reference."""

    if usage_count > 0:
        raise CategoryInUseError(
            f"Category '{name}' is used by {usage_count} habit(s). Change them first.",
            details={"category": name, "habit_count": usage_count},
        )


__all__ = ["ensure_category_unused", "merge_categories", "normalize_category_name"]
