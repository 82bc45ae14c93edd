"""User-defined habit categories."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class CustomCategory(SQLModel, table=True):
    """A category added on top of the default seed list."""

    __tablename__: ClassVar[str] = "custom_category"
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_custom_category_user_name"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=64)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
