"""Account creation and credential checks."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError
from sqlmodel import select

from ..errors import AuthError
from ..infra.database import SessionFactory
from ..models.user import User

_hasher = PasswordHasher()
MIN_PASSWORD_LENGTH = 8


def create_user(*, username: str, password: str, session_factory: SessionFactory) -> User:
    """Create a new user with an argon2 password hash."""

    username = username.strip()
    if not username:
        raise AuthError("Please choose a username.")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise AuthError(f"Passwords need at least {MIN_PASSWORD_LENGTH} characters.")

    password_hash = _hasher.hash(password)
    with session_factory() as session:
        existing = session.exec(select(User).where(User.username == username)).first()
        if existing:
            raise AuthError("Username already exists.", details={"username": username})
        user = User(username=username, password_hash=password_hash)
        session.add(user)
        session.commit()
        session.refresh(user)
        session.expunge(user)
        return user


def authenticate(*, username: str, password: str, session_factory: SessionFactory) -> Optional[User]:
    """Validate credentials and return the user when correct."""

    username = username.strip()
    if not username:
        return None
    with session_factory() as session:
        user = session.exec(select(User).where(User.username == username)).first()
        if user is None:
            return None
        try:
            _hasher.verify(user.password_hash, password)
        except (VerifyMismatchError, InvalidHash, VerificationError):
            return None

        user.last_login = datetime.now(timezone.utc)
        session.add(user)
        session.commit()
        session.refresh(user)
        session.expunge(user)
        return user


def list_user_ids(session_factory: SessionFactory) -> list[int]:
    """Every account id, in creation order."""

    with session_factory() as session:
        return list(session.exec(select(User.id).order_by(User.id)).all())  # type: ignore[arg-type]


__all__ = ["authenticate", "create_user", "list_user_ids"]
