"""Tests for account creation and credential checks."""

from __future__ import annotations

import pytest

from habitgarden.errors import AuthError
from habitgarden.services.auth import authenticate, create_user, list_user_ids


def test_create_user_hashes_password(session_factory):
    user = create_user(username="alice", password="long-enough", session_factory=session_factory)
    assert user.id is not None
    assert user.password_hash != "long-enough"
    assert user.password_hash.startswith("$argon2")


def test_authenticate_success_and_failure(session_factory):
    create_user(username="alice", password="long-enough", session_factory=session_factory)

    user = authenticate(username="alice", password="long-enough", session_factory=session_factory)
    assert user is not None
    assert user.last_login is not None

    assert authenticate(username="alice", password="wrong-pass", session_factory=session_factory) is None
    assert authenticate(username="nobody", password="long-enough", session_factory=session_factory) is None
    assert authenticate(username="  ", password="long-enough", session_factory=session_factory) is None


def test_duplicate_username_is_rejected(session_factory):
    create_user(username="alice", password="long-enough", session_factory=session_factory)
    with pytest.raises(AuthError):
        create_user(username="alice", password="another-one", session_factory=session_factory)


@pytest.mark.parametrize("username, password", [("", "long-enough"), ("bob", "short")])
def test_invalid_registration(username, password, session_factory):
    with pytest.raises(AuthError):
        create_user(username=username, password=password, session_factory=session_factory)


def test_list_user_ids(session_factory):
    first = create_user(username="a", password="long-enough", session_factory=session_factory)
    second = create_user(username="b", password="long-enough", session_factory=session_factory)
    assert list_user_ids(session_factory) == [first.id, second.id]
