"""Unit tests for auth/store.py -- UserStore.

Covers:
- insert() assigns id and timestamps and lowercases email/username
- find_by_email() / find_by_id() hit and miss
- find_by_email_or_username() matches either field; email match wins over username match
- The UNIQUE constraint rejects case-variant duplicates with DuplicateUserError
"""

import pytest

from auth.errors import DuplicateUserError
from auth.models import User
from auth.store import UserStore


def _user(email: str = "Alice@Example.com", username: str = "Alice_1") -> User:
    return User(email=email, username=username, hashed_password="$2b$04$fakehashfakehashfakehash")


def test_insert_normalizes_and_fills_in(user_store: UserStore) -> None:
    stored = user_store.insert(_user())
    assert stored.id
    assert stored.email == "alice@example.com"
    assert stored.username == "alice_1"
    assert stored.created_at
    assert stored.created_at == stored.updated_at


def test_find_by_email_is_case_insensitive(user_store: UserStore) -> None:
    stored = user_store.insert(_user())
    found = user_store.find_by_email("ALICE@example.COM")
    assert found is not None
    assert found.id == stored.id
    assert found.hashed_password == stored.hashed_password


def test_find_by_email_miss(user_store: UserStore) -> None:
    assert user_store.find_by_email("nobody@example.com") is None


def test_find_by_id(user_store: UserStore) -> None:
    stored = user_store.insert(_user())
    assert user_store.find_by_id(stored.id) == stored
    assert user_store.find_by_id("does-not-exist") is None


class TestFindByEmailOrUsername:
    def test_matches_on_username_only(self, user_store: UserStore) -> None:
        stored = user_store.insert(_user())
        found = user_store.find_by_email_or_username("other@example.com", "ALICE_1")
        assert found is not None
        assert found.id == stored.id

    def test_no_match(self, user_store: UserStore) -> None:
        user_store.insert(_user())
        assert user_store.find_by_email_or_username("other@example.com", "other") is None

    def test_email_match_wins(self, user_store: UserStore) -> None:
        """Two different rows collide (one per field); the email row is reported."""
        by_username = user_store.insert(_user(email="first@example.com", username="taken_name"))
        by_email = user_store.insert(_user(email="taken@example.com", username="second"))
        found = user_store.find_by_email_or_username("taken@example.com", "taken_name")
        assert found is not None
        assert found.id == by_email.id
        assert found.id != by_username.id


class TestUniqueness:
    def test_duplicate_email_rejected(self, user_store: UserStore) -> None:
        user_store.insert(_user())
        with pytest.raises(DuplicateUserError):
            user_store.insert(_user(email="ALICE@EXAMPLE.COM", username="someone_else"))

    def test_duplicate_username_rejected(self, user_store: UserStore) -> None:
        user_store.insert(_user())
        with pytest.raises(DuplicateUserError):
            user_store.insert(_user(email="different@example.com", username="alice_1"))


def test_ping(user_store: UserStore) -> None:
    assert user_store.ping() is True
