"""Unit tests for auth/passwords.py -- bcrypt hashing.

Covers:
- verify(p, hash(p)) is True across the allowed length range; wrong passwords fail
- hash() salts freshly: two hashes of one password differ, both verify
- The stored artifact embeds the cost factor
- Passwords longer than bcrypt's 72-byte window hash and verify without raising
- A corrupt stored hash is a mismatch, not an exception
"""

import pytest

from auth.passwords import PasswordHasher


@pytest.mark.parametrize("password", ["secret", "correct horse battery", "p" * 72, "p" * 128, "пароль-123"])
def test_hash_then_verify(hasher: PasswordHasher, password: str) -> None:
    hashed = hasher.hash(password)
    assert hasher.verify(password, hashed)


def test_wrong_password_does_not_verify(hasher: PasswordHasher) -> None:
    hashed = hasher.hash("secret1")
    assert not hasher.verify("secret2", hashed)
    assert not hasher.verify("Secret1", hashed)


def test_hash_is_salted(hasher: PasswordHasher) -> None:
    first = hasher.hash("samepassword")
    second = hasher.hash("samepassword")
    assert first != second
    assert hasher.verify("samepassword", first)
    assert hasher.verify("samepassword", second)


def test_hash_embeds_cost_factor(hasher: PasswordHasher) -> None:
    hashed = hasher.hash("secret1")
    assert hashed.startswith("$2b$04$")
    assert "secret1" not in hashed


def test_long_multibyte_password_does_not_raise(hasher: PasswordHasher) -> None:
    """128 three-byte characters is 384 bytes -- far past bcrypt's 72-byte limit."""
    password = "€" * 128
    hashed = hasher.hash(password)
    assert hasher.verify(password, hashed)


@pytest.mark.parametrize("bad_hash", ["", "not-a-bcrypt-hash", "$2b$04$tooshort"])
def test_corrupt_hash_is_a_mismatch(hasher: PasswordHasher, bad_hash: str) -> None:
    assert hasher.verify("secret1", bad_hash) is False

