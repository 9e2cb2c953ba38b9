"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Stores and the service
do the work; these only own the shape.

Layer rule: no imports from api/, core/, or todos/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A persisted user record.

    email and username are stored lowercased and are each unique across the
    table. hashed_password is a self-contained bcrypt artifact (salt and cost
    embedded) and must never leave the auth package -- responses are built
    from PublicUser instead.

    id is None before the record is written to the database.
    """

    email: str
    username: str
    hashed_password: str
    id: str | None = None
    created_at: str = ""  # ISO 8601, set by store on insert
    updated_at: str = ""  # ISO 8601, set by store on insert/update


@dataclass(frozen=True)
class PublicUser:
    """Redacted projection of User -- everything except the password hash."""

    id: str
    email: str
    username: str
    created_at: str
    updated_at: str


@dataclass(frozen=True)
class Identity:
    """Result of a successful token verification.

    Handlers receive this value explicitly from the require_identity
    dependency; it is valid for the current request only.
    """

    user_id: str
    email: str


@dataclass(frozen=True)
class AuthResult:
    """Returned by register() and login()."""

    user: PublicUser
    token: str
