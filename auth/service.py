"""
auth/service.py -- Registration, login and token verification.

AuthService wires together the validator, the password hasher, the token codec
and a user store. One instance is built at startup (api/main.py lifespan) and
handed to route handlers through Depends(); it holds no per-request state, so
concurrent requests share it freely.

Error contract:
  ValidationError, ConflictError, AuthenticationError and TokenError carry
  client-safe text and propagate unchanged. Anything else raised while talking
  to the store is logged here with its traceback and replaced by a StoreError
  with a generic message.

  Expected absence is a return value, not an exception: get_profile_by_id()
  returns None for an unknown id.

Enumeration resistance [C1]:
  login() gives the same AuthenticationError text for "no such email" and
  "wrong password", and runs a bcrypt verification on both paths so response
  time does not tell them apart either.

Layer rule: no imports from api/, core/, or todos/.
"""

from __future__ import annotations

import logging
from typing import Protocol

from auth.errors import (
    AuthError,
    AuthenticationError,
    ConflictError,
    DuplicateUserError,
    InvalidTokenError,
    NotFoundError,
    StoreError,
    TokenError,
    TokenVerificationError,
    ValidationError,
)
from auth.models import AuthResult, Identity, PublicUser, User
from auth.passwords import PasswordHasher
from auth.tokens import TokenCodec
from auth.validation import validate_email, validate_password, validate_username

logger = logging.getLogger("todoapp.auth")

EMAIL_TAKEN = "User with this email already exists"
USERNAME_TAKEN = "Username is already taken"
BAD_CREDENTIALS = "Invalid email or password"


class UserRepository(Protocol):
    """What AuthService needs from a user store. auth.store.UserStore implements it."""

    def find_by_email_or_username(self, email: str, username: str) -> User | None: ...

    def find_by_email(self, email: str) -> User | None: ...

    def find_by_id(self, user_id: str) -> User | None: ...

    def insert(self, user: User) -> User: ...


def to_public(user: User) -> PublicUser:
    """Project a stored record onto the fields a client may see."""
    return PublicUser(
        id=user.id or "",
        email=user.email,
        username=user.username,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


class AuthService:
    """Stateless authentication operations over an injected store.

    Usage:
        service = AuthService(UserStore(url), PasswordHasher(12), TokenCodec(secret))
        result = service.register("a@b.com", "alice", "secret1")
        identity = service.verify_identity(result.token)
    """

    def __init__(self, store: UserRepository, hasher: PasswordHasher, codec: TokenCodec) -> None:
        self.store = store
        self.hasher = hasher
        self.codec = codec

    # ------------------------------------------------------------------
    # Register / login
    # ------------------------------------------------------------------

    def register(self, email: str, username: str, password: str) -> AuthResult:
        """Create an account and return its public profile plus a fresh token.

        Validation order is email, password, username; the first failure is
        the one reported. The pre-check lookup is advisory -- the store's
        UNIQUE constraint decides when two registrations race.
        """
        if not email or not username or not password:
            raise ValidationError("Email, username, and password are required")
        for result in (validate_email(email), validate_password(password), validate_username(username)):
            if not result.is_valid:
                raise ValidationError(result.error)

        email, username = email.lower(), username.lower()
        try:
            existing = self.store.find_by_email_or_username(email, username)
            if existing is not None:
                raise ConflictError(_conflict_message(existing, email))

            hashed = self.hasher.hash(password)
            try:
                user = self.store.insert(User(email=email, username=username, hashed_password=hashed))
            except DuplicateUserError:
                logger.info("Registration for %s lost a uniqueness race", email)
                raise ConflictError(self._resolve_conflict(email, username)) from None

            token = self.codec.mint(user.id, user.email)
        except AuthError:
            raise
        except Exception as exc:
            logger.exception("Registration failed for %s", email)
            raise StoreError("Registration failed") from exc

        logger.info("Registered user %s (%s)", user.id, user.username)
        return AuthResult(user=to_public(user), token=token)

    def login(self, email: str, password: str) -> AuthResult:
        """Check credentials and return the public profile plus a fresh token."""
        if not email or not password:
            raise ValidationError("Email and password are required")
        result = validate_email(email)
        if not result.is_valid:
            raise ValidationError(result.error)

        try:
            user = self.store.find_by_email(email.lower())
        except Exception as exc:
            logger.exception("Login lookup failed")
            raise StoreError("Login failed") from exc

        if user is None:
            # Equalize timing -- do NOT return before running bcrypt [C1]
            self.hasher.burn(password)
            raise AuthenticationError(BAD_CREDENTIALS)
        if not self.hasher.verify(password, user.hashed_password):
            raise AuthenticationError(BAD_CREDENTIALS)

        token = self.codec.mint(user.id, user.email)
        logger.info("User %s logged in", user.id)
        return AuthResult(user=to_public(user), token=token)

    # ------------------------------------------------------------------
    # Token operations
    # ------------------------------------------------------------------

    def verify_identity(self, token: str) -> Identity:
        """Decode a bearer token into the identity it proves.

        Pure computation; never touches the store. Raises a TokenError subclass
        whose message is one of "Invalid token", "Token has expired" or
        "Token verification failed".
        """
        if not token:
            raise InvalidTokenError("Token is required")
        try:
            return self.codec.decode(token)
        except TokenError:
            raise
        except Exception as exc:
            logger.warning("Unexpected token decode failure: %s", type(exc).__name__)
            raise TokenVerificationError("Token verification failed") from exc

    def refresh(self, user_id: str) -> str:
        """Mint a new token from the user's current record."""
        if not user_id:
            raise ValidationError("User ID is required")
        try:
            user = self.store.find_by_id(user_id)
        except Exception as exc:
            logger.exception("Token refresh lookup failed for %s", user_id)
            raise StoreError("Failed to refresh token") from exc
        if user is None:
            raise NotFoundError("User not found")
        return self.codec.mint(user.id, user.email)

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    def get_profile_by_id(self, user_id: str) -> PublicUser | None:
        """Return the redacted profile for user_id, or None if there is no such user."""
        if not user_id:
            raise ValidationError("User ID is required")
        try:
            user = self.store.find_by_id(user_id)
        except Exception as exc:
            logger.exception("Error fetching user by ID %s", user_id)
            raise StoreError("Failed to fetch user") from exc
        return to_public(user) if user is not None else None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _resolve_conflict(self, email: str, username: str) -> str:
        """Work out which field collided after the store rejected an insert."""
        existing = self.store.find_by_email_or_username(email, username)
        if existing is None:
            # The conflicting row vanished between the insert and this lookup.
            return EMAIL_TAKEN
        return _conflict_message(existing, email)


def _conflict_message(existing: User, email: str) -> str:
    if existing.email == email:
        return EMAIL_TAKEN
    return USERNAME_TAKEN
