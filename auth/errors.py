"""
auth/errors.py -- Exception taxonomy for the authentication core.

Every AuthError subclass carries a user-safe message plus the HTTP status and
machine-readable code the API layer renders into the error envelope. Messages
on these classes are already safe to show to a client: they never include
store details, key material, or whether an account exists.

StoreError is the one class whose message is deliberately generic. The service
logs the underlying exception with full detail and raises StoreError in its
place, so internal faults never cross the boundary verbatim.

DuplicateUserError is NOT an AuthError. It is the store's signal that the
database uniqueness constraint rejected an insert; AuthService turns it into a
ConflictError.

Layer rule: no imports from api/, core/, or todos/.
"""

from __future__ import annotations


class AuthError(Exception):
    """Base class for errors that propagate to the HTTP boundary."""

    status_code: int = 400
    code: str = "auth_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AuthError):
    """Malformed credentials: empty field, bad email shape, length or charset."""

    status_code = 400
    code = "validation_error"


class ConflictError(AuthError):
    """Email or username already registered."""

    status_code = 409
    code = "conflict"


class AuthenticationError(AuthError):
    """Bad login credentials. Always the same generic text."""

    status_code = 401
    code = "bad_credentials"


class TokenError(AuthError):
    status_code = 401
    code = "invalid_token"


class InvalidTokenError(TokenError):
    """Signature mismatch or a string that is not a token at all."""

    code = "invalid_token"


class ExpiredTokenError(TokenError):
    code = "token_expired"


class TokenVerificationError(TokenError):
    """Signature is fine but the claim set is unacceptable (issuer, audience, required claims)."""

    code = "token_verification_failed"


class NotFoundError(AuthError):
    status_code = 404
    code = "not_found"


class StoreError(AuthError):
    """Generic stand-in for an unexpected persistence or runtime fault."""

    status_code = 500
    code = "internal_error"


class DuplicateUserError(Exception):
    """Raised by UserStore.insert() when the UNIQUE constraint rejects a row."""
