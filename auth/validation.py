"""
auth/validation.py -- Credential shape rules for email, username and password.

Pure functions. Each returns a ValidationResult instead of raising, so callers
decide what a failure means (AuthService turns the first failure into a
ValidationError carrying result.error verbatim). Non-string input is reported
as invalid rather than raising TypeError.

Layer rule: no imports from api/, core/, or todos/.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

# No whitespace anywhere, exactly one "@", and at least one "." after it.
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
USERNAME_PATTERN = re.compile(r"[A-Za-z0-9_]+")

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 128

EMAIL_INVALID = "Please provide a valid email address"
USERNAME_TOO_SHORT = f"Username must be at least {USERNAME_MIN_LENGTH} characters long"
USERNAME_TOO_LONG = f"Username cannot exceed {USERNAME_MAX_LENGTH} characters"
USERNAME_INVALID_CHARS = "Username can only contain letters, numbers, and underscores"
PASSWORD_TOO_SHORT = f"Password must be at least {PASSWORD_MIN_LENGTH} characters long"
PASSWORD_TOO_LONG = f"Password cannot exceed {PASSWORD_MAX_LENGTH} characters"


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    error: Optional[str] = None

    def __bool__(self) -> bool:
        return self.is_valid


_OK = ValidationResult(is_valid=True)


def validate_email(email: object) -> ValidationResult:
    if not isinstance(email, str) or EMAIL_PATTERN.fullmatch(email) is None:
        return ValidationResult(is_valid=False, error=EMAIL_INVALID)
    return _OK


def validate_username(username: object) -> ValidationResult:
    """Check length first, then the character set.

    The order matters for the reported message: "ab!" is too short before it
    is anything else.
    """
    if not isinstance(username, str):
        return ValidationResult(is_valid=False, error=USERNAME_INVALID_CHARS)
    if len(username) < USERNAME_MIN_LENGTH:
        return ValidationResult(is_valid=False, error=USERNAME_TOO_SHORT)
    if len(username) > USERNAME_MAX_LENGTH:
        return ValidationResult(is_valid=False, error=USERNAME_TOO_LONG)
    if USERNAME_PATTERN.fullmatch(username) is None:
        return ValidationResult(is_valid=False, error=USERNAME_INVALID_CHARS)
    return _OK


def validate_password(password: object) -> ValidationResult:
    if not isinstance(password, str) or len(password) < PASSWORD_MIN_LENGTH:
        return ValidationResult(is_valid=False, error=PASSWORD_TOO_SHORT)
    if len(password) > PASSWORD_MAX_LENGTH:
        return ValidationResult(is_valid=False, error=PASSWORD_TOO_LONG)
    return _OK
