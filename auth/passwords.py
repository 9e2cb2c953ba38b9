"""
auth/passwords.py -- bcrypt password hashing and verification.

Using bcrypt directly rather than passlib[bcrypt]: passlib's wrap-bug detection
builds a password longer than 72 bytes, which bcrypt 4.x rejects outright.

bcrypt only looks at the first 72 bytes of its input and current releases
raise ValueError for anything longer. Passwords may be up to 128 characters
(more bytes once encoded), so _to_bytes() truncates to 72 bytes on both the
hash and the verify path. The two paths stay consistent and no input raises.

The hash artifact is the standard "$2b$<cost>$<salt><digest>" string: salt and
cost are embedded, so verify() needs nothing but the stored value.

Layer rule: no imports from api/, core/, or todos/.
"""

from __future__ import annotations

import bcrypt

_BCRYPT_MAX_BYTES = 72


def _to_bytes(plain: str) -> bytes:
    return plain.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class PasswordHasher:
    """Salted, adaptive one-way hashing with a fixed work factor.

    Usage:
        hasher = PasswordHasher(rounds=12)
        stored = hasher.hash("secret1")
        hasher.verify("secret1", stored)   # True
    """

    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds
        # Timing equalization hash. Computed once at construction so the first
        # login for an unknown email is not measurably slower than later ones.
        self._dummy_hash = self.hash("todoapp_timing_dummy")

    def hash(self, plain: str) -> str:
        """Return a bcrypt hash of plain with a fresh salt."""
        return bcrypt.hashpw(_to_bytes(plain), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, plain: str, hashed: str) -> bool:
        """Return True if plain matches hashed. A corrupt hash counts as a mismatch."""
        try:
            return bcrypt.checkpw(_to_bytes(plain), hashed.encode("utf-8"))
        except (ValueError, TypeError):
            return False

    def burn(self, plain: str) -> None:
        """Spend one verification's worth of CPU without a real hash to compare.

        Login calls this when the email is unknown so the unknown-account path
        costs the same as the wrong-password path.
        """
        self.verify(plain, self._dummy_hash)
