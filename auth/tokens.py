"""
auth/tokens.py -- Session token codec (signed JWT, HS256).

Security design decisions:
  JWT: python-jose with HS256. A token carries userId, email, iat, exp, iss and
       aud. The signing secret is injected into TokenCodec at construction --
       there is no module-level key, so tests and the app can run codecs with
       different secrets side by side.

  Lifetime: fixed at mint time to iat + 7 days. There is no server-side
       session table and no revocation list; a token is good until exp.

  Failure classes: decode() raises one of three TokenError subclasses so the
       service can map them to distinct messages:
         InvalidTokenError       -- bad signature, or not a JWT at all
         ExpiredTokenError       -- signature fine, exp has passed
         TokenVerificationError  -- signature fine, claims unacceptable
                                    (issuer/audience mismatch or missing,
                                    userId/email missing)
       None of them carry jose's own error text, which can describe the key
       or algorithm.

  Expiry is checked here rather than by jose so the current time can be
       supplied by the caller (tests pin it); jose still verifies the
       signature, issuer and audience.

Layer rule: no imports from api/, core/, or todos/.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from jose.exceptions import JWTClaimsError

from auth.errors import ExpiredTokenError, InvalidTokenError, TokenVerificationError
from auth.models import Identity

TOKEN_ISSUER = "todo-app"
TOKEN_AUDIENCE = "todo-app-users"
TOKEN_LIFETIME = timedelta(days=7)

_ALGORITHM = "HS256"
_REQUIRED_CLAIMS = ("userId", "email")
# jose only checks iss/aud when the token carries them; absence must fail too.
_BINDING_CLAIMS = ("iss", "aud")


class TokenCodec:
    """Mint and decode signed session tokens.

    Usage:
        codec = TokenCodec(secret_key)
        token = codec.mint(user_id, email)
        identity = codec.decode(token)      # Identity(user_id=..., email=...)
    """

    def __init__(
        self,
        secret_key: str,
        lifetime: timedelta = TOKEN_LIFETIME,
        issuer: str = TOKEN_ISSUER,
        audience: str = TOKEN_AUDIENCE,
    ) -> None:
        if not secret_key:
            raise ValueError("TokenCodec requires a non-empty secret key.")
        self._secret_key = secret_key
        self.lifetime = lifetime
        self.issuer = issuer
        self.audience = audience

    def mint(self, user_id: str, email: str, now: datetime | None = None) -> str:
        """Encode a signed token for user_id/email, valid for self.lifetime from now."""
        issued_at = now or datetime.now(timezone.utc)
        iat = int(issued_at.timestamp())
        payload = {
            "userId": user_id,
            "email": email,
            "iat": iat,
            "exp": iat + int(self.lifetime.total_seconds()),
            "iss": self.issuer,
            "aud": self.audience,
        }
        return jwt.encode(payload, self._secret_key, algorithm=_ALGORITHM)

    def decode(self, token: str, now: datetime | None = None) -> Identity:
        """Verify token and return the identity it carries.

        Raises InvalidTokenError, ExpiredTokenError or TokenVerificationError.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[_ALGORITHM],
                audience=self.audience,
                issuer=self.issuer,
                options={"verify_exp": False},
            )
        except JWTClaimsError as exc:
            raise TokenVerificationError("Token verification failed") from exc
        except JWTError as exc:
            raise InvalidTokenError("Invalid token") from exc

        if any(payload.get(claim) is None for claim in _BINDING_CLAIMS):
            raise TokenVerificationError("Token verification failed")

        exp = payload.get("exp")
        if not isinstance(exp, int):
            raise TokenVerificationError("Token verification failed")
        current = int((now or datetime.now(timezone.utc)).timestamp())
        if current >= exp:
            raise ExpiredTokenError("Token has expired")

        if not all(isinstance(payload.get(claim), str) and payload.get(claim) for claim in _REQUIRED_CLAIMS):
            raise TokenVerificationError("Token verification failed")
        return Identity(user_id=payload["userId"], email=payload["email"])
