"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

get_auth_service() hands route handlers the single AuthService built in the
lifespan (app.state.auth_service). No handler constructs its own.

require_identity() authorizes a request from its Authorization: Bearer header
and returns the decoded Identity. Handlers take the Identity as a parameter
and pass it on explicitly; nothing is attached to the request object. A
missing header is a 401 here; a bad token raises the service's TokenError,
which the AuthError handler in api/main.py renders as 401 with its message.

Layer rule: no imports from api/, core/, or todos/.
  auth/dependencies.py may import from fastapi (for Depends/HTTPException/Request)
  because this module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request

from auth.models import Identity
from auth.service import AuthService


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def bearer_token(request: Request) -> str | None:
    """Return the token from 'Authorization: Bearer <token>', or None."""
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def require_identity(
    request: Request,
    service: AuthService = Depends(get_auth_service),
) -> Identity:
    """Require a valid bearer token. Raises HTTP 401 if the request carries none.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(identity: Identity = Depends(require_identity)): ...
    """
    token = bearer_token(request)
    if token is None:
        raise HTTPException(
            status_code=401,
            detail={"code": "unauthorized", "message": "Access token required"},
            headers={"WWW-Authenticate": "Bearer"},
        )
    return service.verify_identity(token)
