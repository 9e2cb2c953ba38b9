"""
api/routes/v1/auth.py -- Authentication REST endpoints.

Routes:
  POST /api/v1/auth/register   -- create account; returns profile + token (201)
  POST /api/v1/auth/login      -- password login; returns profile + token
  GET  /api/v1/auth/me         -- current user profile (requires auth)
  POST /api/v1/auth/refresh    -- mint a fresh token for the bearer (requires auth)

Errors raised by AuthService (ValidationError, ConflictError,
AuthenticationError, TokenError, ...) are not caught here; the AuthError
handler in api/main.py turns them into the standard error envelope.

Handlers that reach the user store are plain `def` so FastAPI runs them in its
thread pool; a slow query in one request does not stall the event loop.

Security:
  [C1] AuthService.login() equalizes timing and wording between unknown email
       and wrong password. Do NOT add an existence check in front of it.
  [M5] Cache-Control: no-store on every response that carries a token.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response

from api.models import AuthResponse, LoginRequest, RegisterRequest, TokenResponse, UserResponse
from auth.dependencies import get_auth_service, require_identity
from auth.models import AuthResult, Identity
from auth.service import AuthService

# Auth policy:
# - POST /api/v1/auth/register: public
# - POST /api/v1/auth/login:    public
# - GET  /api/v1/auth/me:       requires auth (require_identity)
# - POST /api/v1/auth/refresh:  requires auth (require_identity)
router = APIRouter()


def _expires_in(service: AuthService) -> int:
    return int(service.codec.lifetime.total_seconds())


def _auth_response(result: AuthResult, service: AuthService) -> AuthResponse:
    return AuthResponse(
        user=UserResponse.from_domain(result.user),
        token=result.token,
        expires_in=_expires_in(service),
    )


# ---------------------------------------------------------------------------
# Public endpoints
# ---------------------------------------------------------------------------


@router.post("/auth/register", response_model=AuthResponse, status_code=201)
def register(
    body: RegisterRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Create an account and log it in."""
    result = service.register(body.email, body.username, body.password)
    response.headers["Cache-Control"] = "no-store"  # [M5]
    return _auth_response(result, service)


@router.post("/auth/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Authenticate with email and password.

    Wrong email and wrong password both produce 401 "Invalid email or password".
    """
    result = service.login(body.email, body.password)
    response.headers["Cache-Control"] = "no-store"  # [M5]
    return _auth_response(result, service)


# ---------------------------------------------------------------------------
# Authenticated endpoints
# ---------------------------------------------------------------------------


@router.get("/auth/me", response_model=UserResponse)
def me(
    identity: Identity = Depends(require_identity),
    service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    """Return the profile of the user the bearer token belongs to.

    A valid token for a user that no longer exists is a 404, not a 401: the
    token itself checked out.
    """
    profile = service.get_profile_by_id(identity.user_id)
    if profile is None:
        raise HTTPException(
            status_code=404,
            detail={"code": "not_found", "message": "User not found"},
        )
    return UserResponse.from_domain(profile)


@router.post("/auth/refresh", response_model=TokenResponse)
def refresh(
    response: Response,
    identity: Identity = Depends(require_identity),
    service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """Exchange a still-valid token for one with a new 7-day expiry."""
    token = service.refresh(identity.user_id)
    response.headers["Cache-Control"] = "no-store"  # [M5]
    return TokenResponse(token=token, expires_in=_expires_in(service))
