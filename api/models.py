"""
API request and response models for the todo app REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
todos/models.py, which own the internal domain representation. Route handlers
map between the two.

Credential fields on RegisterRequest/LoginRequest default to "" rather than
being required: the empty-field check and its message belong to AuthService,
so a missing field must reach it instead of failing Pydantic validation.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from auth.models import PublicUser
from todos.models import Todo

# ---------------------------------------------------------------------------
# Auth -- requests
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /api/v1/auth/register."""

    email: str = ""
    username: str = ""
    password: str = ""


class LoginRequest(BaseModel):
    """Request body for POST /api/v1/auth/login."""

    email: str = ""
    password: str = ""


# ---------------------------------------------------------------------------
# Auth -- responses
# ---------------------------------------------------------------------------


class UserResponse(BaseModel):
    """Public user profile. There is no password field to leak."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: str
    username: str
    created_at: str
    updated_at: str

    @classmethod
    def from_domain(cls, user: PublicUser) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            username=user.username,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class AuthResponse(BaseModel):
    """Response for register and login: the profile plus a bearer token."""

    user: UserResponse
    token: str
    token_type: str = "bearer"
    expires_in: int


class TokenResponse(BaseModel):
    """Response for POST /api/v1/auth/refresh."""

    token: str
    token_type: str = "bearer"
    expires_in: int


# ---------------------------------------------------------------------------
# Todos
# ---------------------------------------------------------------------------


class TodoCreate(BaseModel):
    """Request body for POST /api/v1/todos.

    title is checked for blankness in the route (after strip) so the client
    gets "Title is required" rather than a generic validation error.
    """

    title: str = Field(default="", max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)


class TodoUpdate(BaseModel):
    """Request body for PUT /api/v1/todos/{id}. Omitted fields are left unchanged."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    completed: Optional[bool] = None


class TodoResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: Optional[str]
    completed: bool
    created_at: str
    updated_at: str

    @classmethod
    def from_domain(cls, todo: Todo) -> "TodoResponse":
        return cls(
            id=todo.id or "",
            title=todo.title,
            description=todo.description,
            completed=todo.completed,
            created_at=todo.created_at,
            updated_at=todo.updated_at,
        )


class MessageResponse(BaseModel):
    message: str


# ---------------------------------------------------------------------------
# Errors / health
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Structured error body. Every non-2xx response uses this shape."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope: {"error": {...}}."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /api/v1/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]
