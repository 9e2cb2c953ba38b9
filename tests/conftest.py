"""
tests/conftest.py -- Shared test fixtures for the todo app.

This module provides:
  - hasher / codec / user_store / service: unit-level building blocks
  - _make_test_stores(): isolated in-memory DBs for API integration tests
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - api_client: TestClient plus a registered user's token and id

Design: Named shared-memory SQLite URIs (not plain :memory:) are used for the
API fixtures because TestClient runs sync route handlers in a thread pool.
Plain :memory: DBs are per-connection and would present a blank schema to each
worker thread. The named URI format (file:name?mode=memory&cache=shared&uri=true)
shares one in-memory instance across all connections in the same process.

bcrypt runs at cost 4 everywhere in the suite; the production default of 12
would make every register/login test take a noticeable fraction of a second.

SECRET_KEY must be set before api.main is imported: the module reads
Settings for its CORS configuration at import time.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager

TEST_SECRET = "test-secret-key-that-is-long-enough-0123456789"

# CRITICAL: Set SECRET_KEY before any api/core import so get_settings() does
# not raise ValueError during collection.
os.environ.setdefault("SECRET_KEY", TEST_SECRET)

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.passwords import PasswordHasher
from auth.service import AuthService
from auth.store import UserStore
from auth.tokens import TokenCodec
from todos.store import TodoStore

TEST_PASSWORD = "testpass123"

# ---------------------------------------------------------------------------
# Unit fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def codec() -> TokenCodec:
    return TokenCodec(TEST_SECRET)


@pytest.fixture
def user_store() -> Generator[UserStore, None, None]:
    store = UserStore("sqlite:///:memory:")
    yield store
    store.close()


@pytest.fixture
def service(user_store: UserStore, hasher: PasswordHasher, codec: TokenCodec) -> AuthService:
    return AuthService(user_store, hasher, codec)


# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _make_test_stores(db_suffix: str) -> tuple[UserStore, TodoStore]:
    """Create isolated named shared-memory SQLite stores for one test module.

    Args:
        db_suffix: Unique string appended to the DB name so test modules
                   don't share state.
    """
    db_url = f"sqlite:///file:test_todoapp_{db_suffix}?mode=memory&cache=shared&uri=true"
    return UserStore(db_url), TodoStore(db_url)


def _patch_lifespan(user_store: UserStore, todo_store: TodoStore, service: AuthService):
    """Return an async context manager that replaces the real lifespan.

    Wires pre-created test objects into app.state so TestClient routes see
    isolated test DBs rather than the configured database.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        app.state.todo_store = todo_store
        app.state.auth_service = service
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# Module-scoped fixture -- one TestClient per test module for speed
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def api_client(request) -> Generator[tuple[TestClient, str, str], None, None]:
    """Yield (client, token, user_id) for API integration tests.

    The TestClient uses the real FastAPI app with a patched lifespan so tests
    hit real route handlers but use isolated in-memory stores. A user
    (tester@example.com / tester / testpass123) is registered before the
    client starts; its token goes in Authorization headers.
    """
    suffix = request.module.__name__.rsplit(".", 1)[-1]
    user_store, todo_store = _make_test_stores(suffix)
    service = AuthService(user_store, PasswordHasher(rounds=4), TokenCodec(TEST_SECRET))

    result = service.register("tester@example.com", "tester", TEST_PASSWORD)

    app.router.lifespan_context = _patch_lifespan(user_store, todo_store, service)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, result.token, result.user.id

    todo_store.close()
    user_store.close()
