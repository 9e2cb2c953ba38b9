"""
auth/store.py -- SQLAlchemy Core persistence layer for user records.

Pattern: Repository + Data Mapper. UserStore is the repository; _row_to_user is
the mapper. The service and route code never touch SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.

Uniqueness:
  email and username each carry a UNIQUE constraint. Both are lowercased on
  every insert and every lookup, so the constraint is effectively
  case-insensitive no matter who calls the store. The constraint -- not the
  service's pre-check -- is the authoritative guard against two concurrent
  registrations; insert() reports a violation as DuplicateUserError.

Ids are uuid4 hex strings generated here, not database sequences, so they can
be carried in tokens as opaque strings.

Layer rule: no imports from api/, core/, or todos/.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, MetaData, String, Table, Text, create_engine, event, or_, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from auth.errors import DuplicateUserError
from auth.models import User

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_users = Table(
    "users",
    _metadata,
    Column("id", String(32), primary_key=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("username", String(30), nullable=False, unique=True),
    Column("hashed_password", Text, nullable=False),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)


# ---------------------------------------------------------------------------
# WAL mode
# ---------------------------------------------------------------------------


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _normalize(value: str) -> str:
    return value.lower()


def make_engine(db_url: str) -> Engine:
    """Create an engine with the SQLite tweaks every store in the app relies on.

    Shared with todos/store.py so both tables see the same connection setup.

    check_same_thread=False because FastAPI runs sync handlers in a thread pool
    and connections are pooled across those threads.
    """
    connect_args: dict = {}
    if db_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    engine = create_engine(db_url, connect_args=connect_args)
    if db_url.startswith("sqlite") and ":memory:" not in db_url and "mode=memory" not in db_url:
        event.listen(engine, "connect", _set_wal_mode)
    return engine


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User records.

    Usage:
        store = UserStore("sqlite:///todoapp.db")
        user = store.insert(User(email="a@b.com", username="alice", hashed_password=h))
        store.find_by_email("A@B.com")      # same record
        store.close()
    """

    def __init__(self, db_url: str) -> None:
        self.engine: Engine = make_engine(db_url)
        _metadata.create_all(self.engine)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_by_email_or_username(self, email: str, username: str) -> User | None:
        """Return any record whose email OR username collides with the given pair.

        One round trip for the registration pre-check. When two different
        records match (one by email, one by username) the email match wins so
        the caller reports the email collision.
        """
        email, username = _normalize(email), _normalize(username)
        with self.engine.connect() as conn:
            rows = conn.execute(
                _users.select().where(or_(_users.c.email == email, _users.c.username == username))
            ).fetchall()
        if not rows:
            return None
        for row in rows:
            if row.email == email:
                return _row_to_user(row)
        return _row_to_user(rows[0])

    def find_by_email(self, email: str) -> User | None:
        """Look up a user by email (case-insensitive). Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.email == _normalize(email))).fetchone()
        return _row_to_user(row) if row is not None else None

    def find_by_id(self, user_id: str) -> User | None:
        """Look up a user by primary key. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.id == user_id)).fetchone()
        return _row_to_user(row) if row is not None else None

    def insert(self, user: User) -> User:
        """Persist a new user and return the stored record (id and timestamps filled in).

        Raises DuplicateUserError if the email or username is already taken.
        This is the authoritative uniqueness check: it still fires when a
        concurrent request slipped past the caller's own pre-check.
        """
        now = _now_iso()
        stored = User(
            id=uuid.uuid4().hex,
            email=_normalize(user.email),
            username=_normalize(user.username),
            hashed_password=user.hashed_password,
            created_at=now,
            updated_at=now,
        )
        try:
            with self.engine.connect() as conn:
                conn.execute(
                    _users.insert().values(
                        id=stored.id,
                        email=stored.email,
                        username=stored.username,
                        hashed_password=stored.hashed_password,
                        created_at=stored.created_at,
                        updated_at=stored.updated_at,
                    )
                )
                conn.commit()
        except IntegrityError as exc:
            raise DuplicateUserError(str(exc.orig)) from exc
        return stored

    def ping(self) -> bool:
        """Return True if the database answers a trivial query. Used by /health."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError:
            return False
        return True

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        email=row.email,
        username=row.username,
        hashed_password=row.hashed_password,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
