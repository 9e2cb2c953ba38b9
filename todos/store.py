"""
todos/store.py -- SQLAlchemy-backed persistence for per-user todo items.

Uses SQLAlchemy Core (not ORM) so the dataclass in todos/models.py remains the
authoritative domain representation.

Pattern: Repository + Data Mapper. TodoStore is the repository; _row_to_todo
is the mapper. Every method takes the owning user_id and puts it in the WHERE
clause -- a todo id alone never identifies a row. Route handlers get user_id
from the verified token, never from the request body.

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = TodoStore("sqlite:///todoapp.db")
    todo = store.create(Todo(title="Buy milk", user_id=uid))
    store.list_for_user(uid)
    store.update(todo.id, uid, completed=True)
    store.delete(todo.id, uid)
    store.close()
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, Index, Integer, MetaData, String, Table, Text
from sqlalchemy.engine import Engine

from auth.store import make_engine
from todos.models import Todo

logger = logging.getLogger("todoapp.todos")

# Fields a caller may change through update(). Anything else is rejected.
_UPDATABLE_FIELDS = {"title", "description", "completed"}

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_todos = Table(
    "todos",
    metadata,
    Column("id", String(32), primary_key=True),
    Column("user_id", String(32), nullable=False),
    Column("title", String(200), nullable=False),
    Column("description", Text),
    Column("completed", Integer, nullable=False, server_default="0"),  # boolean stored as 0/1
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
    Index("ix_todos_user_created", "user_id", "created_at"),
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class TodoStore:
    def __init__(self, db_url: str) -> None:
        self.engine: Engine = make_engine(db_url)
        metadata.create_all(self.engine)

    def list_for_user(self, user_id: str) -> list[Todo]:
        """Return all of the user's todos, newest first."""
        with self.engine.connect() as conn:
            rows = conn.execute(
                _todos.select().where(_todos.c.user_id == user_id).order_by(_todos.c.created_at.desc())
            ).fetchall()
        return [_row_to_todo(r) for r in rows]

    def get(self, todo_id: str, user_id: str) -> Optional[Todo]:
        """Return the todo if it exists and belongs to user_id, else None."""
        with self.engine.connect() as conn:
            row = conn.execute(
                _todos.select().where((_todos.c.id == todo_id) & (_todos.c.user_id == user_id))
            ).fetchone()
        return _row_to_todo(row) if row is not None else None

    def create(self, todo: Todo) -> Todo:
        """Insert a new todo and return it with id and timestamps filled in."""
        now = _now_iso()
        stored = Todo(
            id=uuid.uuid4().hex,
            user_id=todo.user_id,
            title=todo.title,
            description=todo.description,
            completed=todo.completed,
            created_at=now,
            updated_at=now,
        )
        with self.engine.connect() as conn:
            conn.execute(
                _todos.insert().values(
                    id=stored.id,
                    user_id=stored.user_id,
                    title=stored.title,
                    description=stored.description,
                    completed=1 if stored.completed else 0,
                    created_at=stored.created_at,
                    updated_at=stored.updated_at,
                )
            )
            conn.commit()
        logger.info("Created todo %s for user %s", stored.id, stored.user_id)
        return stored

    def update(self, todo_id: str, user_id: str, **fields) -> Optional[Todo]:
        """Apply a partial update and return the fresh record.

        Accepted fields: title, description, completed. Unknown keys raise
        ValueError rather than being silently ignored. updated_at is always
        bumped, even for an empty update.

        Returns None if the todo does not exist or belongs to someone else.
        """
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            logger.warning("Rejected update of todo %s with unknown fields %s", todo_id, sorted(unknown))
            raise ValueError(f"Unknown todo fields: {unknown!r}")
        if "completed" in fields:
            fields["completed"] = 1 if fields["completed"] else 0
        fields["updated_at"] = _now_iso()
        with self.engine.connect() as conn:
            result = conn.execute(
                _todos.update().where((_todos.c.id == todo_id) & (_todos.c.user_id == user_id)).values(**fields)
            )
            conn.commit()
        if result.rowcount == 0:
            return None
        return self.get(todo_id, user_id)

    def delete(self, todo_id: str, user_id: str) -> bool:
        """Delete a todo. Returns True if deleted, False if not found or wrong owner."""
        with self.engine.connect() as conn:
            result = conn.execute(
                _todos.delete().where((_todos.c.id == todo_id) & (_todos.c.user_id == user_id))
            )
            conn.commit()
        deleted = result.rowcount > 0
        if deleted:
            logger.info("Deleted todo %s for user %s", todo_id, user_id)
        return deleted

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_todo(row) -> Todo:
    return Todo(
        id=row.id,
        user_id=row.user_id,
        title=row.title,
        description=row.description,
        completed=bool(row.completed),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
