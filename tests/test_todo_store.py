"""Unit tests for todos/store.py -- TodoStore.

Covers:
- File-backed SQLite gets WAL journaling from the shared engine setup
- Every read and write is scoped to the owning user
- update() rejects unknown fields
- create/delete and rejected updates are logged under todoapp.todos
"""

import logging
from collections.abc import Generator

import pytest

from todos.models import Todo
from todos.store import TodoStore


@pytest.fixture
def todo_store() -> Generator[TodoStore, None, None]:
    store = TodoStore("sqlite:///:memory:")
    yield store
    store.close()


def test_file_database_uses_wal(tmp_path) -> None:
    store = TodoStore(f"sqlite:///{tmp_path / 'todos.db'}")
    try:
        with store.engine.connect() as conn:
            assert conn.exec_driver_sql("PRAGMA journal_mode").scalar() == "wal"
    finally:
        store.close()


def test_other_users_todo_is_invisible(todo_store: TodoStore) -> None:
    todo = todo_store.create(Todo(title="Buy milk", user_id="owner"))
    assert todo_store.get(todo.id, "intruder") is None
    assert todo_store.update(todo.id, "intruder", completed=True) is None
    assert todo_store.delete(todo.id, "intruder") is False
    assert todo_store.get(todo.id, "owner").completed is False


def test_update_rejects_unknown_fields(todo_store: TodoStore, caplog: pytest.LogCaptureFixture) -> None:
    todo = todo_store.create(Todo(title="Buy milk", user_id="owner"))
    with caplog.at_level(logging.WARNING, logger="todoapp.todos"):
        with pytest.raises(ValueError, match="Unknown todo fields"):
            todo_store.update(todo.id, "owner", user_id="intruder")
    assert any(r.name == "todoapp.todos" and todo.id in r.getMessage() for r in caplog.records)


def test_create_and_delete_are_logged(todo_store: TodoStore, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="todoapp.todos"):
        todo = todo_store.create(Todo(title="Buy milk", user_id="owner"))
        assert todo_store.delete(todo.id, "owner") is True
    messages = [r.getMessage() for r in caplog.records if r.name == "todoapp.todos"]
    assert f"Created todo {todo.id} for user owner" in messages
    assert f"Deleted todo {todo.id} for user owner" in messages
