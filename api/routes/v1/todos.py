"""
api/routes/v1/todos.py -- Todo CRUD endpoints.

Routes (all require auth):
  GET    /api/v1/todos         -- list the caller's todos, newest first
  GET    /api/v1/todos/{id}    -- one todo
  POST   /api/v1/todos         -- create (201)
  PUT    /api/v1/todos/{id}    -- partial update
  DELETE /api/v1/todos/{id}    -- delete

Ownership: every handler passes identity.user_id to the store, whose WHERE
clause requires it. A todo that exists but belongs to someone else is
indistinguishable from one that does not exist (404 either way).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request

from api.models import MessageResponse, TodoCreate, TodoResponse, TodoUpdate
from auth.dependencies import require_identity
from auth.models import Identity
from todos.models import Todo
from todos.store import TodoStore

router = APIRouter()


def get_todo_store(request: Request) -> TodoStore:
    return request.app.state.todo_store


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=404,
        detail={"code": "not_found", "message": "Todo not found"},
    )


@router.get("/todos", response_model=list[TodoResponse])
def list_todos(
    identity: Identity = Depends(require_identity),
    store: TodoStore = Depends(get_todo_store),
) -> list[TodoResponse]:
    return [TodoResponse.from_domain(t) for t in store.list_for_user(identity.user_id)]


@router.get("/todos/{todo_id}", response_model=TodoResponse)
def get_todo(
    todo_id: str,
    identity: Identity = Depends(require_identity),
    store: TodoStore = Depends(get_todo_store),
) -> TodoResponse:
    todo = store.get(todo_id, identity.user_id)
    if todo is None:
        raise _not_found()
    return TodoResponse.from_domain(todo)


@router.post("/todos", response_model=TodoResponse, status_code=201)
def create_todo(
    body: TodoCreate,
    identity: Identity = Depends(require_identity),
    store: TodoStore = Depends(get_todo_store),
) -> TodoResponse:
    """Create a todo for the caller. Title and description are stored stripped."""
    title = body.title.strip()
    if not title:
        raise HTTPException(
            status_code=400,
            detail={"code": "validation_error", "message": "Title is required"},
        )
    description = body.description.strip() if body.description is not None else None
    todo = store.create(Todo(title=title, description=description, user_id=identity.user_id))
    return TodoResponse.from_domain(todo)


@router.put("/todos/{todo_id}", response_model=TodoResponse)
def update_todo(
    todo_id: str,
    body: TodoUpdate,
    identity: Identity = Depends(require_identity),
    store: TodoStore = Depends(get_todo_store),
) -> TodoResponse:
    updates = body.model_dump(exclude_unset=True)
    if "title" in updates:
        if updates["title"] is None or not updates["title"].strip():
            raise HTTPException(
                status_code=400,
                detail={"code": "validation_error", "message": "Title is required"},
            )
        updates["title"] = updates["title"].strip()
    if updates.get("completed", False) is None:
        del updates["completed"]
    todo = store.update(todo_id, identity.user_id, **updates)
    if todo is None:
        raise _not_found()
    return TodoResponse.from_domain(todo)


@router.delete("/todos/{todo_id}", response_model=MessageResponse)
def delete_todo(
    todo_id: str,
    identity: Identity = Depends(require_identity),
    store: TodoStore = Depends(get_todo_store),
) -> MessageResponse:
    if not store.delete(todo_id, identity.user_id):
        raise _not_found()
    return MessageResponse(message="Todo deleted successfully")
