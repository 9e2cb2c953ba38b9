"""
todos/models.py -- Domain dataclass for todo items.

Pure data container with zero logic. Ownership scoping and timestamps are
handled by todos/store.py.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Todo:
    """A single todo item owned by exactly one user.

    user_id is the owning user's id (auth.models.User.id). Every store query
    filters on it, so one user can never read or change another user's items.

    id is None before the record is written to the database.
    """

    title: str
    user_id: str
    description: Optional[str] = None
    completed: bool = False
    id: Optional[str] = None
    created_at: str = ""  # ISO 8601, set by store on insert
    updated_at: str = ""  # ISO 8601, bumped by store on every update
