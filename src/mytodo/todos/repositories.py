from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import replace
from threading import RLock
from typing import Dict, List, Optional

from ..errors import NotFoundError
from ..settings import Settings
from .models import Todo


# PUBLIC_INTERFACE
class TodoRepository(ABC):
    """
    Abstract repository contract for todo storage backends.

    Every lookup, update and delete is scoped by owner: a todo id that belongs
    to someone else behaves exactly like an id that does not exist.
    """

    @abstractmethod
    def create(self, todo: Todo) -> None:
        """Persist a new todo."""

    @abstractmethod
    def get_by_id(self, todo_id: str, user_id: str) -> Optional[Todo]:
        """Return the owner's todo by id, or None if not found."""

    @abstractmethod
    def list_by_user_id(self, user_id: str) -> List[Todo]:
        """Return all todos of the owner, newest first."""

    @abstractmethod
    def list_completed_by_user_id(self, user_id: str) -> List[Todo]:
        """Return the owner's completed todos, most recently completed first."""

    @abstractmethod
    def update(self, todo: Todo) -> None:
        """Overwrite a stored todo. Raise NotFoundError if no row was affected."""

    @abstractmethod
    def delete(self, todo_id: str, user_id: str) -> None:
        """Delete the owner's todo. Raise NotFoundError if no row was affected."""


class InMemoryTodoRepository(TodoRepository):
    """
    Thread-safe in-memory repository suitable for testing and default runtime.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: Dict[str, Todo] = {}

    def _owned(self, todo_id: str, user_id: str) -> Optional[Todo]:
        item = self._items.get(todo_id)
        if item is None or item.user_id != user_id:
            return None
        return item

    def create(self, todo: Todo) -> None:
        with self._lock:
            self._items[todo.id] = replace(todo)

    def get_by_id(self, todo_id: str, user_id: str) -> Optional[Todo]:
        with self._lock:
            item = self._owned(todo_id, user_id)
            return None if item is None else replace(item)

    def list_by_user_id(self, user_id: str) -> List[Todo]:
        with self._lock:
            items = [t for t in self._items.values() if t.user_id == user_id]
            items.sort(key=lambda t: t.created_at, reverse=True)
            # Return copies to avoid external mutation
            return [replace(t) for t in items]

    def list_completed_by_user_id(self, user_id: str) -> List[Todo]:
        with self._lock:
            items = [
                t for t in self._items.values() if t.user_id == user_id and t.completed and t.completed_at
            ]
            items.sort(key=lambda t: t.completed_at, reverse=True)  # type: ignore[arg-type, return-value]
            return [replace(t) for t in items]

    def update(self, todo: Todo) -> None:
        with self._lock:
            existing = self._owned(todo.id, todo.user_id)
            if existing is None:
                raise NotFoundError("todo not found")
            self._items[todo.id] = replace(todo, created_at=existing.created_at)

    def delete(self, todo_id: str, user_id: str) -> None:
        with self._lock:
            if self._owned(todo_id, user_id) is None:
                raise NotFoundError("todo not found")
            del self._items[todo_id]


# PUBLIC_INTERFACE
def get_todo_repository(settings: Settings) -> TodoRepository:
    """
    Factory to return the configured todo repository based on settings.
    - memory: InMemoryTodoRepository
    - sqlite: SQLiteTodoRepository at settings.todo_db_path
    """
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteTodoRepository

        return SQLiteTodoRepository(settings.todo_db_path, timeout=settings.sqlite_timeout_seconds)
    return InMemoryTodoRepository()
