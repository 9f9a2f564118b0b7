from __future__ import annotations

import logging
import uuid
from typing import List

from ..errors import NotFoundError
from .models import Todo
from .repositories import TodoRepository

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class TodoService:
    """Owner-scoped use cases over a TodoRepository."""

    def __init__(self, todo_repository: TodoRepository) -> None:
        self.todo_repository = todo_repository

    def create_todo(self, user_id: str, title: str, description: str) -> Todo:
        todo = Todo.new(str(uuid.uuid4()), user_id, title, description)
        self.todo_repository.create(todo)
        logger.info("Created todo %s for user %s", todo.id, user_id)
        return todo

    def get_todo(self, todo_id: str, user_id: str) -> Todo:
        """
        Return the owner's todo.

        Raises:
            NotFoundError: if the todo does not exist or belongs to another user.
        """
        todo = self.todo_repository.get_by_id(todo_id, user_id)
        if todo is None:
            raise NotFoundError("todo not found")
        return todo

    def list_todos(self, user_id: str) -> List[Todo]:
        return self.todo_repository.list_by_user_id(user_id)

    def list_completed_todos(self, user_id: str) -> List[Todo]:
        return self.todo_repository.list_completed_by_user_id(user_id)

    def update_todo(self, todo_id: str, user_id: str, title: str, description: str) -> Todo:
        todo = self.get_todo(todo_id, user_id)
        todo.update(title, description)
        self.todo_repository.update(todo)
        return todo

    def mark_todo_complete(self, todo_id: str, user_id: str, completed: bool) -> Todo:
        todo = self.get_todo(todo_id, user_id)
        todo.mark_complete(completed)
        self.todo_repository.update(todo)
        return todo

    def delete_todo(self, todo_id: str, user_id: str) -> None:
        self.todo_repository.delete(todo_id, user_id)
        logger.info("Deleted todo %s for user %s", todo_id, user_id)
