from __future__ import annotations

from typing import List

from ..rpc import DeleteResult, RpcClient
from ..todos.schemas import TodoListMessage, TodoMessage
from ..users.schemas import UserMessage


# PUBLIC_INTERFACE
class UserServiceClient(RpcClient):
    """RPC client for the user service."""

    service = "UserService"

    def create_user(self, email: str, password: str) -> UserMessage:
        return self._call("CreateUser", {"email": email, "password": password}, UserMessage)

    def get_user(self, user_id: str) -> UserMessage:
        return self._call("GetUser", {"id": user_id}, UserMessage)

    def authenticate_user(self, email: str, password: str) -> UserMessage:
        return self._call("AuthenticateUser", {"email": email, "password": password}, UserMessage)

    def update_user(self, user_id: str, email: str = "", password: str = "") -> UserMessage:
        return self._call("UpdateUser", {"id": user_id, "email": email, "password": password}, UserMessage)

    def delete_user(self, user_id: str) -> None:
        self._call("DeleteUser", {"id": user_id}, DeleteResult)


# PUBLIC_INTERFACE
class TodoServiceClient(RpcClient):
    """RPC client for the todo service. Every call is scoped to `user_id`."""

    service = "TodoService"

    def create_todo(self, user_id: str, title: str, description: str) -> TodoMessage:
        payload = {"user_id": user_id, "title": title, "description": description}
        return self._call("CreateTodo", payload, TodoMessage)

    def get_todo(self, todo_id: str, user_id: str) -> TodoMessage:
        return self._call("GetTodo", {"id": todo_id, "user_id": user_id}, TodoMessage)

    def list_todos(self, user_id: str, completed_only: bool = False) -> List[TodoMessage]:
        result = self._call(
            "ListTodos", {"user_id": user_id, "completed_only": completed_only}, TodoListMessage
        )
        return result.todos

    def update_todo(self, todo_id: str, user_id: str, title: str, description: str) -> TodoMessage:
        payload = {"id": todo_id, "user_id": user_id, "title": title, "description": description}
        return self._call("UpdateTodo", payload, TodoMessage)

    def mark_todo_complete(self, todo_id: str, user_id: str, completed: bool) -> TodoMessage:
        payload = {"id": todo_id, "user_id": user_id, "completed": completed}
        return self._call("MarkTodoComplete", payload, TodoMessage)

    def delete_todo(self, todo_id: str, user_id: str) -> None:
        self._call("DeleteTodo", {"id": todo_id, "user_id": user_id}, DeleteResult)
