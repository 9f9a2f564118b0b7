from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .models import Todo


# PUBLIC_INTERFACE
class TodoMessage(BaseModel):
    """
    Todo as carried over RPC.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "b3e0c1f6-33b5-4d54-8f7e-8d1d4f0d9a20",
                "user_id": "3f1c2a8e-8a7b-4c55-9a54-1d8f7f0e6b11",
                "title": "Buy groceries",
                "description": "Milk, eggs, bread",
                "completed": True,
                "created_at": "2025-01-25T10:15:30.123456+00:00",
                "updated_at": "2025-01-26T09:00:00.000001+00:00",
                "completed_at": "2025-01-26T09:00:00.000001+00:00",
            }
        }
    )

    id: str = Field(..., description="Unique identifier of the todo item")
    user_id: str = Field(..., description="Owner of the todo item")
    title: str = Field(..., description="Short title for the todo item")
    description: str = Field(default="", description="Optional detailed description")
    completed: bool = Field(..., description="Completion status flag")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
    completed_at: Optional[datetime] = Field(default=None, description="Completion timestamp, if completed")

    @classmethod
    def from_entity(cls, todo: Todo) -> "TodoMessage":
        return cls(
            id=todo.id,
            user_id=todo.user_id,
            title=todo.title,
            description=todo.description,
            completed=todo.completed,
            created_at=todo.created_at,
            updated_at=todo.updated_at,
            completed_at=todo.completed_at,
        )


class TodoListMessage(BaseModel):
    todos: List[TodoMessage] = Field(default_factory=list, description="Todos of the owner")


class CreateTodoRequest(BaseModel):
    user_id: str
    title: str
    description: str = ""


class GetTodoRequest(BaseModel):
    id: str
    user_id: str


class ListTodosRequest(BaseModel):
    user_id: str
    completed_only: bool = Field(default=False, description="Only completed todos, newest completion first")


class UpdateTodoRequest(BaseModel):
    """Empty title or description keeps the stored value."""

    id: str
    user_id: str
    title: str = ""
    description: str = ""


class MarkTodoCompleteRequest(BaseModel):
    id: str
    user_id: str
    completed: bool


class DeleteTodoRequest(BaseModel):
    id: str
    user_id: str
