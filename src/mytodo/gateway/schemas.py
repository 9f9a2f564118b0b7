from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..todos.schemas import TodoMessage
from ..users.models import MAX_PASSWORD_BYTES
from ..users.schemas import UserMessage

MIN_PASSWORD_LENGTH = 6
MAX_TITLE_LENGTH = 200


# PUBLIC_INTERFACE
class RegisterRequest(BaseModel):
    """
    Schema for registering a new account.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"email": "ada@example.com", "password": "s3cret-pass"}}
    )

    email: str = Field(..., description="Login email")
    password: str = Field(..., description="Password", min_length=MIN_PASSWORD_LENGTH)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """
        Strip whitespace and require something that looks like an address.
        """
        s = v.strip()
        if "@" not in s or s.startswith("@") or s.endswith("@"):
            raise ValueError("invalid email format")
        return s

    @field_validator("password")
    @classmethod
    def validate_password_size(cls, v: str) -> str:
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        return v


# PUBLIC_INTERFACE
class LoginRequest(BaseModel):
    email: str = Field(..., description="Login email", min_length=1)
    password: str = Field(..., description="Password", min_length=1)

    @field_validator("email")
    @classmethod
    def strip_email(cls, v: str) -> str:
        return v.strip()


# PUBLIC_INTERFACE
class UserOut(BaseModel):
    """
    Schema returned by the API for a user. Never includes the password hash.
    """

    id: str = Field(..., description="Unique identifier of the user")
    email: str = Field(..., description="Login email")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    @classmethod
    def from_message(cls, msg: UserMessage) -> "UserOut":
        return cls(**msg.model_dump())


# PUBLIC_INTERFACE
class AuthResponse(BaseModel):
    user: UserOut = Field(..., description="The authenticated user")
    token: str = Field(..., description="Bearer token valid for 24 hours")


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Schema for creating a new Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"title": "Buy groceries", "description": "Milk, eggs, bread"}}
    )

    title: str = Field(..., description="Short title for the todo item", min_length=1, max_length=MAX_TITLE_LENGTH)
    description: str = Field(default="", description="Optional detailed description")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """
        Strip whitespace and enforce 1..200 length.
        """
        s = v.strip()
        if not (1 <= len(s) <= MAX_TITLE_LENGTH):
            raise ValueError(f"title length must be between 1 and {MAX_TITLE_LENGTH} characters")
        return s

    @field_validator("description", mode="before")
    @classmethod
    def none_to_empty(cls, v: Optional[str]) -> str:
        return "" if v is None else v


# PUBLIC_INTERFACE
class TodoUpdate(BaseModel):
    """
    Schema for updating title/description. Empty or omitted fields keep their
    current value; completion is changed through the /complete endpoint only.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"title": "Buy groceries and supplies", "description": ""}}
    )

    title: str = Field(default="", description="New title; empty keeps the current one")
    description: str = Field(default="", description="New description; empty keeps the current one")

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> str:
        if v is None:
            return ""
        if not isinstance(v, str):
            raise ValueError("title must be a string")
        s = v.strip()
        if len(s) > MAX_TITLE_LENGTH:
            raise ValueError(f"title length must be at most {MAX_TITLE_LENGTH} characters")
        return s

    @field_validator("description", mode="before")
    @classmethod
    def none_to_empty(cls, v: Optional[str]) -> str:
        return "" if v is None else v


# PUBLIC_INTERFACE
class TodoComplete(BaseModel):
    completed: bool = Field(..., description="New completion state")


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "b3e0c1f6-33b5-4d54-8f7e-8d1d4f0d9a20",
                "user_id": "3f1c2a8e-8a7b-4c55-9a54-1d8f7f0e6b11",
                "title": "Buy groceries",
                "description": "Milk, eggs, bread",
                "completed": False,
                "created_at": "2025-01-25T10:15:30.123456+00:00",
                "updated_at": "2025-01-26T09:00:00.000001+00:00",
                "completed_at": None,
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
    def from_message(cls, msg: TodoMessage) -> "TodoOut":
        return cls(**msg.model_dump())


class MessageResponse(BaseModel):
    message: str = Field(..., description="Human readable outcome")


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Error category, e.g. NotFound")
    message: str = Field(..., description="Human readable error message")
