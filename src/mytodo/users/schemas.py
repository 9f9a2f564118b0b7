from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .models import User


# PUBLIC_INTERFACE
class UserMessage(BaseModel):
    """
    User as carried over RPC. The password hash never leaves the user service.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "3f1c2a8e-8a7b-4c55-9a54-1d8f7f0e6b11",
                "email": "ada@example.com",
                "created_at": "2025-01-25T10:15:30.123456+00:00",
                "updated_at": "2025-01-25T10:15:30.123456+00:00",
            }
        }
    )

    id: str = Field(..., description="Unique identifier of the user")
    email: str = Field(..., description="Login email")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    @classmethod
    def from_entity(cls, user: User) -> "UserMessage":
        return cls(id=user.id, email=user.email, created_at=user.created_at, updated_at=user.updated_at)


class CreateUserRequest(BaseModel):
    email: str = Field(..., description="Login email")
    password: str = Field(..., description="Plain password; hashed by the service")


class GetUserRequest(BaseModel):
    id: str = Field(..., description="User id")


class AuthenticateUserRequest(BaseModel):
    email: str
    password: str


class UpdateUserRequest(BaseModel):
    """Empty email or password leaves that field unchanged."""

    id: str
    email: str = ""
    password: str = ""


class DeleteUserRequest(BaseModel):
    id: str
