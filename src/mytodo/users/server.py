from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request

from ..errors import AppError
from ..rpc import RPC_PREFIX, DeleteResult, RpcResponse
from .schemas import (
    AuthenticateUserRequest,
    CreateUserRequest,
    DeleteUserRequest,
    GetUserRequest,
    UpdateUserRequest,
    UserMessage,
)
from .service import UserService

logger = logging.getLogger(__name__)

SERVICE_NAME = "UserService"

router = APIRouter(
    prefix=f"{RPC_PREFIX}/{SERVICE_NAME}",
    tags=["users"],
)

UserResponse = RpcResponse[UserMessage]
DeleteResponse = RpcResponse[DeleteResult]


def get_user_service(request: Request) -> UserService:
    """
    Dependency returning the UserService built at application startup.
    """
    return request.app.state.user_service


def _failed(method: str, exc: AppError) -> None:
    logger.info("%s.%s failed: %s (%s)", SERVICE_NAME, method, exc.kind.value, exc.message)


# PUBLIC_INTERFACE
@router.post("/CreateUser", response_model=UserResponse, summary="Create User")
def create_user(payload: CreateUserRequest, service: UserService = Depends(get_user_service)) -> UserResponse:
    """Register a user; fails with DuplicateEmail when the email is taken."""
    try:
        user = service.create_user(payload.email, payload.password)
    except AppError as exc:
        _failed("CreateUser", exc)
        return UserResponse.failure(exc)
    return UserResponse.success(UserMessage.from_entity(user))


# PUBLIC_INTERFACE
@router.post("/GetUser", response_model=UserResponse, summary="Get User")
def get_user(payload: GetUserRequest, service: UserService = Depends(get_user_service)) -> UserResponse:
    try:
        user = service.get_user(payload.id)
    except AppError as exc:
        _failed("GetUser", exc)
        return UserResponse.failure(exc)
    return UserResponse.success(UserMessage.from_entity(user))


# PUBLIC_INTERFACE
@router.post("/AuthenticateUser", response_model=UserResponse, summary="Authenticate User")
def authenticate_user(
    payload: AuthenticateUserRequest, service: UserService = Depends(get_user_service)
) -> UserResponse:
    """Check credentials; unknown email and wrong password fail identically."""
    try:
        user = service.authenticate_user(payload.email, payload.password)
    except AppError as exc:
        _failed("AuthenticateUser", exc)
        return UserResponse.failure(exc)
    return UserResponse.success(UserMessage.from_entity(user))


# PUBLIC_INTERFACE
@router.post("/UpdateUser", response_model=UserResponse, summary="Update User")
def update_user(payload: UpdateUserRequest, service: UserService = Depends(get_user_service)) -> UserResponse:
    try:
        user = service.update_user(payload.id, payload.email, payload.password)
    except AppError as exc:
        _failed("UpdateUser", exc)
        return UserResponse.failure(exc)
    return UserResponse.success(UserMessage.from_entity(user))


# PUBLIC_INTERFACE
@router.post("/DeleteUser", response_model=DeleteResponse, summary="Delete User")
def delete_user(payload: DeleteUserRequest, service: UserService = Depends(get_user_service)) -> DeleteResponse:
    try:
        service.delete_user(payload.id)
    except AppError as exc:
        _failed("DeleteUser", exc)
        return DeleteResponse.failure(exc)
    return DeleteResponse.success(DeleteResult(success=True))
