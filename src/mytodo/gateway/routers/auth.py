from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status

from ..auth import get_current_user, get_token_manager, get_user_client
from ..clients import UserServiceClient
from ..schemas import AuthResponse, ErrorResponse, LoginRequest, RegisterRequest, UserOut
from ..tokens import TokenClaims, TokenManager

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/auth",
    tags=["auth"],
)


# PUBLIC_INTERFACE
@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Create an account and return it together with a bearer token.",
    responses={
        201: {"description": "User registered"},
        400: {"description": "Validation error"},
        409: {"model": ErrorResponse, "description": "Email already registered"},
    },
)
def register(
    payload: RegisterRequest,
    users: UserServiceClient = Depends(get_user_client),
    tokens: TokenManager = Depends(get_token_manager),
) -> AuthResponse:
    """
    Register a new user.
    """
    user = users.create_user(payload.email, payload.password)
    logger.info("Registered user %s", user.id)
    return AuthResponse(user=UserOut.from_message(user), token=tokens.create_token(user.id, user.email))


# PUBLIC_INTERFACE
@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login",
    description="Exchange email and password for a bearer token.",
    responses={
        200: {"description": "Authenticated"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
def login(
    payload: LoginRequest,
    users: UserServiceClient = Depends(get_user_client),
    tokens: TokenManager = Depends(get_token_manager),
) -> AuthResponse:
    """
    Authenticate a user. Unknown email and wrong password both answer 401.
    """
    user = users.authenticate_user(payload.email, payload.password)
    return AuthResponse(user=UserOut.from_message(user), token=tokens.create_token(user.id, user.email))


# PUBLIC_INTERFACE
@router.get(
    "/me",
    response_model=UserOut,
    summary="Current User",
    description="Return the account the bearer token belongs to.",
    responses={
        200: {"description": "Current user"},
        401: {"model": ErrorResponse, "description": "Missing or invalid token"},
        404: {"model": ErrorResponse, "description": "Account no longer exists"},
    },
)
def me(
    current: TokenClaims = Depends(get_current_user),
    users: UserServiceClient = Depends(get_user_client),
) -> UserOut:
    return UserOut.from_message(users.get_user(current.user_id))
