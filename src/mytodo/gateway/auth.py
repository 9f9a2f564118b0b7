from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..errors import InvalidCredentialsError
from .clients import TodoServiceClient, UserServiceClient
from .tokens import TokenClaims, TokenManager

_security = HTTPBearer(auto_error=False)


def get_token_manager(request: Request) -> TokenManager:
    return request.app.state.token_manager


def get_user_client(request: Request) -> UserServiceClient:
    return request.app.state.user_client


def get_todo_client(request: Request) -> TodoServiceClient:
    return request.app.state.todo_client


# PUBLIC_INTERFACE
def get_current_user(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(_security),
    tokens: TokenManager = Depends(get_token_manager),
) -> TokenClaims:
    """
    FastAPI dependency resolving the caller from the `Authorization: Bearer` header.

    Raises:
        InvalidCredentialsError: if the header is missing or not a bearer
            credential, or if the token fails verification. The gateway turns
            this into a 401 with `WWW-Authenticate: Bearer`.
    """
    # HTTPBearer yields None for a missing header or a non-Bearer scheme
    if creds is None or not creds.credentials:
        raise InvalidCredentialsError("missing or malformed authorization header")
    return tokens.verify_token(creds.credentials)
