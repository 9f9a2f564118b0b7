from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..errors import AppError, ErrorKind
from ..rpc import RpcClient
from ..settings import Settings, get_settings
from ..utils import configure_logging
from .clients import TodoServiceClient, UserServiceClient
from .routers import auth as auth_router
from .routers import todos as todos_router
from .tokens import TokenManager

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "auth", "description": "Registration, login and the current user."},
    {"name": "todos", "description": "CRUD operations for the caller's Todo items."},
]


# PUBLIC_INTERFACE
def create_app(
    settings: Optional[Settings] = None,
    user_client: Optional[UserServiceClient] = None,
    todo_client: Optional[TodoServiceClient] = None,
) -> FastAPI:
    """
    Build the gateway application.

    Args:
        settings: configuration; loaded from the environment when omitted.
        user_client / todo_client: RPC clients to use. When omitted, clients
            are created from USER_SERVICE_URL / TODO_SERVICE_URL and closed
            on shutdown.
    """
    settings = settings or get_settings()
    owned: List[RpcClient] = []

    if user_client is None:
        user_client = UserServiceClient.connect(settings.user_service_url, settings.rpc_timeout_seconds)
        owned.append(user_client)
    if todo_client is None:
        todo_client = TodoServiceClient.connect(settings.todo_service_url, settings.rpc_timeout_seconds)
        owned.append(todo_client)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Gateway using user service at %s and todo service at %s",
            settings.user_service_url,
            settings.todo_service_url,
        )
        yield
        for client in owned:
            client.close()

    app = FastAPI(
        title="Todo Gateway",
        description="HTTP API for the todo application; fronts the user and todo services.",
        version="0.1.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.token_manager = TokenManager.from_settings(settings)
    app.state.user_client = user_client
    app.state.todo_client = todo_client

    # Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Return a consistent JSON structure for request validation errors.

        Response format:
            {
                "error": "ValidationError",
                "message": "Request validation failed",
                "detail": [... pydantic/fastapi error details ...]
            }
        """
        return JSONResponse(
            status_code=400,
            content={
                "error": ErrorKind.VALIDATION.value,
                "message": "Request validation failed",
                "detail": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        """
        Map application errors to their HTTP status with a `{error, message}` body.
        """
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.kind.value, "message": exc.message},
            headers=headers,
        )

    # PUBLIC_INTERFACE
    @app.get("/", summary="Health Check", tags=["health"])
    def health_check():
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health.
        """
        return {"message": "Healthy"}

    app.include_router(auth_router.router)
    app.include_router(todos_router.router)
    return app


# PUBLIC_INTERFACE
def run() -> None:
    """Console entry point: serve the gateway with uvicorn."""
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Gateway starting on port %s", settings.gateway_port)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.gateway_port)


if __name__ == "__main__":
    run()
