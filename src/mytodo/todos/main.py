from __future__ import annotations

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI

from ..deadline import DeadlineMiddleware
from ..settings import Settings, get_settings
from ..utils import configure_logging
from .repositories import get_todo_repository
from .server import SERVICE_NAME
from .server import router as todo_rpc_router
from .service import TodoService

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "todos", "description": "RPC methods for owner-scoped todo management."},
]


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the todo service application. Fails at startup if storage cannot be opened.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Todo Service",
        description="Internal RPC service owning todo items.",
        version="0.1.0",
        openapi_tags=openapi_tags,
    )
    app.state.settings = settings
    app.add_middleware(DeadlineMiddleware)
    app.state.todo_service = TodoService(get_todo_repository(settings))

    # PUBLIC_INTERFACE
    @app.get("/", summary="Health Check", tags=["health"])
    def health_check():
        """Health check endpoint."""
        return {"message": "Healthy", "service": SERVICE_NAME, "backend": settings.persistence_backend}

    app.include_router(todo_rpc_router)
    return app


# PUBLIC_INTERFACE
def run() -> None:
    """Console entry point: serve the todo service with uvicorn."""
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Todo service starting on port %s", settings.todo_service_port)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.todo_service_port)


if __name__ == "__main__":
    run()
