from __future__ import annotations

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI

from ..deadline import DeadlineMiddleware
from ..settings import Settings, get_settings
from ..utils import configure_logging
from .repositories import get_user_repository
from .server import SERVICE_NAME
from .server import router as user_rpc_router
from .service import UserService

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "users", "description": "RPC methods for registering and authenticating users."},
]


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the user service application.

    The repository is opened here, so a storage that cannot be reached makes
    startup fail instead of producing a half-working service.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="User Service",
        description="Internal RPC service owning user accounts and password hashes.",
        version="0.1.0",
        openapi_tags=openapi_tags,
    )
    app.state.settings = settings
    app.add_middleware(DeadlineMiddleware)
    app.state.user_service = UserService(get_user_repository(settings))

    # PUBLIC_INTERFACE
    @app.get("/", summary="Health Check", tags=["health"])
    def health_check():
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health.
        """
        return {"message": "Healthy", "service": SERVICE_NAME, "backend": settings.persistence_backend}

    app.include_router(user_rpc_router)
    return app


# PUBLIC_INTERFACE
def run() -> None:
    """Console entry point: serve the user service with uvicorn."""
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("User service starting on port %s", settings.user_service_port)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.user_service_port)


if __name__ == "__main__":
    run()
