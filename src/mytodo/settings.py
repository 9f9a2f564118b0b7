from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    The same settings object is shared by the gateway and both backend
    services; each process only reads the fields it needs.

    Env vars:
    - PERSISTENCE_BACKEND: 'memory' (default) or 'sqlite'
    - USER_DB_PATH / TODO_DB_PATH: sqlite files for the user and todo services
    - SQLITE_TIMEOUT_SECONDS: how long a writer waits on a locked database
    - USER_SERVICE_URL / TODO_SERVICE_URL: base URLs the gateway calls
    - RPC_TIMEOUT_SECONDS: per-call timeout for gateway -> service calls
    - JWT_SECRET_KEY / JWT_ALGORITHM: bearer token signing parameters
    - ACCESS_TOKEN_EXPIRE_HOURS: token lifetime (24 by default)
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - LOG_LEVEL: root log level name
    - GATEWAY_PORT / USER_SERVICE_PORT / TODO_SERVICE_PORT: listen ports
    """

    persistence_backend: str
    user_db_path: str
    todo_db_path: str
    sqlite_timeout_seconds: float
    user_service_url: str
    todo_service_url: str
    rpc_timeout_seconds: float
    jwt_secret_key: str
    jwt_algorithm: str
    access_token_expire_hours: int
    cors_allow_origins: List[str]
    log_level: str
    gateway_port: int
    user_service_port: int
    todo_service_port: int


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_float(value: str, default: float) -> float:
    try:
        return float(value)
    except ValueError:
        return default


def _parse_int(value: str, default: int) -> int:
    try:
        return int(value)
    except ValueError:
        return default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """
    Return application settings loaded from environment variables.

    A `.env` file in the working directory is read first; variables already
    present in the environment win over the file.
    """
    load_dotenv(override=False)

    backend = _get_env("PERSISTENCE_BACKEND", "memory").strip().lower()
    if backend not in {"memory", "sqlite"}:
        raise ValueError(f"Unsupported PERSISTENCE_BACKEND: {backend!r}")

    return Settings(
        persistence_backend=backend,
        user_db_path=_get_env("USER_DB_PATH", "./data/users.db").strip(),
        todo_db_path=_get_env("TODO_DB_PATH", "./data/todos.db").strip(),
        sqlite_timeout_seconds=_parse_float(_get_env("SQLITE_TIMEOUT_SECONDS", "5.0"), 5.0),
        user_service_url=_get_env("USER_SERVICE_URL", "http://localhost:50051").rstrip("/"),
        todo_service_url=_get_env("TODO_SERVICE_URL", "http://localhost:50052").rstrip("/"),
        rpc_timeout_seconds=_parse_float(_get_env("RPC_TIMEOUT_SECONDS", "10.0"), 10.0),
        jwt_secret_key=_get_env("JWT_SECRET_KEY", "change_this_secret_in_production"),
        jwt_algorithm=_get_env("JWT_ALGORITHM", "HS256"),
        access_token_expire_hours=_parse_int(_get_env("ACCESS_TOKEN_EXPIRE_HOURS", "24"), 24),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
        gateway_port=_parse_int(_get_env("GATEWAY_PORT", "8080"), 8080),
        user_service_port=_parse_int(_get_env("USER_SERVICE_PORT", "50051"), 50051),
        todo_service_port=_parse_int(_get_env("TODO_SERVICE_PORT", "50052"), 50052),
    )
