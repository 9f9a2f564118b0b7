import pytest
from fastapi.testclient import TestClient

from mytodo.gateway.clients import TodoServiceClient, UserServiceClient
from mytodo.gateway.main import create_app as create_gateway_app
from mytodo.settings import Settings
from mytodo.todos.main import create_app as create_todo_app
from mytodo.users import models as user_models
from mytodo.users.main import create_app as create_user_app

TEST_SECRET = "test-secret-key"


def make_settings(**overrides) -> Settings:
    values = dict(
        persistence_backend="memory",
        user_db_path="./data/users.db",
        todo_db_path="./data/todos.db",
        sqlite_timeout_seconds=5.0,
        user_service_url="http://users.invalid",
        todo_service_url="http://todos.invalid",
        rpc_timeout_seconds=5.0,
        jwt_secret_key=TEST_SECRET,
        jwt_algorithm="HS256",
        access_token_expire_hours=24,
        cors_allow_origins=["*"],
        log_level="INFO",
        gateway_port=8080,
        user_service_port=50051,
        todo_service_port=50052,
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    # Minimum cost keeps hashing tests quick; salting behaviour is unchanged
    monkeypatch.setattr(user_models, "BCRYPT_ROUNDS", 4)


@pytest.fixture(params=["memory", "sqlite"])
def settings(request, tmp_path):
    return make_settings(
        persistence_backend=request.param,
        user_db_path=str(tmp_path / "users.db"),
        todo_db_path=str(tmp_path / "todos.db"),
    )


@pytest.fixture
def user_service_http(settings):
    return TestClient(create_user_app(settings))


@pytest.fixture
def todo_service_http(settings):
    return TestClient(create_todo_app(settings))


@pytest.fixture
def gateway(settings, user_service_http, todo_service_http):
    """Gateway wired in-process to real user and todo service apps."""
    app = create_gateway_app(
        settings,
        user_client=UserServiceClient(user_service_http),
        todo_client=TodoServiceClient(todo_service_http),
    )
    return TestClient(app)
