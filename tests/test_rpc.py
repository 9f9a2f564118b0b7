import sqlite3

import httpx
import pytest
from fastapi.testclient import TestClient

from mytodo.deadline import DEADLINE_HEADER, call_deadline, parse_budget, storage_timeout
from mytodo.errors import (
    AppError,
    ConnectivityError,
    DuplicateEmailError,
    InvalidCredentialsError,
    NotFoundError,
    error_from_kind,
)
from mytodo.gateway.clients import TodoServiceClient, UserServiceClient
from mytodo.todos.main import create_app as create_todo_app

from conftest import make_settings


def _client_with(handler, cls=UserServiceClient, timeout=5.0):
    return cls(httpx.Client(transport=httpx.MockTransport(handler), base_url="http://service", timeout=timeout))


class TestUserServiceEndpoint:
    def test_health(self, user_service_http):
        res = user_service_http.get("/")
        assert res.status_code == 200
        assert res.json()["service"] == "UserService"

    def test_create_user_envelope(self, user_service_http):
        res = user_service_http.post(
            "/rpc/UserService/CreateUser", json={"email": "ada@example.com", "password": "pw-123456"}
        )
        assert res.status_code == 200
        body = res.json()
        assert body["ok"] is True
        assert body["error"] is None
        assert body["result"]["email"] == "ada@example.com"
        assert "password_hash" not in body["result"]

    def test_application_errors_are_data(self, user_service_http):
        payload = {"email": "ada@example.com", "password": "pw-123456"}
        user_service_http.post("/rpc/UserService/CreateUser", json=payload)

        res = user_service_http.post("/rpc/UserService/CreateUser", json=payload)

        assert res.status_code == 200
        body = res.json()
        assert body["ok"] is False
        assert body["result"] is None
        assert body["error"]["kind"] == "DuplicateEmail"

    def test_get_missing_user(self, user_service_http):
        res = user_service_http.post("/rpc/UserService/GetUser", json={"id": "missing"})
        assert res.json()["error"]["kind"] == "NotFound"


class TestTodoServiceEndpoint:
    def test_list_completed_only(self, todo_service_http):
        created = todo_service_http.post(
            "/rpc/TodoService/CreateTodo", json={"user_id": "u1", "title": "A", "description": "d"}
        ).json()["result"]
        todo_service_http.post(
            "/rpc/TodoService/CreateTodo", json={"user_id": "u1", "title": "B", "description": ""}
        )
        todo_service_http.post(
            "/rpc/TodoService/MarkTodoComplete", json={"id": created["id"], "user_id": "u1", "completed": True}
        )

        res = todo_service_http.post("/rpc/TodoService/ListTodos", json={"user_id": "u1", "completed_only": True})

        todos = res.json()["result"]["todos"]
        assert [t["id"] for t in todos] == [created["id"]]
        assert todos[0]["completed_at"] is not None

    def test_delete_foreign_todo(self, todo_service_http):
        created = todo_service_http.post(
            "/rpc/TodoService/CreateTodo", json={"user_id": "u1", "title": "A", "description": ""}
        ).json()["result"]

        res = todo_service_http.post("/rpc/TodoService/DeleteTodo", json={"id": created["id"], "user_id": "u2"})

        assert res.json() == {"ok": False, "result": None, "error": {"kind": "NotFound", "message": "todo not found"}}


class TestRpcClients:
    def test_user_client_round_trip(self, user_service_http):
        client = UserServiceClient(user_service_http)
        created = client.create_user("ada@example.com", "pw-123456")

        assert client.get_user(created.id).email == "ada@example.com"
        assert client.authenticate_user("ada@example.com", "pw-123456").id == created.id

        updated = client.update_user(created.id, email="lovelace@example.com")
        assert updated.email == "lovelace@example.com"

        client.delete_user(created.id)
        with pytest.raises(NotFoundError):
            client.get_user(created.id)

    def test_user_client_raises_application_errors(self, user_service_http):
        client = UserServiceClient(user_service_http)
        client.create_user("ada@example.com", "pw-123456")

        with pytest.raises(DuplicateEmailError):
            client.create_user("ada@example.com", "pw-123456")
        with pytest.raises(InvalidCredentialsError):
            client.authenticate_user("ada@example.com", "wrong")

    def test_todo_client_round_trip(self, todo_service_http):
        client = TodoServiceClient(todo_service_http)
        todo = client.create_todo("u1", "A", "d")

        assert client.get_todo(todo.id, "u1").title == "A"
        assert client.update_todo(todo.id, "u1", "A2", "").title == "A2"
        assert client.mark_todo_complete(todo.id, "u1", True).completed is True
        assert [t.id for t in client.list_todos("u1", completed_only=True)] == [todo.id]

        client.delete_todo(todo.id, "u1")
        assert client.list_todos("u1") == []

    def test_connection_failure_is_connectivity_error(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ConnectivityError):
            _client_with(refuse).get_user("u1")

    def test_timeout_is_connectivity_error(self):
        def slow(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(ConnectivityError):
            _client_with(slow, TodoServiceClient).list_todos("u1")

    def test_server_error_status_is_connectivity_error(self):
        client = _client_with(lambda request: httpx.Response(500, text="boom"))
        with pytest.raises(ConnectivityError):
            client.get_user("u1")

    def test_malformed_envelope_is_connectivity_error(self):
        client = _client_with(lambda request: httpx.Response(200, json={"unexpected": True}))
        with pytest.raises(ConnectivityError):
            client.get_user("u1")

    def test_requests_hit_method_routes(self):
        seen = []

        def record(request):
            seen.append((request.method, request.url.path))
            return httpx.Response(200, json={"ok": True, "result": {"success": True}})

        _client_with(record, TodoServiceClient).delete_todo("t1", "u1")

        assert seen == [("POST", "/rpc/TodoService/DeleteTodo")]


class TestErrorKinds:
    def test_known_kind(self):
        err = error_from_kind("NotFound", "todo not found")
        assert isinstance(err, NotFoundError)
        assert err.message == "todo not found"
        assert err.status_code == 404

    def test_unknown_kind_falls_back_to_app_error(self):
        err = error_from_kind("Bogus", "what")
        assert type(err) is AppError
        assert err.status_code == 500


class TestDeadlines:
    def test_parse_budget(self):
        assert parse_budget("1.5") == 1.5
        assert parse_budget("0") == 0.0
        assert parse_budget(None) is None
        assert parse_budget("") is None
        assert parse_budget("soon") is None
        assert parse_budget("-1") is None

    def test_storage_timeout_is_capped_by_deadline(self):
        assert storage_timeout(5.0) == 5.0
        with call_deadline(1.0):
            assert 0 < storage_timeout(5.0) <= 1.0
            assert storage_timeout(0.5) == 0.5
        with call_deadline(0):
            with pytest.raises(ConnectivityError):
                storage_timeout(5.0)

    def test_client_sends_its_budget(self):
        seen = []

        def record(request):
            seen.append(request.headers.get(DEADLINE_HEADER))
            return httpx.Response(200, json={"ok": True, "result": {"success": True}})

        client = _client_with(record, TodoServiceClient, timeout=2.0)
        client.delete_todo("t1", "u1")
        with call_deadline(0.5):
            client.delete_todo("t1", "u1")

        assert seen[0] == "2.000"
        assert 0 < float(seen[1]) <= 0.5

    def test_service_aborts_locked_write_at_callers_deadline(self, tmp_path):
        db_path = str(tmp_path / "todos.db")
        settings = make_settings(persistence_backend="sqlite", todo_db_path=db_path, sqlite_timeout_seconds=5.0)
        service = TestClient(create_todo_app(settings))
        payload = {"user_id": "u1", "title": "A", "description": ""}

        blocker = sqlite3.connect(db_path, isolation_level=None)
        blocker.execute("BEGIN IMMEDIATE")
        try:
            res = service.post("/rpc/TodoService/CreateTodo", json=payload, headers={DEADLINE_HEADER: "0.2"})
        finally:
            blocker.execute("ROLLBACK")
            blocker.close()

        assert res.status_code == 200
        assert res.json()["error"]["kind"] == "ConnectivityError"
        listed = service.post("/rpc/TodoService/ListTodos", json={"user_id": "u1"}).json()
        assert listed["result"]["todos"] == []
