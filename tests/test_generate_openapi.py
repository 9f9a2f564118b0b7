import json

from mytodo import generate_openapi as gen
from mytodo.gateway.main import create_app as create_gateway_app

from conftest import make_settings


class TestGenerateOpenapi:
    def test_writes_gateway_schema_and_releases_clients(self, tmp_path, monkeypatch):
        built = []

        def create_app():
            app = create_gateway_app(make_settings())
            built.append(app)
            return app

        monkeypatch.setattr(gen, "create_app", create_app)

        out_path = gen.generate_openapi(str(tmp_path / "interfaces" / "openapi.json"))

        with open(out_path, encoding="utf-8") as f:
            schema = json.load(f)
        assert "/api/todos" in schema["paths"]
        assert "/api/auth/register" in schema["paths"]
        assert {"health", "auth", "todos"} <= {t["name"] for t in schema["tags"]}

        app = built[0]
        assert app.state.user_client._http.is_closed
        assert app.state.todo_client._http.is_closed

    def test_main_uses_path_argument(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr(gen, "create_app", lambda: create_gateway_app(make_settings()))
        target = tmp_path / "out.json"
        monkeypatch.setattr("sys.argv", ["mytodo-openapi", str(target)])

        gen.main()

        assert target.exists()
        assert str(target) in capsys.readouterr().out
