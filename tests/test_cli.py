from typing import Any

import pytest
from click.testing import CliRunner
from starlette.middleware.cors import CORSMiddleware

from mcp_stateless_server import server as server_module
from mcp_stateless_server.settings import ServerSettings


@pytest.fixture
def launched(monkeypatch: pytest.MonkeyPatch) -> dict[str, Any]:
    """Replaces the transports with recorders so main() returns immediately."""
    calls: dict[str, Any] = {}

    def fake_uvicorn_run(app: Any, host: str, port: int) -> None:
        calls["http"] = {"app": app, "host": host, "port": port}

    def fake_anyio_run(func: Any, *args: Any) -> None:
        calls["stdio"] = {"func": func, "args": args}

    monkeypatch.setattr(server_module.uvicorn, "run", fake_uvicorn_run)
    monkeypatch.setattr(server_module.anyio, "run", fake_anyio_run)
    monkeypatch.setattr(server_module, "configure_logging", lambda level: calls.setdefault("log_level", level))
    return calls


def test_settings_defaults():
    settings = ServerSettings()

    assert settings.name == "stateless-server"
    assert settings.version == "1.0.0"
    assert settings.transport == "streamable-http"
    assert settings.port == 3000
    assert settings.streamable_http_path == "/mcp"
    assert not settings.json_response


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("MCP_STATELESS_PORT", "3101")
    monkeypatch.setenv("MCP_STATELESS_JSON_RESPONSE", "true")
    monkeypatch.setenv("MCP_STATELESS_LOG_LEVEL", "DEBUG")

    settings = ServerSettings()

    assert settings.port == 3101
    assert settings.json_response
    assert settings.log_level == "DEBUG"


def test_main_serves_streamable_http(launched: dict[str, Any]):
    result = CliRunner().invoke(server_module.main, ["--port", "4321", "--json-response"])

    assert result.exit_code == 0, result.output
    assert launched["http"]["host"] == "127.0.0.1"
    assert launched["http"]["port"] == 4321
    assert isinstance(launched["http"]["app"], CORSMiddleware)
    assert launched["log_level"] == "INFO"
    assert "stdio" not in launched


def test_main_serves_stdio(launched: dict[str, Any]):
    result = CliRunner().invoke(server_module.main, ["--transport", "stdio", "--log-level", "debug"])

    assert result.exit_code == 0, result.output
    assert launched["stdio"]["func"] is server_module.run_stdio
    assert launched["stdio"]["args"][0].name == "stateless-server"
    assert launched["log_level"] == "DEBUG"
    assert "http" not in launched


def test_cli_options_override_environment(monkeypatch: pytest.MonkeyPatch, launched: dict[str, Any]):
    monkeypatch.setenv("MCP_STATELESS_PORT", "3101")
    monkeypatch.setenv("MCP_STATELESS_HOST", "0.0.0.0")

    result = CliRunner().invoke(server_module.main, ["--port", "3202"])

    assert result.exit_code == 0, result.output
    assert launched["http"]["host"] == "0.0.0.0"
    assert launched["http"]["port"] == 3202


def test_invalid_transport_is_rejected(launched: dict[str, Any]):
    result = CliRunner().invoke(server_module.main, ["--transport", "carrier-pigeon"])

    assert result.exit_code != 0
    assert launched == {}
