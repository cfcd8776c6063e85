"""Tests for ``openapi-bridge serve`` and the CLI group."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, patch

from click.testing import CliRunner

from openapi_bridge import __version__
from openapi_bridge.cli import main


class TestMain:
    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self) -> None:
        result = CliRunner().invoke(main, ["--help"])
        assert "serve" in result.output
        assert "tools" in result.output


class TestServe:
    def test_builds_registry_and_serves(self, tmp_path: Path, petstore_json: str) -> None:
        spec = tmp_path / "petstore.json"
        spec.write_text(petstore_json, encoding="utf-8")

        with patch("openapi_bridge.protocol.server.StdioServer") as server_cls:
            server_cls.return_value.serve = AsyncMock()
            result = CliRunner().invoke(
                main,
                [
                    "serve", str(spec),
                    "--base-url", "http://localhost:8080",
                    "--timeout", "5",
                    "--header", "X-Tenant: acme",
                ],
                env={"EXTRA_HEADERS": "X-Env: 1"},
            )

        assert result.exit_code == 0, result.output
        registry = server_cls.call_args.args[0]
        assert registry.config.base_url == "http://localhost:8080"
        assert registry.config.request_timeout == 5.0
        assert registry.config.additional_headers == {"X-Env": "1", "X-Tenant": "acme"}
        server_cls.return_value.serve.assert_awaited_once()

    def test_startup_error(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(main, ["serve", str(tmp_path / "missing.yaml")])
        assert result.exit_code == 1
        assert "Startup error" in result.output

    def test_rejects_non_positive_timeout(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(main, ["serve", "x.yaml", "--timeout", "0"])
        assert result.exit_code == 2
