"""Tests for the command line entry point."""

from unittest.mock import patch

import httpx
import pytest

from conftest import BASE_URL
from kolam_client import cli
from kolam_client.dev.stub_service import create_stub_app
from kolam_client.services.controller import KolamController


@pytest.fixture
def stub_backend(monkeypatch: pytest.MonkeyPatch):
    """Route every controller the CLI builds to the in-process stub."""

    def _controller(settings):
        transport = httpx.ASGITransport(app=create_stub_app())
        return KolamController(settings, transport=transport)

    monkeypatch.setattr(cli, "KolamController", _controller)
    monkeypatch.setattr(cli, "setup_logging", lambda settings: None)


class TestParser:
    def test_generate_defaults(self) -> None:
        args = cli.build_parser().parse_args(["generate"])
        assert args.density == 15
        assert args.smoothing == 0.6
        assert args.boundary == "diamond"
        assert args.color is None
        assert args.one_stroke is False
        assert args.theme == "light"

    def test_unknown_boundary_rejected(self) -> None:
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["generate", "--boundary", "hexagon"])

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])

    def test_base_url_override(self) -> None:
        args = cli.build_parser().parse_args(["--base-url", BASE_URL, "health"])
        settings = cli._settings_for(args)
        assert settings.KOLAM_API_BASE_URL == BASE_URL


class TestCommands:
    def test_health(self, stub_backend, capsys) -> None:
        assert cli.main(["--base-url", BASE_URL, "health"]) == 0
        assert f"Connected: {BASE_URL}" in capsys.readouterr().out

    def test_health_failure(self, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
        def _controller(settings):
            transport = httpx.MockTransport(lambda request: httpx.Response(502))
            return KolamController(settings, transport=transport)

        monkeypatch.setattr(cli, "KolamController", _controller)
        monkeypatch.setattr(cli, "setup_logging", lambda settings: None)

        assert cli.main(["--base-url", BASE_URL, "health"]) == 1
        assert "Connection Failed (Network Error)" in capsys.readouterr().out

    def test_generate_writes_output(self, stub_backend, capsys, tmp_path) -> None:
        output = tmp_path / "kolam.png"
        code = cli.main(
            [
                "--base-url",
                BASE_URL,
                "generate",
                "--density",
                "9",
                "--boundary",
                "fish",
                "--output",
                str(output),
            ]
        )

        assert code == 0
        out = capsys.readouterr().out
        assert "Paths:    3" in out
        assert "Multi-stroke" in out
        assert output.read_bytes().startswith(b"\x89PNG")

    def test_generate_rejection(self, stub_backend, capsys) -> None:
        code = cli.main(["--base-url", BASE_URL, "generate", "--density", "80"])

        assert code == 1
        assert "Generation Failed: ND must be between" in capsys.readouterr().err

    def test_serve_stub_runs_uvicorn(self) -> None:
        with patch("uvicorn.run") as run:
            code = cli.main(["serve-stub", "--port", "9000", "--delay", "0.5"])

        assert code == 0
        run.assert_called_once()
        assert run.call_args.kwargs == {"host": "127.0.0.1", "port": 9000}
