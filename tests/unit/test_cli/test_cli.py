"""Tests for the command-line interface."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import pytest

from panelterm.cli import LINE_COLORS, main, parse_args, render_line
from panelterm.domain.models import LineKind, TerminalLine

CONFIG = """\
targets:
  - id: site-1
    name: shop
    framework: laravel
  - id: site-2
    name: dashboard
    framework: node
"""


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.chdir(tmp_path)
    for key in ("PANEL_TOKEN", "PANEL_URL", "PANELTERM_TOKEN"):
        monkeypatch.delenv(key, raising=False)
    yield
    logger = logging.getLogger("panelterm")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def _line(kind: LineKind, content: str = "hello") -> TerminalLine:
    return TerminalLine(id=1, content=content, kind=kind, timestamp=datetime.now())


class TestParseArgs:
    def test_connect(self) -> None:
        args = parse_args(["-v", "connect", "--target", "site-1", "--url", "ws://x/ws"])
        assert args.command == "connect"
        assert args.target == "site-1"
        assert args.url == "ws://x/ws"
        assert args.verbose

    def test_connect_requires_target(self) -> None:
        with pytest.raises(SystemExit):
            parse_args(["connect"])

    def test_config_path(self) -> None:
        args = parse_args(["-c", "custom.yaml", "targets"])
        assert args.config == Path("custom.yaml")
        assert args.command == "targets"


class TestRenderLine:
    def test_plain(self) -> None:
        assert render_line(_line(LineKind.ERROR)) == "hello"

    def test_colored(self) -> None:
        assert render_line(_line(LineKind.ERROR), color=True) == f"{LINE_COLORS[LineKind.ERROR]}hello\x1b[0m"

    def test_stdout_has_no_color(self) -> None:
        assert render_line(_line(LineKind.STDOUT), color=True) == "hello"


class TestTargetsCommand:
    def test_lists_configured_targets(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = tmp_path / "panelterm.yaml"
        path.write_text(CONFIG)
        assert main(["-c", str(path), "targets"]) == 0
        out = capsys.readouterr().out
        assert "site-1" in out
        assert "shop (laravel)" in out
        assert "dashboard (node)" in out

    def test_no_targets(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["-c", str(tmp_path / "missing.yaml"), "targets"]) == 0
        assert "No targets available." in capsys.readouterr().out


class TestEndpointCommand:
    def test_serves_with_configured_endpoint(self, tmp_path: Path) -> None:
        path = tmp_path / "panelterm.yaml"
        path.write_text("token: tok\nendpoint:\n  host: 0.0.0.0\n  port: 9001\n")
        with patch("panelterm.endpoint.server.uvicorn.run") as run:
            assert main(["-c", str(path), "endpoint"]) == 0
        _, kwargs = run.call_args
        assert kwargs == {"host": "0.0.0.0", "port": 9001}
