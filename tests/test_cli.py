from __future__ import annotations

from pathlib import Path

import pytest

from sqli.cli import build_parser, main
from sqli.driver import ConnectionDriver
from sqli.ui import palette


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("SQLI_HOME", str(tmp_path))
    monkeypatch.delenv("SQLI_THEME", raising=False)
    monkeypatch.chdir(tmp_path)
    yield tmp_path
    palette.use("default")


def test_parser_defaults_to_tui() -> None:
    args = build_parser().parse_args([])
    assert args.command is None
    assert build_parser().parse_args(["config", "list"]).config_command == "list"


def test_config_list_without_file(home: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["config"]) == 0
    assert "No connections configured" in capsys.readouterr().out


def test_config_list(home: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (home / "config.yaml").write_text(
        "connections:\n"
        "  - {name: dev, conn: postgres, host: localhost, port: 5432, database: app, user: alice}\n",
        encoding="utf-8",
    )
    assert main(["--theme", "dim", "config", "list"]) == 0
    out = capsys.readouterr().out
    assert "dev\tpostgres\talice@localhost:5432/app\t(password prompt)" in out
    assert palette.current() is palette.PALETTES["dim"]


def test_invalid_config_exits_with_2(home: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (home / "config.yaml").write_text("connections: [", encoding="utf-8")
    assert main(["config"]) == 2
    assert "YAML parse error" in capsys.readouterr().err


def test_unknown_theme_from_env(home: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setenv("SQLI_THEME", "neon")
    assert main(["config"]) == 2
    assert "neon" in capsys.readouterr().err


def test_tui_runs_the_app_with_a_connection_driver(home: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    pytest.importorskip("textual")
    import sqli.app

    launched = {}

    class RecordingApp:
        def __init__(self, settings, config, collections, driver=None) -> None:
            launched["driver"] = driver

        def run(self) -> None:
            launched["ran"] = True

    monkeypatch.setattr(sqli.app, "SqliApp", RecordingApp)
    assert main(["tui"]) == 0
    assert isinstance(launched["driver"], ConnectionDriver)
    assert launched["ran"]
