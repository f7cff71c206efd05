from __future__ import annotations

from pathlib import Path

import pytest

from sqli.config import ConfigError, load_config, parse_config
from sqli.core.tree import CollectionScope
from sqli.settings import UserSettings, default_user_dir

GOOD = """
connections:
  - name: dev
    conn: postgres
    host: localhost
    port: 5432
    database: app
    user: alice
    password: secret
  - name: prod
    conn: mysql
    host: db.example.com
    port: "3306"
    database: app
    user: reader
"""


def test_parse_connections() -> None:
    config = parse_config(GOOD)
    assert config.names() == ["dev", "prod"]
    dev = config.get("dev")
    assert dev is not None
    assert not dev.requires_password()
    assert dev.target == "alice@localhost:5432/app"
    prod = config.get("prod")
    assert prod is not None
    assert prod.port == 3306
    assert prod.requires_password()
    assert config.get("missing") is None
    assert config.get(None) is None


def test_empty_document_has_no_connections() -> None:
    assert parse_config("").connections == []
    assert parse_config("connections:\n").connections == []


def test_invalid_yaml() -> None:
    with pytest.raises(ConfigError) as exc:
        parse_config("connections: [")
    assert exc.value.errors[0].startswith("YAML parse error")


def test_top_level_must_be_mapping() -> None:
    with pytest.raises(ConfigError):
        parse_config("- a\n- b\n")
    with pytest.raises(ConfigError):
        parse_config("connections: 3\n")


def test_collects_every_connection_error() -> None:
    text = """
connections:
  - name: a
    conn: postgres
  - name: b
    conn: postgres
    host: h
    port: abc
    database: d
    user: u
  - just a string
"""
    with pytest.raises(ConfigError) as exc:
        parse_config(text)
    errors = exc.value.errors
    assert errors == [
        "connections[0] is missing host, port, database, user",
        "connections[1].port must be an integer",
        "connections[2] must be a mapping",
    ]


def test_duplicate_names_rejected() -> None:
    dup = GOOD.replace("name: prod", "name: dev")
    with pytest.raises(ConfigError, match="duplicate connection name: dev"):
        parse_config(dup)


def test_load_config_missing_file(tmp_path: Path) -> None:
    assert load_config(tmp_path / "config.yaml").connections == []


def test_load_config_reads_file(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(GOOD, encoding="utf-8")
    assert load_config(path).names() == ["dev", "prod"]


def test_user_dir_resolution(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SQLI_HOME", str(tmp_path / "home"))
    assert default_user_dir() == tmp_path / "home"
    monkeypatch.delenv("SQLI_HOME")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    assert default_user_dir() == tmp_path / "xdg" / "sqli"


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SQLI_HOME", str(tmp_path / "home"))
    monkeypatch.setenv("SQLI_LOG_LEVEL", "debug")
    monkeypatch.delenv("SQLI_THEME", raising=False)
    settings = UserSettings.from_env(cwd=tmp_path)
    assert settings.log_level == "DEBUG"
    assert settings.theme == "default"
    assert settings.config_path == tmp_path / "home" / "config.yaml"
    assert settings.base_dir(CollectionScope.USER) == tmp_path / "home"
    assert settings.base_dir(CollectionScope.LOCAL) == tmp_path / "sqli"
