from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "conn", "host", "port", "database", "user")


class ConfigError(ValueError):
    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


@dataclass(frozen=True)
class Connection:
    name: str
    conn: str  # driver family; "postgres" (or "postgresql") is supported
    host: str
    port: int
    database: str
    user: str
    password: str | None = None

    def requires_password(self) -> bool:
        return not self.password

    @property
    def target(self) -> str:
        return f"{self.user}@{self.host}:{self.port}/{self.database}"


@dataclass
class Config:
    connections: list[Connection] = field(default_factory=list)

    def names(self) -> list[str]:
        return [c.name for c in self.connections]

    def get(self, name: str | None) -> Connection | None:
        for connection in self.connections:
            if connection.name == name:
                return connection
        return None


def _parse_connection(index: int, raw: Any, errors: list[str]) -> Connection | None:
    where = f"connections[{index}]"
    if not isinstance(raw, dict):
        errors.append(f"{where} must be a mapping")
        return None
    missing = [k for k in REQUIRED_FIELDS if raw.get(k) in (None, "")]
    if missing:
        errors.append(f"{where} is missing {', '.join(missing)}")
        return None
    try:
        port = int(raw["port"])
    except (TypeError, ValueError):
        errors.append(f"{where}.port must be an integer")
        return None
    password = raw.get("password")
    return Connection(
        name=str(raw["name"]),
        conn=str(raw["conn"]),
        host=str(raw["host"]),
        port=port,
        database=str(raw["database"]),
        user=str(raw["user"]),
        password=str(password) if password not in (None, "") else None,
    )


def parse_config(text: str) -> Config:
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError([f"YAML parse error: {e}"]) from None

    if not isinstance(data, dict):
        raise ConfigError(["Top-level YAML must be a mapping with a 'connections' list."])

    raw_connections = data.get("connections") or []
    if not isinstance(raw_connections, list):
        raise ConfigError(["connections must be a list"])

    errors: list[str] = []
    connections: list[Connection] = []
    seen: set[str] = set()
    for i, raw in enumerate(raw_connections):
        connection = _parse_connection(i, raw, errors)
        if connection is None:
            continue
        if connection.name in seen:
            errors.append(f"duplicate connection name: {connection.name}")
            continue
        seen.add(connection.name)
        connections.append(connection)
    if errors:
        raise ConfigError(errors)
    return Config(connections)


def load_config(path: Path) -> Config:
    """Read the connection list; a missing file means no connections."""
    if not path.exists():
        logger.info("no config at %s", path)
        return Config()
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError([f"cannot read {path}: {e}"]) from None
    config = parse_config(text)
    logger.info("loaded %d connection(s) from %s", len(config.connections), path)
    return config
