from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from sqli.core.tree import CollectionScope

CONFIG_FILE_NAME = "config.yaml"
LOG_FILE_NAME = "sqli.log"


def default_user_dir() -> Path:
    """Per-user configuration directory."""
    explicit = os.environ.get("SQLI_HOME")
    if explicit:
        return Path(explicit).expanduser()
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg).expanduser() / "sqli"
    return Path.home() / ".config" / "sqli"


@dataclass
class UserSettings:
    user_dir: Path
    workspace_dir: Path
    log_level: str = "INFO"
    tick_rate: float = 0.25
    theme: str = "default"

    @classmethod
    def from_env(cls, cwd: Path | None = None) -> UserSettings:
        base = cwd if cwd is not None else Path.cwd()
        return cls(
            user_dir=default_user_dir(),
            workspace_dir=base / "sqli",
            log_level=os.environ.get("SQLI_LOG_LEVEL", "INFO").upper().strip() or "INFO",
            theme=os.environ.get("SQLI_THEME", "default"),
        )

    @property
    def config_path(self) -> Path:
        return self.user_dir / CONFIG_FILE_NAME

    @property
    def log_path(self) -> Path:
        return self.user_dir / LOG_FILE_NAME

    def base_dir(self, scope: CollectionScope) -> Path:
        return self.user_dir if scope is CollectionScope.USER else self.workspace_dir
