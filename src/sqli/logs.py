from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from sqli.settings import UserSettings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(settings: UserSettings, level: str | None = None) -> Path:
    """Send log records to a rotating file in the user directory.

    The terminal belongs to the TUI, so nothing is logged to stderr. Safe to
    call more than once: root handlers are replaced, not added to.
    Returns the log file path.
    """
    level_name = (level or settings.log_level or "INFO").upper().strip()
    numeric = getattr(logging, level_name, logging.INFO)

    log_file = settings.log_path
    log_file.parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        filename=str(log_file),
        maxBytes=1_000_000,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setLevel(numeric)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    for old in root.handlers:
        old.close()
    root.handlers = []
    root.setLevel(numeric)
    root.addHandler(handler)

    logging.getLogger("sqli").info("logging enabled (file=%s, level=%s)", log_file, level_name)
    return log_file
