from __future__ import annotations

import argparse
import logging
import sys

from sqli import __version__
from sqli.collection import CollectionError, load_collections
from sqli.config import ConfigError, load_config
from sqli.driver import ConnectionDriver
from sqli.logs import setup_logging
from sqli.settings import UserSettings
from sqli.ui import palette

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sqli", description="Terminal SQL workbench (Textual)")
    parser.add_argument("--version", action="version", version=f"sqli {__version__}")
    parser.add_argument("--log-level", help="Log level for the log file (default: $SQLI_LOG_LEVEL or INFO)")
    parser.add_argument("--theme", choices=sorted(palette.PALETTES), help="Colour palette")
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("tui", aliases=["ui"], help="Start the interactive interface (default)")
    config = sub.add_parser("config", help="Inspect the configuration")
    config_sub = config.add_subparsers(dest="config_command")
    config_sub.add_parser("list", help="List configured connections (default)")
    return parser


def _list_connections(settings: UserSettings) -> int:
    config = load_config(settings.config_path)
    if not config.connections:
        print(f"No connections configured in {settings.config_path}")
        return 0
    for c in config.connections:
        auth = "password stored" if not c.requires_password() else "password prompt"
        print(f"{c.name}\t{c.conn}\t{c.target}\t({auth})")
    return 0


def _run_tui(settings: UserSettings) -> int:
    from sqli.app import SqliApp

    config = load_config(settings.config_path)
    collections = load_collections(settings)
    app = SqliApp(settings, config, collections, driver=ConnectionDriver())
    app.run()
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = UserSettings.from_env()
    if args.log_level:
        settings.log_level = args.log_level.upper()
    if args.theme:
        settings.theme = args.theme

    try:
        palette.use(settings.theme)
    except ValueError as e:
        print(f"sqli: {e}", file=sys.stderr)
        return 2

    try:
        if args.command == "config":
            return _list_connections(settings)
        setup_logging(settings)
        return _run_tui(settings)
    except (ConfigError, CollectionError) as e:
        logger.error("startup failed: %s", e)
        print(f"sqli: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
