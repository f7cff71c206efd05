from __future__ import annotations

from typing import Protocol

from sqli.config import Connection
from sqli.core.results import QueryResult


class QueryError(RuntimeError):
    """Raised by a driver when a query cannot be executed."""


class QueryDriver(Protocol):
    """Runs SQL against a configured connection.

    Called from a worker thread; implementations may block.
    """

    def execute(self, connection: Connection, password: str | None, sql: str) -> QueryResult: ...


POSTGRES_KINDS = ("postgres", "postgresql")


def driver_for(kind: str) -> QueryDriver:
    """Driver for a connection's ``conn`` family."""
    if kind.lower() in POSTGRES_KINDS:
        # psycopg is only loaded once a query actually runs
        from sqli.postgres import PostgresDriver

        return PostgresDriver()
    raise QueryError(f"Unsupported connection type: {kind}")


class ConnectionDriver:
    """Routes each query to the driver for its connection's family."""

    def __init__(self) -> None:
        self._drivers: dict[str, QueryDriver] = {}

    def execute(self, connection: Connection, password: str | None, sql: str) -> QueryResult:
        kind = connection.conn.lower()
        driver = self._drivers.get(kind)
        if driver is None:
            driver = self._drivers[kind] = driver_for(kind)
        return driver.execute(connection, password, sql)
