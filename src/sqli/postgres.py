from __future__ import annotations

import json
import logging
import time
from datetime import date, datetime, time as dt_time
from decimal import Decimal

import psycopg

from sqli.config import Connection
from sqli.core.results import QueryResult
from sqli.driver import QueryError

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT = 5


def format_value(value: object) -> object:
    """Display form of one PostgreSQL value; ``None`` is left for ``QueryResult``."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date, dt_time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, list):
        return "[" + ", ".join("NULL" if v is None else str(format_value(v)) for v in value) + "]"
    if isinstance(value, dict):
        return json.dumps(value, default=str)
    if isinstance(value, (bytes, memoryview)):
        return "\\x" + bytes(value).hex()
    return value


class PostgresDriver:
    """Runs one statement per call on a fresh connection, committing on success."""

    def __init__(self, connect_timeout: int = CONNECT_TIMEOUT) -> None:
        self.connect_timeout = connect_timeout

    def execute(self, connection: Connection, password: str | None, sql: str) -> QueryResult:
        started = time.perf_counter()
        try:
            with psycopg.connect(
                host=connection.host,
                port=connection.port,
                dbname=connection.database,
                user=connection.user,
                password=password,
                connect_timeout=self.connect_timeout,
            ) as conn:
                with conn.cursor() as cur:
                    cur.execute(sql)
                    if cur.description is None:
                        columns: list[str] = []
                        rows: list[tuple] = []
                    else:
                        columns = [d.name for d in cur.description]
                        rows = cur.fetchall()
        except psycopg.Error as e:
            raise QueryError(str(e).strip() or type(e).__name__) from e
        elapsed = (time.perf_counter() - started) * 1000
        logger.debug("%s returned %d rows in %.0fms", connection.name, len(rows), elapsed)
        return QueryResult.from_values(columns, [[format_value(v) for v in row] for row in rows], elapsed)
