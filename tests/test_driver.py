from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace

import pytest

psycopg = pytest.importorskip("psycopg")

import sqli.driver  # noqa: E402
from sqli.config import Connection  # noqa: E402
from sqli.core.results import QueryResult  # noqa: E402
from sqli.driver import ConnectionDriver, QueryError, driver_for  # noqa: E402
from sqli.postgres import PostgresDriver, format_value  # noqa: E402

DEV = Connection("dev", "postgres", "localhost", 5432, "app", "alice")


class FakeCursor:
    def __init__(self, columns: list[str] | None, rows: list[tuple], error: Exception | None = None) -> None:
        self.description = None if columns is None else [SimpleNamespace(name=c) for c in columns]
        self.rows = rows
        self.error = error
        self.executed: list[str] = []

    def __enter__(self) -> FakeCursor:
        return self

    def __exit__(self, *exc: object) -> None:
        return None

    def execute(self, sql: str) -> None:
        self.executed.append(sql)
        if self.error is not None:
            raise self.error

    def fetchall(self) -> list[tuple]:
        return self.rows


class FakeConnection:
    def __init__(self, cursor: FakeCursor) -> None:
        self._cursor = cursor

    def __enter__(self) -> FakeConnection:
        return self

    def __exit__(self, *exc: object) -> None:
        return None

    def cursor(self) -> FakeCursor:
        return self._cursor


def _patch_connect(monkeypatch: pytest.MonkeyPatch, cursor: FakeCursor) -> dict:
    seen: dict = {}

    def connect(**kwargs: object) -> FakeConnection:
        seen.update(kwargs)
        return FakeConnection(cursor)

    monkeypatch.setattr(psycopg, "connect", connect)
    return seen


def test_driver_for_postgres_kinds() -> None:
    assert isinstance(driver_for("postgres"), PostgresDriver)
    assert isinstance(driver_for("PostgreSQL"), PostgresDriver)
    with pytest.raises(QueryError, match="Unsupported connection type: mysql"):
        driver_for("mysql")


def test_connection_driver_routes_and_caches(monkeypatch: pytest.MonkeyPatch) -> None:
    built: list[str] = []

    class Recording:
        def execute(self, connection: Connection, password: str | None, sql: str) -> QueryResult:
            return QueryResult.from_values(["sql"], [[sql]])

    def factory(kind: str) -> Recording:
        built.append(kind)
        return Recording()

    monkeypatch.setattr(sqli.driver, "driver_for", factory)
    driver = ConnectionDriver()
    assert driver.execute(DEV, None, "select 1").rows == [["select 1"]]
    driver.execute(DEV, None, "select 2")
    assert built == ["postgres"]


def test_connection_driver_reports_unsupported_kind() -> None:
    sqlite = Connection("local", "sqlite", "", 0, "db", "me")
    with pytest.raises(QueryError):
        ConnectionDriver().execute(sqlite, None, "select 1")


def test_postgres_driver_converts_rows(monkeypatch: pytest.MonkeyPatch) -> None:
    cursor = FakeCursor(["id", "name", "active"], [(1, "ann", True), (2, None, False)])
    seen = _patch_connect(monkeypatch, cursor)
    result = PostgresDriver().execute(DEV, "secret", "select * from users")
    assert cursor.executed == ["select * from users"]
    assert seen["host"] == "localhost"
    assert seen["dbname"] == "app"
    assert seen["password"] == "secret"
    assert result.columns == ["id", "name", "active"]
    assert result.rows == [["1", "ann", "true"], ["2", "NULL", "false"]]
    assert result.elapsed_ms > 0


def test_postgres_driver_statement_without_rows(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_connect(monkeypatch, FakeCursor(None, []))
    result = PostgresDriver().execute(DEV, "secret", "update t set x = 1")
    assert result.is_empty
    assert result.row_count == 0


def test_postgres_driver_wraps_database_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    error = psycopg.OperationalError("password authentication failed")
    _patch_connect(monkeypatch, FakeCursor(["n"], [], error=error))
    with pytest.raises(QueryError, match="password authentication failed") as info:
        PostgresDriver().execute(DEV, "wrong", "select 1")
    assert info.value.__cause__ is error


def test_format_value() -> None:
    assert format_value(None) is None
    assert format_value(True) == "true"
    assert format_value(date(2024, 5, 1)) == "2024-05-01"
    assert format_value(datetime(2024, 5, 1, 12, 30)) == "2024-05-01T12:30:00"
    assert format_value(Decimal("1.50")) == "1.50"
    assert format_value([1, None, "a"]) == "[1, NULL, a]"
    assert format_value({"a": 1}) == '{"a": 1}'
    assert format_value(b"\x01\xff") == "\\x01ff"
    assert format_value(7) == 7
