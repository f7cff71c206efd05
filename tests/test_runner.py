from __future__ import annotations

from pathlib import Path

import pytest

from sqli.collection import save_sql
from sqli.config import Config, Connection
from sqli.core import events
from sqli.core.commands import Command, CommandKind, RenameRequest
from sqli.core.events import key
from sqli.core.modals import EditFileValues, NewFileValues, PasswordModal
from sqli.core.results import QueryResult
from sqli.core.state import AppState
from sqli.core.tree import CollectionScope, EntryKind, TreeEntry
from sqli.driver import QueryError
from sqli.runner import CommandRunner
from sqli.settings import UserSettings

DEV = Connection("dev", "postgres", "localhost", 5432, "app", "alice", "secret")
PROD = Connection("prod", "postgres", "db", 5432, "app", "reader")


class FakeDriver:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[tuple[str, str | None, str]] = []

    def execute(self, connection: Connection, password: str | None, sql: str) -> QueryResult:
        self.calls.append((connection.name, password, sql))
        if self.fail:
            raise QueryError("relation does not exist")
        return QueryResult.from_values(["n"], [[1], [2]], 5)


@pytest.fixture
def settings(tmp_path: Path) -> UserSettings:
    return UserSettings(user_dir=tmp_path / "user", workspace_dir=tmp_path / "sqli")


def _runner(settings: UserSettings, driver: FakeDriver | None = None) -> tuple[AppState, CommandRunner]:
    config = Config([DEV, PROD])
    state = AppState(config.names())
    return state, CommandRunner(state, settings, config, driver)


def _run(state: AppState, runner: CommandRunner, kind: CommandKind, payload: object = None) -> bool:
    state.queue(Command(kind, payload))
    return runner.run_pending()


def test_execute_query_with_stored_password(settings: UserSettings) -> None:
    driver = FakeDriver()
    state, runner = _runner(settings, driver)
    state.buffer.set_text("select n from t\n\n")
    _run(state, runner, CommandKind.EXECUTE_QUERY)
    assert driver.calls == [("dev", "secret", "select n from t")]
    assert state.result.row_count == 2
    assert state.message == "Query time: 5ms | 2 rows"
    assert not state.query_running


def test_empty_buffer_is_not_run(settings: UserSettings) -> None:
    driver = FakeDriver()
    state, runner = _runner(settings, driver)
    _run(state, runner, CommandKind.EXECUTE_QUERY)
    assert driver.calls == []
    assert state.message == "Nothing to run"


def test_missing_driver_is_reported(settings: UserSettings) -> None:
    state, runner = _runner(settings)
    state.buffer.set_text("select 1")
    _run(state, runner, CommandKind.EXECUTE_QUERY)
    assert state.message == "No query driver configured"
    assert state.message_is_error


def test_password_prompt_then_connect(settings: UserSettings) -> None:
    driver = FakeDriver()
    state, runner = _runner(settings, driver)
    state.cycle_connection(1)
    state.buffer.set_text("select 1")
    _run(state, runner, CommandKind.EXECUTE_QUERY)
    assert isinstance(state.modals.active_modal, PasswordModal)
    assert driver.calls == []

    for ch in "pw":
        state.handle_event(key(ch))
    state.handle_event(key(events.ENTER))
    runner.run_pending()
    assert driver.calls == [("prod", "pw", "select 1")]
    assert state.pending_sql is None

    # The password is remembered for the session
    _run(state, runner, CommandKind.EXECUTE_QUERY)
    assert state.modals.active_modal is None
    assert driver.calls[-1] == ("prod", "pw", "select 1")


def test_failed_query_forgets_password(settings: UserSettings) -> None:
    driver = FakeDriver(fail=True)
    state, runner = _runner(settings, driver)
    state.cycle_connection(1)
    runner.passwords["prod"] = "wrong"
    state.buffer.set_text("select 1")
    _run(state, runner, CommandKind.EXECUTE_QUERY)
    assert state.message == "Query failed: relation does not exist"
    assert state.message_is_error
    assert "prod" not in runner.passwords
    assert not state.query_running


def test_submit_hook_receives_job(settings: UserSettings) -> None:
    jobs = []
    config = Config([DEV])
    state = AppState(config.names())
    runner = CommandRunner(state, settings, config, FakeDriver(), submit=jobs.append)
    state.buffer.set_text("select 1")
    _run(state, runner, CommandKind.EXECUTE_QUERY)
    assert state.query_running
    assert len(jobs) == 1
    _run(state, runner, CommandKind.EXECUTE_QUERY)
    assert state.message == "A query is already running"
    runner.finish_query(jobs[0]())
    assert state.result.row_count == 2


def test_open_and_save_file(settings: UserSettings) -> None:
    state, runner = _runner(settings)
    _run(state, runner, CommandKind.SAVE_QUERY)
    assert state.message == "Open a collection file first"

    entry = TreeEntry(EntryKind.FILE, "admin", CollectionScope.USER, "users.sql")
    save_sql(settings, entry, "select * from users\n")
    _run(state, runner, CommandKind.OPEN_FILE, entry)
    assert state.current_file == entry
    assert state.buffer.text == "select * from users\n"

    state.buffer.set_text("select 2\n\n")
    _run(state, runner, CommandKind.SAVE_QUERY)
    assert state.message == "Query saved"
    assert (settings.user_dir / "admin" / "users.sql").read_text(encoding="utf-8") == "select 2\n"


def test_collection_errors_become_messages(settings: UserSettings) -> None:
    state, runner = _runner(settings)
    missing = TreeEntry(EntryKind.FILE, "admin", CollectionScope.USER, "nope.sql")
    assert _run(state, runner, CommandKind.OPEN_FILE, missing) is False
    assert state.message.startswith("SQL file not found")
    assert state.message_is_error


def test_create_folder_and_file(settings: UserSettings) -> None:
    state, runner = _runner(settings)
    _run(state, runner, CommandKind.CREATE_ENTRY, NewFileValues("reports", EntryKind.FOLDER, CollectionScope.LOCAL))
    assert state.message == "Created collection reports"
    assert [c.name for c in state.tree.collections] == ["reports"]

    values = NewFileValues("daily", EntryKind.FILE, CollectionScope.LOCAL, "reports")
    _run(state, runner, CommandKind.CREATE_ENTRY, values)
    created = TreeEntry(EntryKind.FILE, "reports", CollectionScope.LOCAL, "daily.sql")
    assert state.current_file == created
    assert state.tree.selected() == created
    assert state.message == "Created reports/daily.sql"


def test_rename_folder_updates_open_file(settings: UserSettings) -> None:
    state, runner = _runner(settings)
    entry = TreeEntry(EntryKind.FILE, "admin", CollectionScope.USER, "users.sql")
    save_sql(settings, entry, "select 1")
    _run(state, runner, CommandKind.OPEN_FILE, entry)

    folder = TreeEntry(EntryKind.FOLDER, "admin", CollectionScope.USER)
    request = RenameRequest(folder, EditFileValues("ops", CollectionScope.USER))
    _run(state, runner, CommandKind.RENAME_ENTRY, request)
    assert state.current_file == TreeEntry(EntryKind.FILE, "ops", CollectionScope.USER, "users.sql")
    assert state.message == "Renamed to ops"
    assert state.tree.selected() == TreeEntry(EntryKind.FOLDER, "ops", CollectionScope.USER)


def test_quit_command(settings: UserSettings) -> None:
    state, runner = _runner(settings)
    assert _run(state, runner, CommandKind.QUIT) is True
