"""Executes the ``Command`` intents queued by the engine.

This is the only place that touches the filesystem or the query driver on
behalf of the UI. Failures become status messages; the app keeps running.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from sqli.collection import CollectionError, create_entry, load_collections, load_sql, rename_entry, save_sql
from sqli.config import Config, Connection
from sqli.core.commands import Command, CommandKind, RenameRequest
from sqli.core.modals import NewFileValues
from sqli.core.results import QueryResult
from sqli.core.state import AppState
from sqli.core.tree import TreeEntry
from sqli.driver import QueryDriver
from sqli.settings import UserSettings

logger = logging.getLogger(__name__)

QueryJob = Callable[[], QueryResult]
QueryOutcome = QueryResult | Exception


class CommandRunner:
    def __init__(
        self,
        state: AppState,
        settings: UserSettings,
        config: Config,
        driver: QueryDriver | None = None,
        submit: Callable[[QueryJob], None] | None = None,
    ) -> None:
        self.state = state
        self.settings = settings
        self.config = config
        self.driver = driver
        # How a query job is run; the Textual app hands it to a thread worker
        self.submit = submit or self._run_inline
        self.passwords: dict[str, str] = {}

    def run_pending(self) -> bool:
        """Execute every queued command. Returns True when the app should exit."""
        for command in self.state.drain():
            try:
                self.run(command)
            except CollectionError as e:
                logger.warning("%s failed: %s", command.kind.name, e)
                self.state.set_message(str(e), error=True)
            except OSError as e:
                logger.exception("%s failed", command.kind.name)
                self.state.set_message(f"File error: {e}", error=True)
        return self.state.should_quit

    def run(self, command: Command) -> None:
        kind = command.kind
        if kind is CommandKind.EXECUTE_QUERY:
            self.execute_query()
        elif kind is CommandKind.CONNECT_WITH_PASSWORD:
            self.connect_with_password()
        elif kind is CommandKind.SAVE_QUERY:
            self.save_query()
        elif kind is CommandKind.OPEN_FILE:
            assert isinstance(command.payload, TreeEntry)
            self.open_file(command.payload)
        elif kind is CommandKind.CREATE_ENTRY:
            assert isinstance(command.payload, NewFileValues)
            self.create(command.payload)
        elif kind is CommandKind.RENAME_ENTRY:
            assert isinstance(command.payload, RenameRequest)
            self.rename(command.payload)
        elif kind is CommandKind.QUIT:
            self.state.should_quit = True

    # ---- Collections ----
    def reload_collections(self) -> None:
        self.state.set_collections(load_collections(self.settings))

    def open_file(self, entry: TreeEntry) -> None:
        self.state.open_file(entry, load_sql(self.settings, entry))

    def save_query(self) -> None:
        entry = self.state.current_file
        if entry is None:
            self.state.set_message("Open a collection file first", error=True)
            return
        save_sql(self.settings, entry, self.state.buffer.content() + "\n")
        self.state.set_message("Query saved")

    def create(self, values: NewFileValues) -> None:
        entry = create_entry(self.settings, values)
        self.reload_collections()
        self.state.tree.select_entry(entry)
        if entry.is_folder:
            self.state.set_message(f"Created collection {entry.name}")
        else:
            self.state.open_file(entry, "")
            self.state.set_message(f"Created {entry.relative_path}")

    def rename(self, request: RenameRequest) -> None:
        renamed = rename_entry(self.settings, request.entry, request.values)
        current = self.state.current_file
        if current == request.entry:
            self.state.current_file = renamed
        elif current is not None and request.entry.is_folder and current.collection == request.entry.collection:
            self.state.current_file = TreeEntry(current.kind, renamed.collection, renamed.scope, current.file)
        self.reload_collections()
        self.state.tree.select_entry(renamed)
        self.state.set_message(f"Renamed to {renamed.name}")

    # ---- Queries ----
    def execute_query(self) -> None:
        state = self.state
        sql = state.buffer.content().strip()
        if not sql:
            state.set_message("Nothing to run")
            return
        if state.query_running:
            state.set_message("A query is already running")
            return
        connection = self.config.get(state.current_connection)
        if connection is None:
            state.set_message("No connection selected", error=True)
            return
        if self.driver is None:
            state.set_message("No query driver configured", error=True)
            return
        password = connection.password or self.passwords.get(connection.name)
        if password is None:
            state.request_password(sql)
            return
        self._start(connection, password, sql)

    def connect_with_password(self) -> None:
        state = self.state
        password = state.modals.take_result()
        sql, state.pending_sql = state.pending_sql, None
        connection = self.config.get(state.current_connection)
        if password is None or sql is None or connection is None or self.driver is None:
            return
        self.passwords[connection.name] = password
        self._start(connection, password, sql)

    def _start(self, connection: Connection, password: str | None, sql: str) -> None:
        driver = self.driver
        assert driver is not None
        self.state.query_running = True
        self.state.set_message(f"Running on {connection.name}...")
        logger.info("executing query on %s (%s)", connection.name, connection.target)

        def job() -> QueryResult:
            started = time.perf_counter()
            result = driver.execute(connection, password, sql)
            if not result.elapsed_ms:
                elapsed = (time.perf_counter() - started) * 1000
                result = QueryResult(result.columns, result.rows, elapsed)
            return result

        self.submit(job)

    def _run_inline(self, job: QueryJob) -> None:
        self.finish_query(run_job(job))

    def finish_query(self, outcome: QueryOutcome) -> None:
        """Apply a finished query on the UI thread."""
        state = self.state
        state.query_running = False
        if isinstance(outcome, Exception):
            connection = state.current_connection
            if connection is not None:
                # A rejected password should be asked for again next time
                self.passwords.pop(connection, None)
            state.set_message(f"Query failed: {outcome}", error=True)
            return
        state.set_result(outcome)


def run_job(job: QueryJob) -> QueryOutcome:
    """Run a query job, returning the driver's exception instead of raising it."""
    try:
        return job()
    except Exception as e:  # drivers raise their own error types
        logger.exception("query failed")
        return e
