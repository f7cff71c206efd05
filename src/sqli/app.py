from __future__ import annotations

import logging
from functools import partial

from textual import events as tevents
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical

from sqli.config import Config
from sqli.core.events import Event, Resize, Tick, key_from_name
from sqli.core.geometry import Rect
from sqli.core.navigation import NavigationError
from sqli.core.state import AppState, Mode
from sqli.core.tree import Collection
from sqli.driver import QueryDriver
from sqli.runner import CommandRunner, QueryJob, QueryOutcome, run_job
from sqli.settings import UserSettings
from sqli.widgets.collections import CollectionsView
from sqli.widgets.header import HeaderView
from sqli.widgets.modal_overlay import ModalOverlay
from sqli.widgets.pane_view import PaneView
from sqli.widgets.results import ResultsView
from sqli.widgets.status import SearchBar, StatusBar
from sqli.widgets.workspace import WorkspaceView

logger = logging.getLogger(__name__)


class SqliApp(App):
    """Textual shell: turns terminal input into engine events and draws the state."""

    CSS_PATH = "ui/theme.tcss"
    ENABLE_COMMAND_PALETTE = False

    # Keys Textual would otherwise consume for focus changes or quitting
    BINDINGS = [
        Binding("ctrl+c", "engine_key('ctrl+c')", show=False, priority=True),
        Binding("tab", "engine_key('tab')", show=False, priority=True),
        Binding("shift+tab", "engine_key('shift+tab')", show=False, priority=True),
    ]

    def __init__(
        self,
        settings: UserSettings,
        config: Config,
        collections: list[Collection],
        driver: QueryDriver | None = None,
    ) -> None:
        super().__init__()
        self.settings = settings
        self.state = AppState(config.names(), collections)
        self.runner = CommandRunner(self.state, settings, config, driver, submit=self._submit_query)
        self.title = "sqli"
        self._panes: list[PaneView] = []
        self._search_bar: SearchBar | None = None
        self._overlay: ModalOverlay | None = None

    def compose(self) -> ComposeResult:  # noqa: D401 - Textual API
        state = self.state
        header = HeaderView(state)
        collections = CollectionsView(state)
        workspace = WorkspaceView(state)
        results = ResultsView(state)
        self._panes = [header, collections, workspace, results]
        self._search_bar = SearchBar(state, id="search-bar")
        self._overlay = ModalOverlay(state, id="modal-overlay")

        yield header
        with Horizontal(id="main"):
            yield collections
            with Vertical(id="editor"):
                yield workspace
                yield results
        yield self._search_bar
        yield StatusBar(state, id="status")
        yield self._overlay

    def on_mount(self) -> None:
        self.set_interval(self.settings.tick_rate, self._on_tick)
        self.refresh_view()

    # ---- Input ----
    def on_key(self, event: tevents.Key) -> None:
        event.stop()
        event.prevent_default()
        self.dispatch_engine_event(key_from_name(event.key, event.character))

    def action_engine_key(self, name: str) -> None:
        self.dispatch_engine_event(key_from_name(name))

    def on_resize(self, event: tevents.Resize) -> None:
        self.dispatch_engine_event(Resize(event.size.width, event.size.height))

    def _on_tick(self) -> None:
        message = self.state.message
        self.state.handle_event(Tick())
        if message != self.state.message:
            self.refresh_view()

    def dispatch_engine_event(self, event: Event) -> None:
        try:
            quit_requested = self.state.handle_event(event)
        except NavigationError as e:
            logger.exception("navigation error")
            self.state.set_message(str(e), error=True)
            quit_requested = False
        if self.runner.run_pending() or quit_requested:
            self.exit()
            return
        self.refresh_view()

    # ---- Queries ----
    def _submit_query(self, job: QueryJob) -> None:
        self.run_worker(partial(self._query_worker, job), thread=True, group="query", exclusive=True)

    def _query_worker(self, job: QueryJob) -> None:
        outcome = run_job(job)
        self.call_from_thread(self._query_finished, outcome)

    def _query_finished(self, outcome: QueryOutcome) -> None:
        self.runner.finish_query(outcome)
        self.refresh_view()

    # ---- Drawing ----
    def refresh_view(self) -> None:
        for pane in self._panes:
            pane.sync_focus()
            pane.refresh()
        if self._search_bar is not None:
            self._search_bar.display = self.state.mode is Mode.SEARCH
            self._search_bar.refresh()
        status = self.query_one("#status", StatusBar)
        status.refresh()
        if self._overlay is not None:
            self._overlay.sync(Rect(0, 0, self.size.width, self.size.height))
