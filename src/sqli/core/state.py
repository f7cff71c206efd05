"""Application state and the top-level input router.

``AppState`` is everything the main screen shows, plus the queue of
``Command`` intents the app shell executes after each event. Routing order
for a key: active modal, then command or search mode, then global keys,
then the active pane.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum

from sqli.core import events
from sqli.core.commands import Command, CommandKind, RenameRequest
from sqli.core.controls import LineInput
from sqli.core.dialog import ModalAction
from sqli.core.events import Event, KeyEvent, MouseEvent, MouseKind, Resize, Tick
from sqli.core.geometry import Rect
from sqli.core.modal import ModalManager, PasswordPrompt
from sqli.core.modals import EditFileModal, NewFileModal, PasswordModal
from sqli.core.navigation import NavigationManager, PaneId
from sqli.core.panes import (
    CollectionsPane,
    HeaderPane,
    Instructions,
    Pane,
    ResultsPane,
    WorkspacePane,
    gutter_width,
)
from sqli.core.results import QueryResult
from sqli.core.search import SearchableBuffer
from sqli.core.tree import Collection, CollectionTree, TreeEntry

logger = logging.getLogger(__name__)

# Ticks a transient message stays visible (5 s at the default tick rate)
MESSAGE_TICKS = 20

# Rows the header, footer and borders take from the workspace viewport
_CHROME_ROWS = 9


class Mode(Enum):
    NORMAL = "normal"
    SEARCH = "search"
    COMMAND = "command"


@dataclass
class SearchBox:
    pattern: LineInput = field(default_factory=LineInput)
    replacement: LineInput = field(default_factory=LineInput)
    replace_mode: bool = False
    focus_replacement: bool = False

    @property
    def focused(self) -> LineInput:
        return self.replacement if self.focus_replacement else self.pattern

    def reset(self, replace_mode: bool) -> None:
        self.pattern.clear()
        self.replacement.clear()
        self.replace_mode = replace_mode
        self.focus_replacement = False


class AppState:
    def __init__(
        self,
        connections: list[str] | None = None,
        collections: list[Collection] | None = None,
        *,
        visible_height: int = 10,
    ) -> None:
        self.navigation = NavigationManager()
        self.modals = ModalManager()
        self.header = HeaderPane()
        self.collections = CollectionsPane()
        self.workspace = WorkspacePane()
        self.results = ResultsPane()
        self.panes: dict[PaneId, Pane] = {
            pane.pane_id: pane for pane in (self.header, self.collections, self.workspace, self.results)
        }
        for pane in self.panes.values():
            self.navigation.register_pane(pane.pane_id, pane.element_count)
        self.pane_areas: dict[PaneId, Rect] = {}

        self.mode = Mode.NORMAL
        self.buffer = SearchableBuffer(visible_height=visible_height)
        self.search = SearchBox()
        self.command_line = LineInput()

        self.connections = list(connections or [])
        self.connection_index: int | None = 0 if self.connections else None
        self.tree = CollectionTree(collections)
        self.current_file: TreeEntry | None = None
        self.editing_entry: TreeEntry | None = None

        self.result = QueryResult()
        self.result_cursor = 0
        self.results_scroll_top = 0
        self.results_visible_rows = 10
        self.query_running = False
        self.pending_sql: str | None = None

        self.message = ""
        self.message_is_error = False
        self._message_ticks = 0
        self.screen = Rect(0, 0, 80, 24)
        self.pending: deque[Command] = deque()
        self.should_quit = False

    # ---- Intents and messages ----
    def queue(self, command: Command) -> None:
        logger.debug("queued %s", command.kind.name)
        self.pending.append(command)

    def drain(self) -> list[Command]:
        commands = list(self.pending)
        self.pending.clear()
        return commands

    def set_message(self, message: str, *, error: bool = False) -> None:
        self.message = message
        self.message_is_error = error
        self._message_ticks = MESSAGE_TICKS

    def clear_message(self) -> None:
        self.message = ""
        self.message_is_error = False
        self._message_ticks = 0

    # ---- Accessors ----
    @property
    def active_pane(self) -> Pane | None:
        pane_id = self.navigation.active_pane
        return self.panes.get(pane_id) if pane_id is not None else None

    @property
    def current_connection(self) -> str | None:
        if self.connection_index is None:
            return None
        return self.connections[self.connection_index]

    def cycle_connection(self, step: int) -> None:
        if not self.connections:
            return
        index = self.connection_index or 0
        self.connection_index = (index + step) % len(self.connections)

    def set_connections(self, connections: list[str]) -> None:
        current = self.current_connection
        self.connections = list(connections)
        if current in self.connections:
            self.connection_index = self.connections.index(current)
        else:
            self.connection_index = 0 if self.connections else None

    def move_result_cursor(self, step: int) -> None:
        count = self.result.row_count
        if count == 0:
            return
        self.result_cursor = (self.result_cursor + step) % count
        self._scroll_results_to_cursor()

    def _scroll_results_to_cursor(self) -> None:
        if self.result_cursor < self.results_scroll_top:
            self.results_scroll_top = self.result_cursor
        elif self.result_cursor >= self.results_scroll_top + self.results_visible_rows:
            self.results_scroll_top = self.result_cursor - self.results_visible_rows + 1

    def record_pane_area(self, pane_id: PaneId, area: Rect) -> None:
        """Called by the renderer so mouse events can be hit-tested."""
        self.pane_areas[pane_id] = area
        # Inside the border: the workspace loses its line-number gutter, the
        # results pane its summary and header rows
        if pane_id is PaneId.WORKSPACE:
            text_width = area.width - 2 - gutter_width(len(self.buffer.lines))
            self.buffer.set_viewport(max(1, area.height - 2), max(1, text_width))
        elif pane_id is PaneId.RESULTS:
            self.results_visible_rows = max(1, area.height - 4)
            self._scroll_results_to_cursor()

    # ---- Collaborator results ----
    def open_file(self, entry: TreeEntry, text: str) -> None:
        self.buffer.set_text(text)
        self.current_file = entry
        self.navigation.activate_pane(PaneId.WORKSPACE)
        self.set_message(f"Opened {entry.relative_path}")

    def set_collections(self, collections: list[Collection]) -> None:
        self.tree.set_collections(collections)

    def set_result(self, result: QueryResult) -> None:
        self.result = result
        self.result_cursor = 0
        self.results_scroll_top = 0
        self.query_running = False
        self.set_message(result.summary())

    def request_password(self, sql: str) -> None:
        self.pending_sql = sql
        self.modals.show_modal(PasswordPrompt())

    def open_search(self, replace: bool) -> None:
        self.mode = Mode.SEARCH
        self.search.reset(replace)
        self.buffer.set_search_pattern("")

    # ---- Event routing ----
    def handle_event(self, event: Event) -> bool:
        if isinstance(event, KeyEvent):
            return self.handle_key_event(event)
        if isinstance(event, MouseEvent):
            return self.handle_mouse_event(event)
        if isinstance(event, Resize):
            self.resize(event.width, event.height)
        elif isinstance(event, Tick):
            self.tick()
        return False

    def handle_key_event(self, key: KeyEvent) -> bool:
        """Route a key press. Returns True when the app should exit."""
        if self.modals.is_modal_active():
            self._apply_modal_action(self.modals.handle_event(key))
            return False
        if self.mode is Mode.COMMAND:
            return self._handle_command_key(key)
        if self.mode is Mode.SEARCH:
            return self._handle_search_key(key)

        if key.is_ctrl("c"):
            self.should_quit = True
            return True
        if key.code == events.TAB and not self.navigation.is_editing(PaneId.WORKSPACE):
            self.navigation.handle_tab(reverse=key.shift)
            return False
        if key.is_ctrl("p"):
            self.mode = Mode.COMMAND
            self.command_line.clear()
            return False

        pane = self.active_pane
        if pane is None:
            return False
        if pane.handle_key_event(self, key):
            self.should_quit = True
        return self.should_quit

    def handle_mouse_event(self, mouse: MouseEvent) -> bool:
        if self.modals.is_modal_active():
            self._apply_modal_action(self.modals.handle_event(mouse))
            return False
        if mouse.kind is MouseKind.MOVE:
            # Hover state needs every pane to learn the pointer left it
            for pane in self.panes.values():
                pane.handle_custom_mouse_event(self, mouse)
            return False
        for pane_id, area in self.pane_areas.items():
            if area.contains(mouse.column, mouse.row):
                return self.panes[pane_id].handle_mouse_event(self, mouse)
        return False

    def tick(self) -> None:
        if self._message_ticks > 0:
            self._message_ticks -= 1
            if self._message_ticks == 0:
                self.clear_message()

    def resize(self, width: int, height: int) -> None:
        self.screen = Rect(0, 0, width, height)
        if PaneId.WORKSPACE not in self.pane_areas:
            self.buffer.set_visible_height(max(1, (height - _CHROME_ROWS) * 2 // 3))

    # ---- Modes ----
    def _handle_command_key(self, key: KeyEvent) -> bool:
        if key.code == events.ESCAPE:
            self.mode = Mode.NORMAL
            self.command_line.clear()
            return False
        if key.is_ctrl("c"):
            self.should_quit = True
            return True
        if key.code != events.ENTER:
            self.command_line.handle_key_event(key)
            return False

        command = self.command_line.value.strip()
        self.mode = Mode.NORMAL
        self.command_line.clear()
        if command == "w":
            self.queue(Command(CommandKind.SAVE_QUERY))
        elif command == "q":
            self.should_quit = True
            return True
        elif command == "wq":
            self.queue(Command(CommandKind.SAVE_QUERY))
            self.queue(Command(CommandKind.QUIT))
        elif command:
            self.set_message(f"Unknown command: {command}", error=True)
        return False

    def _handle_search_key(self, key: KeyEvent) -> bool:
        search = self.search
        buffer = self.buffer
        if key.code == events.ESCAPE:
            self.mode = Mode.NORMAL
            buffer.set_search_pattern("")
            return False
        if key.is_ctrl("c"):
            self.should_quit = True
            return True
        if key.is_ctrl("n"):
            if not buffer.search_forward(False):
                self.set_message("Pattern not found")
            return False
        if key.is_ctrl("p"):
            if not buffer.search_back(False):
                self.set_message("Pattern not found")
            return False
        if key.code == events.TAB and search.replace_mode:
            search.focus_replacement = not search.focus_replacement
            return False
        if key.code == events.ENTER:
            if search.replace_mode:
                self._replace(all_matches=key.ctrl)
            elif not buffer.search_forward(True):
                self.set_message("Pattern not found")
            self.mode = Mode.NORMAL
            return False

        before = search.pattern.value
        search.focused.handle_key_event(key)
        if search.pattern.value != before:
            buffer.set_search_pattern(search.pattern.value)
        return False

    def _replace(self, all_matches: bool) -> None:
        buffer = self.buffer
        replacement = self.search.replacement.value
        if all_matches:
            count = buffer.replace_all(replacement)
            self.set_message(f"Replaced {count} occurrences")
            return
        if buffer.replace_next(replacement) or (buffer.search_forward(False) and buffer.replace_next(replacement)):
            self.set_message("Replaced occurrence")
        else:
            self.set_message("No more matches")

    # ---- Modal results ----
    def _apply_modal_action(self, action: ModalAction) -> None:
        if action.is_cancel:
            if isinstance(self.modals.active_modal, PasswordModal):
                self.pending_sql = None
            self.modals.close_modal()
            self.editing_entry = None
        elif action.is_submit:
            self._submit_modal()

    def _submit_modal(self) -> None:
        modal = self.modals.active_modal
        if isinstance(modal, PasswordModal):
            password = modal.values()
            self.modals.close_modal()
            self.modals.store_result(password)
            self.queue(Command(CommandKind.CONNECT_WITH_PASSWORD))
        elif isinstance(modal, NewFileModal):
            values = modal.values()
            if not values.name:
                modal.set_error("Name is required")
                return
            self.modals.close_modal()
            self.queue(Command(CommandKind.CREATE_ENTRY, values))
        elif isinstance(modal, EditFileModal):
            values = modal.values()
            if not values.name:
                modal.set_error("Name is required")
                return
            entry = self.editing_entry
            self.modals.close_modal()
            self.editing_entry = None
            if entry is not None:
                self.queue(Command(CommandKind.RENAME_ENTRY, RenameRequest(entry, values)))

    # ---- Footer ----
    def get_instructions(self) -> Instructions:
        if self.modals.is_modal_active():
            return [("Enter", "Submit"), ("Esc", "Cancel"), ("Tab", "Next Field")]
        if self.mode is Mode.COMMAND:
            return [("Esc", "Normal Mode"), ("Enter", "Execute"), ("^C", "Quit")]
        if self.mode is Mode.SEARCH:
            if self.search.replace_mode:
                return [
                    ("Enter", "Replace"),
                    ("^Enter", "Replace All"),
                    ("Tab", "Switch Field"),
                    ("Esc", "Close"),
                ]
            return [("Enter", "Find"), ("^N", "Next"), ("^P", "Previous"), ("Esc", "Close")]
        pane = self.active_pane
        return pane.get_instructions(self) if pane is not None else []
