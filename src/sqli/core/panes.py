"""The four panes of the main screen and the adapter that feeds them input.

A pane never decides whether it has focus: ``handle_key_event`` asks the
navigation manager for the pane's FocusType and calls the active-mode or
edit-mode handler accordingly. Handlers return True only to request exit.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqli.core import events
from sqli.core.commands import Command, CommandKind
from sqli.core.controls import Button
from sqli.core.events import KeyEvent, MouseEvent, MouseKind
from sqli.core.geometry import Rect
from sqli.core.modal import EditFile, NewFile
from sqli.core.navigation import FocusType, PaneId

if TYPE_CHECKING:
    from sqli.core.state import AppState

Instructions = list[tuple[str, str]]

SELECT_KEYS = (events.ENTER, events.SPACE)

_INACTIVE_HELP: Instructions = [("Tab", "Switch Panel"), ("Space", "Select"), ("^C", "Quit")]


def gutter_width(line_count: int) -> int:
    """Columns taken by workspace line numbers plus one separator."""
    return len(str(max(1, line_count))) + 1


class Pane:
    pane_id: PaneId
    title: str = ""
    element_count: int = 1

    def area(self, state: AppState) -> Rect | None:
        return state.pane_areas.get(self.pane_id)

    def content_area(self, state: AppState) -> Rect | None:
        area = self.area(state)
        return area.inner(1) if area is not None else None

    def focus_type(self, state: AppState) -> FocusType:
        return state.navigation.focus_type(self.pane_id)

    def activate(self, state: AppState) -> None:
        state.navigation.start_editing(self.pane_id)

    def deactivate(self, state: AppState) -> None:
        state.navigation.stop_editing(self.pane_id)

    def handle_key_event(self, state: AppState, key: KeyEvent) -> bool:
        focus = self.focus_type(state)
        if focus is FocusType.ACTIVE:
            return self.handle_active_mode_key(state, key)
        if focus is FocusType.EDITING:
            return self.handle_edit_mode_key(state, key)
        return False

    def handle_mouse_event(self, state: AppState, mouse: MouseEvent) -> bool:
        if self.handle_custom_mouse_event(state, mouse):
            return False
        if not mouse.is_left_down:
            return False
        if state.navigation.is_active(self.pane_id):
            self.activate(state)
        else:
            state.navigation.activate_pane(self.pane_id)
        return False

    def handle_active_mode_key(self, state: AppState, key: KeyEvent) -> bool:
        if key.code in SELECT_KEYS:
            self.activate(state)
        else:
            target = self.neighbours().get(key.code)
            if target is not None:
                state.navigation.activate_pane(target)
        return False

    def handle_edit_mode_key(self, state: AppState, key: KeyEvent) -> bool:
        if key.code == events.ESCAPE:
            self.deactivate(state)
        return False

    def handle_custom_mouse_event(self, state: AppState, mouse: MouseEvent) -> bool:
        """Claim a click on a specialised region; True stops default handling."""
        return False

    def neighbours(self) -> dict[str, PaneId]:
        """Arrow key to the pane it moves to in active mode."""
        return {}

    def get_instructions(self, state: AppState) -> Instructions:
        if not state.navigation.is_active(self.pane_id):
            return []
        if state.navigation.is_editing(self.pane_id):
            return self.editing_instructions(state)
        return list(_INACTIVE_HELP)

    def editing_instructions(self, state: AppState) -> Instructions:
        return [("Esc", "Return"), ("^C", "Quit")]


class HeaderPane(Pane):
    pane_id = PaneId.HEADER
    title = "Connection"

    def __init__(self) -> None:
        self.run_button = Button("Run Query", "blue")

    def neighbours(self) -> dict[str, PaneId]:
        return {events.DOWN: PaneId.COLLECTIONS}

    def handle_edit_mode_key(self, state: AppState, key: KeyEvent) -> bool:
        if key.code == events.LEFT:
            state.cycle_connection(-1)
        elif key.code == events.RIGHT:
            state.cycle_connection(1)
        else:
            return super().handle_edit_mode_key(state, key)
        return False

    def handle_custom_mouse_event(self, state: AppState, mouse: MouseEvent) -> bool:
        self.run_button.handle_mouse_event(mouse)
        if mouse.is_left_down and self.run_button.contains(mouse.column, mouse.row):
            state.queue(Command(CommandKind.EXECUTE_QUERY))
            return True
        return False

    def editing_instructions(self, state: AppState) -> Instructions:
        return [("Esc", "Return"), ("←/→", "Change Connection"), ("^C", "Quit")]


class CollectionsPane(Pane):
    pane_id = PaneId.COLLECTIONS
    title = "Collections"

    def neighbours(self) -> dict[str, PaneId]:
        return {events.UP: PaneId.HEADER, events.RIGHT: PaneId.WORKSPACE}

    def handle_edit_mode_key(self, state: AppState, key: KeyEvent) -> bool:
        tree = state.tree
        code = key.code
        if key.is_ctrl("n"):
            entry = tree.selected()
            state.modals.show_modal(NewFile(entry.collection if entry is not None else None))
        elif key.is_ctrl("e"):
            self._edit_selected(state)
        elif code == events.UP:
            tree.up()
        elif code == events.DOWN:
            tree.down()
        elif code == events.LEFT:
            tree.left()
        elif code == events.RIGHT:
            tree.right()
        elif code in SELECT_KEYS:
            self._open_selected(state)
        else:
            return super().handle_edit_mode_key(state, key)
        return False

    def handle_custom_mouse_event(self, state: AppState, mouse: MouseEvent) -> bool:
        content = self.content_area(state)
        if content is None or not content.contains(mouse.column, mouse.row):
            return False
        if mouse.kind is MouseKind.SCROLL_UP:
            state.tree.up()
            return True
        if mouse.kind is MouseKind.SCROLL_DOWN:
            state.tree.down()
            return True
        if not mouse.is_left_down:
            return False
        entry = state.tree.select_row(state.tree.scroll_top + mouse.row - content.y)
        if entry is None:
            return False
        self.activate(state)
        self._open_selected(state)
        return True

    def _open_selected(self, state: AppState) -> None:
        entry = state.tree.selected()
        if entry is None:
            return
        if entry.is_folder:
            state.tree.toggle()
        else:
            state.queue(Command(CommandKind.OPEN_FILE, entry))

    def _edit_selected(self, state: AppState) -> None:
        entry = state.tree.selected()
        if entry is None:
            state.set_message("Select a file or folder to edit")
            return
        state.editing_entry = entry
        state.modals.show_modal(EditFile(entry.name, entry.is_folder, entry.scope))

    def editing_instructions(self, state: AppState) -> Instructions:
        return [
            ("Esc", "Return"),
            ("↑/↓", "Navigate"),
            ("Space", "Confirm"),
            ("^N", "New"),
            ("^E", "Edit"),
            ("^C", "Quit"),
        ]


class WorkspacePane(Pane):
    pane_id = PaneId.WORKSPACE
    title = "Workspace"

    def neighbours(self) -> dict[str, PaneId]:
        return {events.UP: PaneId.HEADER, events.LEFT: PaneId.COLLECTIONS, events.DOWN: PaneId.RESULTS}

    def handle_active_mode_key(self, state: AppState, key: KeyEvent) -> bool:
        if key.is_ctrl("f"):
            state.open_search(replace=False)
            return False
        if key.is_ctrl("r"):
            state.open_search(replace=True)
            return False
        return super().handle_active_mode_key(state, key)

    def handle_edit_mode_key(self, state: AppState, key: KeyEvent) -> bool:
        if key.code == events.ESCAPE:
            self.deactivate(state)
        elif key.is_ctrl("s"):
            state.queue(Command(CommandKind.SAVE_QUERY))
        elif key.is_ctrl(events.SPACE):
            state.queue(Command(CommandKind.EXECUTE_QUERY))
            self.deactivate(state)
        elif key.is_ctrl("f"):
            state.open_search(replace=False)
        elif key.is_ctrl("r"):
            state.open_search(replace=True)
        else:
            state.buffer.input(key)
        return False

    def handle_custom_mouse_event(self, state: AppState, mouse: MouseEvent) -> bool:
        content = self.content_area(state)
        if content is None or not content.contains(mouse.column, mouse.row):
            return False
        buffer = state.buffer
        if mouse.kind is MouseKind.SCROLL_UP:
            buffer.move_up(3)
            return True
        if mouse.kind is MouseKind.SCROLL_DOWN:
            buffer.move_down(3)
            return True
        if not mouse.is_left_down or not state.navigation.is_editing(self.pane_id):
            return False
        row = buffer.scroll_top + mouse.row - content.y
        column = max(0, mouse.column - content.x - gutter_width(len(buffer.lines)))
        buffer.jump(row, buffer.scroll_left + column)
        return True

    def editing_instructions(self, state: AppState) -> Instructions:
        return [("Esc", "Return"), ("^S", "Save"), ("^Space", "Run"), ("^F", "Find"), ("^C", "Quit")]


class ResultsPane(Pane):
    pane_id = PaneId.RESULTS
    title = "Results"

    def neighbours(self) -> dict[str, PaneId]:
        return {events.UP: PaneId.WORKSPACE, events.LEFT: PaneId.COLLECTIONS}

    def handle_edit_mode_key(self, state: AppState, key: KeyEvent) -> bool:
        if key.code == events.UP:
            state.move_result_cursor(-1)
        elif key.code == events.DOWN:
            state.move_result_cursor(1)
        else:
            return super().handle_edit_mode_key(state, key)
        return False

    def handle_custom_mouse_event(self, state: AppState, mouse: MouseEvent) -> bool:
        content = self.content_area(state)
        if content is None or not content.contains(mouse.column, mouse.row):
            return False
        if mouse.kind is MouseKind.SCROLL_UP:
            state.move_result_cursor(-1)
            return True
        if mouse.kind is MouseKind.SCROLL_DOWN:
            state.move_result_cursor(1)
            return True
        if not mouse.is_left_down or not state.navigation.is_editing(self.pane_id):
            return False
        # Row 0 holds the summary line and row 1 the column header
        index = state.results_scroll_top + mouse.row - content.y - 2
        if 0 <= index < state.result.row_count:
            state.result_cursor = index
            return True
        return False

    def editing_instructions(self, state: AppState) -> Instructions:
        return [("Esc", "Stop Editing"), ("↑/↓", "Navigate"), ("^C", "Quit")]
