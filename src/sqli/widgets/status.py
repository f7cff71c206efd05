from __future__ import annotations

from rich.text import Text

from sqli.core.controls import LineInput
from sqli.core.state import AppState, Mode
from sqli.ui import palette
from sqli.widgets.base import EngineWidget


def _input_text(field: LineInput, focused: bool, style: str, cursor_style: str) -> Text:
    t = Text(field.display, style=style)
    if focused:
        if field.cursor >= len(field.display):
            t.append(" ", style=style)
        t.stylize(cursor_style, field.cursor, field.cursor + 1)
    return t


class SearchBar(EngineWidget):
    """Find / replace prompt shown in search mode."""

    def render(self) -> Text:  # type: ignore[override]
        pal = palette.current()
        search = self.state.search
        base = f"{pal.search_bar_fg} on {pal.search_bar_bg}"
        cursor = f"{pal.cursor_fg} on {pal.cursor_bg}"
        t = Text(no_wrap=True, overflow="crop")
        t.append(" Find: ", style=f"bold {base}")
        t.append_text(_input_text(search.pattern, not search.focus_replacement, base, cursor))
        if search.replace_mode:
            t.append("   Replace: ", style=f"bold {base}")
            t.append_text(_input_text(search.replacement, search.focus_replacement, base, cursor))
        t.pad_right(max(0, self.size.width - t.cell_len))
        t.stylize(base)
        return t


class StatusBar(EngineWidget):
    """Command line, or key instructions with the latest message on the right."""

    def render(self) -> Text:  # type: ignore[override]
        pal = palette.current()
        state = self.state
        width = self.size.width
        base = f"{pal.footer_fg} on {pal.footer_bg}"
        if state.mode is Mode.COMMAND:
            t = Text(":", style=base)
            t.append_text(_input_text(state.command_line, True, base, f"{pal.cursor_fg} on {pal.cursor_bg}"))
            t.pad_right(max(0, width - t.cell_len))
            return t

        t = Text(no_wrap=True, overflow="crop")
        for key, label in state.get_instructions():
            t.append(f" {key} ", style=f"bold {pal.shortcut_fg} on {pal.shortcut_bg}")
            t.append(f" {label} ", style=base)
        if state.message:
            style = pal.error_fg if state.message_is_error else pal.message_fg
            message = Text(f" {state.message} ", style=f"{style} on {pal.footer_bg}")
            gap = width - t.cell_len - message.cell_len
            if gap < 1:
                t.truncate(max(0, width - message.cell_len - 1))
                gap = 1
            t.append(" " * gap, style=base)
            t.append_text(message)
        else:
            t.pad_right(max(0, width - t.cell_len))
        t.stylize(f"on {pal.footer_bg}")
        return t
