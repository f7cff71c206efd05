from __future__ import annotations

from rich.text import Text

from sqli.core.panes import gutter_width
from sqli.core.state import AppState
from sqli.ui import palette
from sqli.widgets.pane_view import PaneView


class WorkspaceView(PaneView):
    """Query editor: numbered lines, cursor cell, highlighted search matches."""

    def __init__(self, state: AppState) -> None:
        super().__init__(state, state.workspace)

    def _title(self) -> str:
        current = self.state.current_file
        if current is None:
            return "Workspace"
        return f"Workspace - {current.relative_path}"

    def render_pane(self, width: int, height: int) -> Text:
        pal = palette.current()
        buffer = self.state.buffer
        self.border_title = self._title()
        gutter = gutter_width(len(buffer.lines))
        text_width = max(1, width - gutter)
        row, col = buffer.cursor
        offset = buffer.scroll_left
        pattern = buffer.search_pattern
        editing = self.is_editing

        out = Text(no_wrap=True, overflow="crop", end="")
        first = buffer.scroll_top
        for i, line_idx in enumerate(range(first, min(len(buffer.lines), first + height))):
            if i:
                out.append("\n")
            out.append(f"{line_idx + 1:>{gutter - 1}} ", style=pal.line_number)
            line = buffer.lines[line_idx]
            visible = line[offset : offset + text_width]
            segment = Text(visible)
            if pattern:
                start = line.find(pattern)
                while start != -1:
                    a, b = start - offset, start - offset + len(pattern)
                    if b > 0 and a < len(visible):
                        segment.stylize(f"on {pal.search_hit_bg}", max(0, a), min(len(visible), b))
                    start = line.find(pattern, start + 1)
            if editing and line_idx == row:
                cursor_at = col - offset
                if cursor_at >= len(visible):
                    segment.append(" ")
                segment.stylize(f"{pal.cursor_fg} on {pal.cursor_bg}", cursor_at, cursor_at + 1)
            out.append_text(segment)
        return out
