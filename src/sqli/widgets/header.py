from __future__ import annotations

from rich.text import Text

from sqli import __version__
from sqli.core.geometry import Rect
from sqli.core.state import AppState
from sqli.ui import palette
from sqli.widgets.pane_view import PaneView

BUTTON_WIDTH = 13


class HeaderView(PaneView):
    """App name, the selected connection, and the Run Query button."""

    def __init__(self, state: AppState) -> None:
        super().__init__(state, state.header)

    def render_pane(self, width: int, height: int) -> Text:
        pal = palette.current()
        state = self.state
        button = state.header.run_button
        content = self.content_region
        button_width = min(BUTTON_WIDTH, width)
        button.area = Rect(content.right - button_width, content.y, button_width, 1)

        t = Text(no_wrap=True, overflow="ellipsis")
        t.append(" sqli ", style=f"bold {pal.panel_title}")
        t.append(f"v{__version__}  ", style=pal.line_number)
        name = state.current_connection
        if name is None:
            t.append("No connection selected", style=pal.line_number)
        elif self.is_editing:
            t.append(f"◀ {name} ▶", style=f"bold {pal.accent}")
        else:
            t.append(name, style=pal.accent)
        if state.query_running:
            t.append("  running…", style=pal.message_fg)

        pad = max(1, width - t.cell_len - button_width)
        t.append(" " * pad)
        label = button.label.center(button_width)[:button_width]
        t.append(label, style=button.style())
        t.truncate(width)
        return t
