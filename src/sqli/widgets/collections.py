from __future__ import annotations

from rich.text import Text

from sqli.core.state import AppState
from sqli.core.tree import CollectionScope
from sqli.ui import palette
from sqli.widgets.pane_view import PaneView


class CollectionsView(PaneView):
    def __init__(self, state: AppState) -> None:
        super().__init__(state, state.collections)

    def render_pane(self, width: int, height: int) -> Text:
        pal = palette.current()
        tree = self.state.tree
        rows = tree.visible_rows()
        if not rows:
            return Text("No collections. Press ^N to create one.", style=pal.line_number)
        tree.scroll_into_view(height)
        show_cursor = self.state.navigation.is_active(self.pane.pane_id)

        out = Text(no_wrap=True, overflow="ellipsis", end="")
        for i, row in enumerate(rows[tree.scroll_top : tree.scroll_top + height]):
            index = tree.scroll_top + i
            if i:
                out.append("\n")
            line = Text(no_wrap=True, overflow="ellipsis")
            entry = row.entry
            if entry.is_folder:
                line.append("▾ " if row.expanded else "▸ ", style=pal.tree_folder)
                line.append(entry.name, style=f"bold {pal.tree_folder}")
                scope = "user" if entry.scope is CollectionScope.USER else "local"
                line.append(f" ({scope})", style=pal.tree_scope)
            else:
                line.append("  " * row.depth + "  ")
                line.append(entry.name, style=pal.tree_file)
            if self.state.current_file == entry:
                line.append(" •", style=pal.accent)
            if show_cursor and index == tree.cursor:
                line.pad_right(max(0, width - line.cell_len))
                line.stylize(f"on {pal.row_selected_bg}")
            line.truncate(width)
            out.append_text(line)
        return out
