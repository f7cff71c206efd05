from __future__ import annotations

from rich.console import Group, RenderableType
from rich.table import Table
from rich.text import Text

from sqli.core.results import MAX_COLUMN_WIDTH, QueryResult
from sqli.core.state import AppState
from sqli.ui import palette
from sqli.widgets.pane_view import PaneView

EMPTY_MESSAGE = "No query results to display. Run a query using the button above."


def results_table(result: QueryResult, first: int, count: int, selected: int | None = None) -> Group:
    """Summary line over a borderless table of rows ``first`` to ``first + count``.

    Without a box the header takes exactly one line, so body row ``i`` sits
    at content row ``i + 2``, which is what the results pane hit-tests.
    """
    pal = palette.current()
    table = Table(
        box=None,
        padding=(0, 1),
        pad_edge=False,
        show_edge=False,
        header_style=f"bold {pal.table_header}",
    )
    for column in result.columns:
        table.add_column(
            column,
            style=pal.table_cell,
            no_wrap=True,
            overflow="ellipsis",
            max_width=MAX_COLUMN_WIDTH,
        )
    for index in range(first, min(result.row_count, first + count)):
        style = f"on {pal.row_selected_bg}" if index == selected else None
        table.add_row(*result.rows[index], style=style)
    return Group(Text(result.summary(), style=pal.line_number, no_wrap=True), table)


class ResultsView(PaneView):
    def __init__(self, state: AppState) -> None:
        super().__init__(state, state.results)

    def render_pane(self, width: int, height: int) -> RenderableType:
        state = self.state
        if state.result.is_empty:
            return Text(EMPTY_MESSAGE, style=palette.current().line_number)
        selected = state.result_cursor if self.is_editing else None
        return results_table(state.result, state.results_scroll_top, max(1, height - 2), selected)
