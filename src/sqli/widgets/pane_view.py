from __future__ import annotations

from rich.console import RenderableType

from sqli.core.navigation import FocusType
from sqli.core.panes import Pane
from sqli.core.state import AppState
from sqli.widgets.base import EngineWidget, region_rect


class PaneView(EngineWidget):
    """Bordered view of one pane; the border colour follows its FocusType."""

    def __init__(self, state: AppState, pane: Pane) -> None:
        super().__init__(state, id=pane.pane_id.value)
        self.pane = pane
        self.border_title = pane.title

    def sync_focus(self) -> None:
        focus = self.pane.focus_type(self.state)
        self.set_class(focus is FocusType.ACTIVE, "-active")
        self.set_class(focus is FocusType.EDITING, "-editing")

    @property
    def is_editing(self) -> bool:
        return self.pane.focus_type(self.state) is FocusType.EDITING

    def render(self) -> RenderableType:  # type: ignore[override]
        # Hit-testing uses the region drawn last
        self.state.record_pane_area(self.pane.pane_id, region_rect(self.region))
        return self.render_pane(self.size.width, self.size.height)

    def render_pane(self, width: int, height: int) -> RenderableType:
        raise NotImplementedError
