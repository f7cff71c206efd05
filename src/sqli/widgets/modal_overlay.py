from __future__ import annotations

from rich.text import Text

from sqli.core.geometry import Rect
from sqli.core.state import AppState
from sqli.ui.canvas import Canvas
from sqli.widgets.base import EngineWidget


class ModalOverlay(EngineWidget):
    """Draws the active modal on the overlay layer, sized to the dialog box.

    The modal lays itself out against the whole screen; the overlay is moved
    and resized to the dialog rectangle so the panes stay visible around it.
    """

    def __init__(self, state: AppState, *, id: str | None = None) -> None:
        super().__init__(state, id=id)
        self._screen = Rect(0, 0, 0, 0)
        self._box = Rect(0, 0, 0, 0)

    def sync(self, screen: Rect) -> None:
        modal = self.state.modals.active_modal
        if modal is None:
            self.display = False
            return
        self._screen = screen
        self._box = modal.dialog.layout(screen).modal
        self.styles.offset = (self._box.x, self._box.y)
        self.styles.width = self._box.width
        self.styles.height = self._box.height
        self.display = True
        self.refresh()

    def render(self) -> Text:  # type: ignore[override]
        if self.state.modals.active_modal is None or self._screen.is_empty:
            return Text("")
        canvas = Canvas(self._screen.width, self._screen.height)
        self.state.modals.render(canvas, self._screen)
        return canvas.to_text(self._box)
