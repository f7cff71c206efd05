from __future__ import annotations

from typing import TYPE_CHECKING

from textual import events as tevents
from textual.widget import Widget

from sqli.core.events import MouseEvent, MouseKind
from sqli.core.geometry import Rect
from sqli.core.state import AppState

if TYPE_CHECKING:
    from sqli.app import SqliApp


def region_rect(region) -> Rect:
    return Rect(region.x, region.y, region.width, region.height)


class EngineWidget(Widget):
    """Non-focusable view over ``AppState``.

    Mouse input is not handled here: it is converted to a core
    ``MouseEvent`` in screen coordinates and sent to the app, which routes it
    through the engine like every other event.
    """

    can_focus = False

    def __init__(self, state: AppState, *, id: str | None = None) -> None:
        super().__init__(id=id)
        self.state = state

    def _forward(self, kind: MouseKind, event: tevents.MouseEvent) -> None:
        event.stop()
        app: SqliApp = self.app  # type: ignore[assignment]
        app.dispatch_engine_event(MouseEvent(kind, event.screen_x, event.screen_y, event.button))

    def on_mouse_down(self, event: tevents.MouseDown) -> None:
        self._forward(MouseKind.DOWN, event)

    def on_mouse_up(self, event: tevents.MouseUp) -> None:
        self._forward(MouseKind.UP, event)

    def on_mouse_move(self, event: tevents.MouseMove) -> None:
        self._forward(MouseKind.MOVE, event)

    def on_mouse_scroll_up(self, event: tevents.MouseScrollUp) -> None:
        self._forward(MouseKind.SCROLL_UP, event)

    def on_mouse_scroll_down(self, event: tevents.MouseScrollDown) -> None:
        self._forward(MouseKind.SCROLL_DOWN, event)
