"""Drawing surface the modal dialogs render into.

Styles are rich style strings whose colours are palette role names, for
example ``"bold modal_fg on modal_bg"``. The surface decides what colours
those roles map to, so the engine never sees a concrete theme.
"""

from __future__ import annotations

from typing import Protocol

from sqli.core.geometry import Rect


class Surface(Protocol):
    def put(self, column: int, row: int, ch: str, style: str | None = None) -> None: ...

    def fill(self, rect: Rect, style: str, ch: str = " ") -> None: ...

    def draw_text(
        self,
        column: int,
        row: int,
        text: str,
        style: str | None = None,
        max_width: int | None = None,
    ) -> int: ...

    def draw_box(
        self,
        rect: Rect,
        style: str,
        title: str = "",
        title_style: str | None = None,
    ) -> None: ...
