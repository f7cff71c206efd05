from __future__ import annotations

from rich.text import Text

from sqli.core.geometry import Rect
from sqli.ui import palette

BOX = {
    "tl": "┌",
    "tr": "┐",
    "bl": "└",
    "br": "┘",
    "h": "─",
    "v": "│",
}


class Canvas:
    """Fixed-size grid of styled cells that modal dialogs draw into.

    Every drawing call clips to the grid, so callers may pass rectangles that
    overflow it. ``to_text`` turns the grid into one rich ``Text`` with a
    line per row, merging runs of identically styled cells. Cell styles may
    name palette roles (``"modal_fg on modal_bg"``); they are resolved against
    the active palette when the grid is rendered.
    """

    def __init__(self, width: int, height: int, style: str = "") -> None:
        self.width = max(0, width)
        self.height = max(0, height)
        self._chars = [[" "] * self.width for _ in range(self.height)]
        self._styles = [[style] * self.width for _ in range(self.height)]

    @property
    def area(self) -> Rect:
        return Rect(0, 0, self.width, self.height)

    def char_at(self, column: int, row: int) -> str:
        return self._chars[row][column]

    def style_at(self, column: int, row: int) -> str:
        return self._styles[row][column]

    def row_text(self, row: int) -> str:
        return "".join(self._chars[row])

    def put(self, column: int, row: int, ch: str, style: str | None = None) -> None:
        if 0 <= row < self.height and 0 <= column < self.width:
            self._chars[row][column] = ch
            if style is not None:
                self._styles[row][column] = style

    def fill(self, rect: Rect, style: str, ch: str = " ") -> None:
        for row in range(max(0, rect.y), min(self.height, rect.bottom)):
            for column in range(max(0, rect.x), min(self.width, rect.right)):
                self._chars[row][column] = ch
                self._styles[row][column] = style

    def draw_text(
        self,
        column: int,
        row: int,
        text: str,
        style: str | None = None,
        max_width: int | None = None,
    ) -> int:
        """Write ``text`` left to right; returns the number of cells written."""
        if max_width is not None:
            text = text[: max(0, max_width)]
        written = 0
        for i, ch in enumerate(text):
            if 0 <= column + i < self.width and 0 <= row < self.height:
                self.put(column + i, row, ch, style)
                written += 1
        return written

    def draw_box(
        self,
        rect: Rect,
        style: str,
        title: str = "",
        title_style: str | None = None,
    ) -> None:
        if rect.width < 2 or rect.height < 2:
            return
        right = rect.right - 1
        bottom = rect.bottom - 1
        for column in range(rect.x + 1, right):
            self.put(column, rect.y, BOX["h"], style)
            self.put(column, bottom, BOX["h"], style)
        for row in range(rect.y + 1, bottom):
            self.put(rect.x, row, BOX["v"], style)
            self.put(right, row, BOX["v"], style)
        self.put(rect.x, rect.y, BOX["tl"], style)
        self.put(right, rect.y, BOX["tr"], style)
        self.put(rect.x, bottom, BOX["bl"], style)
        self.put(right, bottom, BOX["br"], style)
        if title:
            label = f" {title} "[: max(0, rect.width - 2)]
            start = rect.x + max(1, (rect.width - len(label)) // 2)
            self.draw_text(start, rect.y, label, title_style or style)

    def to_text(self, region: Rect | None = None) -> Text:
        """Render the grid, or just ``region`` of it, as rich text."""
        region = region or self.area
        left = max(0, region.x)
        right = min(self.width, region.right)
        out = Text(no_wrap=True, overflow="crop", end="")
        resolved: dict[str, str] = {}
        for row in range(max(0, region.y), min(self.height, region.bottom)):
            if row > max(0, region.y):
                out.append("\n")
            chars = self._chars[row]
            styles = self._styles[row]
            start = left
            for column in range(left + 1, right + 1):
                if column == right or styles[column] != styles[start]:
                    style = styles[start]
                    if style not in resolved:
                        resolved[style] = palette.resolve(style)
                    out.append("".join(chars[start:column]), style=resolved[style] or None)
                    start = column
        return out
