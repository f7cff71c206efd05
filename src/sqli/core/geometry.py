from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def contains(self, column: int, row: int) -> bool:
        return self.x <= column < self.right and self.y <= row < self.bottom

    def inner(self, margin: int = 1) -> Rect:
        """Shrink by ``margin`` cells on every side (a border, or padding)."""
        width = max(0, self.width - 2 * margin)
        height = max(0, self.height - 2 * margin)
        return Rect(self.x + margin, self.y + margin, width, height)


def centered_rect(percent_x: int, percent_y: int, area: Rect) -> Rect:
    width = area.width * percent_x // 100
    height = area.height * percent_y // 100
    return Rect(
        area.x + (area.width - width) // 2,
        area.y + (area.height - height) // 2,
        width,
        height,
    )


def _split(total: int, sizes: Sequence[int | None]) -> list[tuple[int, int]]:
    # ``None`` entries share whatever the fixed sizes leave over
    fixed = sum(s for s in sizes if s is not None)
    flex = [i for i, s in enumerate(sizes) if s is None]
    remaining = max(0, total - fixed)
    spans: list[tuple[int, int]] = []
    pos = 0
    for i, size in enumerate(sizes):
        if size is None:
            share = remaining // len(flex)
            if i == flex[-1]:
                share = remaining - share * (len(flex) - 1)
            size = share
        size = max(0, min(size, total - pos))
        spans.append((pos, size))
        pos += size
    return spans


def split_rows(area: Rect, heights: Sequence[int | None]) -> list[Rect]:
    return [Rect(area.x, area.y + off, area.width, h) for off, h in _split(area.height, heights)]


def split_columns(area: Rect, widths: Sequence[int | None]) -> list[Rect]:
    return [Rect(area.x + off, area.y, w, area.height) for off, w in _split(area.width, widths)]
