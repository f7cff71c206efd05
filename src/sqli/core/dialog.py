from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from sqli.core.controls import Button
from sqli.core.drawing import Surface
from sqli.core.events import MouseEvent, MouseKind
from sqli.core.geometry import Rect, centered_rect, split_rows

BUTTON_WIDTH = 12
BUTTON_GAP = 2
BUTTON_ROW_HEIGHT = 3


class ButtonAction(str, Enum):
    SUBMIT = "submit"
    CANCEL = "cancel"


class ModalActionKind(Enum):
    NONE = "none"
    CLOSE = "close"
    CUSTOM = "custom"


@dataclass(frozen=True)
class ModalAction:
    kind: ModalActionKind
    action: ButtonAction | None = None

    @property
    def is_submit(self) -> bool:
        return self.kind is ModalActionKind.CUSTOM and self.action is ButtonAction.SUBMIT

    @property
    def is_cancel(self) -> bool:
        return self.kind is ModalActionKind.CLOSE or (
            self.kind is ModalActionKind.CUSTOM and self.action is ButtonAction.CANCEL
        )


NO_ACTION = ModalAction(ModalActionKind.NONE)
CLOSE = ModalAction(ModalActionKind.CLOSE)


def custom(action: ButtonAction) -> ModalAction:
    return ModalAction(ModalActionKind.CUSTOM, action)


@dataclass(frozen=True)
class DialogButton:
    label: str
    action: ButtonAction
    theme: str = "blue"


@dataclass(frozen=True)
class DialogLayout:
    area: Rect
    modal: Rect
    inner: Rect
    content: Rect
    button_row: Rect
    buttons: tuple[tuple[DialogButton, Rect], ...]

    def button_at(self, column: int, row: int) -> DialogButton | None:
        for button, rect in self.buttons:
            if rect.contains(column, row):
                return button
        return None


@dataclass(frozen=True)
class DialogHit:
    """Outcome of a mouse event on a dialog.

    ``content`` is set when the event landed inside the modal but not on a
    button; the owning modal forwards it to whatever control sits there.
    """

    action: ModalAction
    content: Rect | None = None


class ModalDialog:
    """Frame shared by every modal: centred box, content region, button row."""

    def __init__(
        self,
        title: str,
        buttons: Sequence[DialogButton],
        width_percent: int = 40,
        height_percent: int = 35,
        *,
        min_width: int = 0,
        min_height: int = 0,
    ) -> None:
        self.title = title
        self.buttons = list(buttons)
        self.width_percent = width_percent
        self.height_percent = height_percent
        self.min_width = min_width
        self.min_height = min_height
        self.controls = [Button(b.label, b.theme) for b in self.buttons]
        self.last_layout: DialogLayout | None = None

    def layout(self, area: Rect) -> DialogLayout:
        modal = centered_rect(self.width_percent, self.height_percent, area)
        width = min(area.width, max(modal.width, self.min_width))
        height = min(area.height, max(modal.height, self.min_height))
        if (width, height) != (modal.width, modal.height):
            modal = Rect(
                area.x + (area.width - width) // 2,
                area.y + (area.height - height) // 2,
                width,
                height,
            )
        # Border, then one cell of margin
        inner = modal.inner(1).inner(1)
        content, button_row = split_rows(inner, [None, BUTTON_ROW_HEIGHT])

        count = len(self.buttons)
        total = count * BUTTON_WIDTH + max(0, count - 1) * BUTTON_GAP
        x = button_row.x + max(0, (button_row.width - total) // 2)
        placed = []
        for button in self.buttons:
            placed.append((button, Rect(x, button_row.y, BUTTON_WIDTH, button_row.height)))
            x += BUTTON_WIDTH + BUTTON_GAP
        return DialogLayout(area, modal, inner, content, button_row, tuple(placed))

    def layout_for(self, area: Rect) -> DialogLayout:
        """The last rendered layout when it was computed for ``area``."""
        if self.last_layout is not None and self.last_layout.area == area:
            return self.last_layout
        return self.layout(area)

    def render(
        self,
        canvas: Surface,
        area: Rect,
        draw_content: Callable[[Surface, Rect], None],
    ) -> DialogLayout:
        layout = self.layout(area)
        body = "modal_fg on modal_bg"
        canvas.fill(layout.modal, body)
        canvas.draw_box(
            layout.modal,
            "modal_border on modal_bg",
            self.title,
            "bold modal_fg on modal_bg",
        )
        draw_content(canvas, layout.content)
        for control, (_, rect) in zip(self.controls, layout.buttons):
            control.render(canvas, rect)
        self.last_layout = layout
        return layout

    def hit_test(self, mouse: MouseEvent, area: Rect) -> DialogHit:
        layout = self.layout_for(area)
        for control, (_, rect) in zip(self.controls, layout.buttons):
            control.area = rect
        if mouse.kind in (MouseKind.MOVE, MouseKind.UP):
            for control in self.controls:
                control.handle_mouse_event(mouse)
            return DialogHit(NO_ACTION)
        if not mouse.is_left_down:
            return DialogHit(NO_ACTION)
        if not layout.modal.contains(mouse.column, mouse.row):
            return DialogHit(CLOSE)
        button = layout.button_at(mouse.column, mouse.row)
        if button is not None:
            return DialogHit(custom(button.action))
        return DialogHit(NO_ACTION, layout.content)
