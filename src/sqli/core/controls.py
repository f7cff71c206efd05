"""Small stateful controls composed by the modal dialogs.

Each control owns its value and reacts to core key/mouse events. Rendering
goes through a drawing ``Surface`` using palette role names; the rectangles a
control was last drawn into are kept so mouse events can be hit-tested
against them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from sqli.core import events
from sqli.core.drawing import Surface
from sqli.core.events import KeyEvent, MouseEvent, MouseKind
from sqli.core.geometry import Rect, split_columns

MASK_CHAR = "•"


class LineInput:
    """Single-line text field."""

    def __init__(self, value: str = "", *, masked: bool = False, placeholder: str = "") -> None:
        self.value = value
        self.cursor = len(value)
        self.masked = masked
        self.placeholder = placeholder

    def set_value(self, value: str) -> None:
        self.value = value
        self.cursor = len(value)

    def clear(self) -> None:
        self.set_value("")

    @property
    def display(self) -> str:
        return MASK_CHAR * len(self.value) if self.masked else self.value

    def handle_key_event(self, key: KeyEvent) -> bool:
        """Returns True when the key was consumed."""
        code = key.code
        if key.char is not None:
            self.value = self.value[: self.cursor] + key.char + self.value[self.cursor :]
            self.cursor += 1
        elif code == events.BACKSPACE:
            if self.cursor > 0:
                self.value = self.value[: self.cursor - 1] + self.value[self.cursor :]
                self.cursor -= 1
        elif code == events.DELETE:
            self.value = self.value[: self.cursor] + self.value[self.cursor + 1 :]
        elif code == events.LEFT:
            self.cursor = max(0, self.cursor - 1)
        elif code == events.RIGHT:
            self.cursor = min(len(self.value), self.cursor + 1)
        elif code == events.HOME:
            self.cursor = 0
        elif code == events.END:
            self.cursor = len(self.value)
        elif key.is_ctrl("u"):
            self.clear()
        else:
            return False
        return True

    def click(self, mouse: MouseEvent, rect: Rect) -> None:
        """Place the cursor under a click inside the text row of ``rect``."""
        inner = rect.inner(1)
        self.cursor = max(0, min(len(self.value), mouse.column - inner.x))

    def render(self, canvas: Surface, rect: Rect, *, title: str = "", focused: bool = False) -> None:
        base = "modal_fg on input_bg"
        border = "input_focus_border" if focused else "panel_border"
        canvas.fill(rect, base)
        canvas.draw_box(rect, f"{border} on input_bg", title, base)
        inner = rect.inner(1)
        if inner.is_empty:
            return
        row = inner.y
        if not self.value and self.placeholder and not focused:
            canvas.draw_text(inner.x, row, self.placeholder, "line_number on input_bg", inner.width)
            return
        text = self.display
        # Keep the cursor cell visible when the value is wider than the field
        offset = max(0, self.cursor - inner.width + 1)
        canvas.draw_text(inner.x, row, text[offset:], base, inner.width)
        if focused:
            column = inner.x + self.cursor - offset
            ch = text[self.cursor] if self.cursor < len(text) else " "
            canvas.put(column, row, ch, "cursor_fg on cursor_bg")


@dataclass(frozen=True)
class RadioOption:
    label: str
    value: object


class RadioGroup:
    """Horizontal single-choice selector rendered as ``(*) A  ( ) B``."""

    def __init__(self, options: list[RadioOption], selected: int = 0) -> None:
        if not options:
            raise ValueError("RadioGroup needs at least one option")
        self.options = options
        self.selected = max(0, min(selected, len(options) - 1))

    @property
    def selected_value(self) -> object:
        return self.options[self.selected].value

    def set_selected(self, value: object) -> None:
        for i, option in enumerate(self.options):
            if option.value == value:
                self.selected = i
                return

    def next(self) -> None:
        self.selected = (self.selected + 1) % len(self.options)

    def previous(self) -> None:
        self.selected = (self.selected - 1) % len(self.options)

    def handle_key_event(self, key: KeyEvent) -> bool:
        if key.code in (events.LEFT, events.UP):
            self.previous()
        elif key.code in (events.RIGHT, events.DOWN, events.SPACE):
            self.next()
        else:
            return False
        return True

    def option_areas(self, rect: Rect) -> list[Rect]:
        return split_columns(rect, [None] * len(self.options))

    def click(self, mouse: MouseEvent, rect: Rect) -> bool:
        for i, area in enumerate(self.option_areas(rect)):
            if area.contains(mouse.column, mouse.row):
                self.selected = i
                return True
        return False

    def render(self, canvas: Surface, rect: Rect, *, focused: bool = False) -> None:
        for i, (option, area) in enumerate(zip(self.options, self.option_areas(rect))):
            chosen = i == self.selected
            mark = "(*)" if chosen else "( )"
            style = "radio_selected on modal_bg" if chosen else "modal_fg on modal_bg"
            if chosen and focused:
                style = f"bold {style}"
            canvas.draw_text(area.x, area.y, f"{mark} {option.label}", style, area.width)


class ButtonState(Enum):
    NORMAL = "normal"
    HOVER = "hover"
    ACTIVE = "active"


class Button:
    """Clickable label. ``area`` is where it was last drawn."""

    def __init__(self, label: str, theme: str = "blue") -> None:
        self.label = label
        self.theme = theme
        self.state = ButtonState.NORMAL
        self.area: Rect | None = None

    def contains(self, column: int, row: int) -> bool:
        return self.area is not None and self.area.contains(column, row)

    def handle_mouse_event(self, mouse: MouseEvent) -> bool:
        """Update hover/pressed state. Returns True when the state changed."""
        previous = self.state
        if mouse.kind is MouseKind.MOVE:
            over = self.contains(mouse.column, mouse.row)
            if over and self.state is ButtonState.NORMAL:
                self.state = ButtonState.HOVER
            elif not over and self.state is ButtonState.HOVER:
                self.state = ButtonState.NORMAL
        elif mouse.is_left_down:
            if self.contains(mouse.column, mouse.row):
                self.state = ButtonState.ACTIVE
        elif mouse.kind is MouseKind.UP and self.state is ButtonState.ACTIVE:
            self.state = ButtonState.NORMAL
        return previous is not self.state

    def style(self) -> str:
        if self.state is ButtonState.ACTIVE:
            bg = "button_active"
        elif self.state is ButtonState.HOVER:
            bg = "button_hover"
        else:
            bg = f"button_{self.theme}"
        return f"bold button_fg on {bg}"

    def render(self, canvas: Surface, rect: Rect) -> None:
        self.area = rect
        if rect.is_empty:
            return
        style = self.style()
        canvas.fill(rect, style)
        label = self.label[: rect.width]
        canvas.draw_text(rect.x + (rect.width - len(label)) // 2, rect.y + rect.height // 2, label, style)
