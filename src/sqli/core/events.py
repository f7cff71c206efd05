"""Input events consumed by the navigation engine.

The terminal front end converts whatever its event source produces into these
small immutable values, so nothing in ``sqli.core`` depends on Textual.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

# Named key codes. Printable keys use the character itself as their code.
ENTER = "enter"
ESCAPE = "escape"
TAB = "tab"
BACKSPACE = "backspace"
DELETE = "delete"
LEFT = "left"
RIGHT = "right"
UP = "up"
DOWN = "down"
HOME = "home"
END = "end"
PAGE_UP = "pageup"
PAGE_DOWN = "pagedown"
SPACE = " "

CTRL = "ctrl"
SHIFT = "shift"
ALT = "alt"

_NAMED_ALIASES = {
    "space": SPACE,
    "return": ENTER,
    "esc": ESCAPE,
    "backtab": TAB,
    "page_up": PAGE_UP,
    "page_down": PAGE_DOWN,
}


@dataclass(frozen=True)
class KeyEvent:
    code: str
    modifiers: frozenset[str] = field(default_factory=frozenset)

    @property
    def ctrl(self) -> bool:
        return CTRL in self.modifiers

    @property
    def shift(self) -> bool:
        return SHIFT in self.modifiers

    @property
    def alt(self) -> bool:
        return ALT in self.modifiers

    @property
    def char(self) -> str | None:
        """The printable character for this key, if it inserts text."""
        if len(self.code) == 1 and not self.ctrl and not self.alt:
            return self.code
        return None

    def is_ctrl(self, code: str) -> bool:
        return self.ctrl and self.code == code


def key(code: str, *modifiers: str) -> KeyEvent:
    """Build a KeyEvent, e.g. ``key("f", CTRL)``."""
    return KeyEvent(code, frozenset(modifiers))


def key_from_name(name: str, character: str | None = None) -> KeyEvent:
    """Translate a terminal key name like ``"ctrl+s"`` or ``"shift+tab"``.

    ``character`` is the printable character the terminal reported, used for
    punctuation keys whose names (``"slash"``, ``"full_stop"``) differ from the
    text they insert.
    """
    parts = name.split("+")
    base = parts[-1]
    mods = {m for m in parts[:-1] if m in (CTRL, SHIFT, ALT)}
    if base == "backtab":
        mods.add(SHIFT)
    if base == "@" and CTRL in mods:
        # Most terminals report ctrl+space as ctrl+@
        base = SPACE
    base = _NAMED_ALIASES.get(base, base)
    if len(base) != 1 and character and len(character) == 1 and character.isprintable():
        if not mods - {SHIFT}:
            return KeyEvent(character)
    if len(base) == 1 and not mods - {SHIFT}:
        # Shifted letters arrive already upper-cased
        return KeyEvent(base)
    return KeyEvent(base, frozenset(mods))


class MouseKind(Enum):
    DOWN = "down"
    UP = "up"
    MOVE = "move"
    SCROLL_UP = "scroll_up"
    SCROLL_DOWN = "scroll_down"


LEFT_BUTTON = 1


@dataclass(frozen=True)
class MouseEvent:
    kind: MouseKind
    column: int
    row: int
    button: int = LEFT_BUTTON

    @property
    def is_left_down(self) -> bool:
        return self.kind is MouseKind.DOWN and self.button == LEFT_BUTTON


def mouse_down(column: int, row: int) -> MouseEvent:
    return MouseEvent(MouseKind.DOWN, column, row)


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


Event = Tick | KeyEvent | MouseEvent | Resize
