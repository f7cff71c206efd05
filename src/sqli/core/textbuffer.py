from __future__ import annotations

from sqli.core import events
from sqli.core.events import KeyEvent

INDENT = "    "


class TextBuffer:
    """Line-oriented editable text with a cursor.

    Columns are character offsets (Python ``str`` indices), never bytes.
    ``scroll_top`` and ``scroll_left`` are the first line and column shown in a
    viewport of ``visible_height`` rows by ``visible_width`` columns; every
    cursor move keeps the cursor inside it.
    """

    def __init__(self, text: str = "", *, visible_height: int = 10, visible_width: int = 80) -> None:
        self.lines: list[str] = text.split("\n")
        self._row = 0
        self._col = 0
        self.scroll_top = 0
        self.scroll_left = 0
        self.visible_height = max(1, visible_height)
        self.visible_width = max(1, visible_width)

    # ---- Content ----
    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    def content(self) -> str:
        """Text with trailing blank lines removed."""
        last = len(self.lines)
        while last > 0 and not self.lines[last - 1].strip():
            last -= 1
        return "\n".join(self.lines[:last])

    def set_text(self, text: str) -> None:
        self.lines = text.split("\n")
        self._row = 0
        self._col = 0
        self.scroll_top = 0
        self.scroll_left = 0

    def clear(self) -> None:
        self.set_text("")

    def is_empty(self) -> bool:
        return not self.content()

    # ---- Cursor ----
    @property
    def cursor(self) -> tuple[int, int]:
        return self._row, self._col

    def jump(self, row: int, col: int) -> None:
        if not self.lines:
            self._row = self._col = 0
            return
        self._row = max(0, min(row, len(self.lines) - 1))
        self._col = max(0, min(col, len(self.lines[self._row])))
        self.scroll_to_cursor()

    def set_visible_height(self, height: int) -> None:
        self.visible_height = max(1, height)
        self.scroll_to_cursor()

    def set_viewport(self, height: int, width: int) -> None:
        self.visible_height = max(1, height)
        self.visible_width = max(1, width)
        self.scroll_to_cursor()

    def scroll_to_cursor(self) -> None:
        if self._row < self.scroll_top:
            self.scroll_top = self._row
        elif self._row >= self.scroll_top + self.visible_height:
            self.scroll_top = self._row - self.visible_height + 1
        if self._col < self.scroll_left:
            self.scroll_left = self._col
        elif self._col >= self.scroll_left + self.visible_width:
            self.scroll_left = self._col - self.visible_width + 1

    def move_left(self) -> None:
        if self._col > 0:
            self._col -= 1
        elif self._row > 0:
            self._row -= 1
            self._col = len(self.lines[self._row])
        self.scroll_to_cursor()

    def move_right(self) -> None:
        if self._col < len(self._line()):
            self._col += 1
        elif self._row < len(self.lines) - 1:
            self._row += 1
            self._col = 0
        self.scroll_to_cursor()

    def move_up(self, rows: int = 1) -> None:
        self.jump(self._row - rows, self._col)

    def move_down(self, rows: int = 1) -> None:
        self.jump(self._row + rows, self._col)

    def move_home(self) -> None:
        self._col = 0
        self.scroll_to_cursor()

    def move_end(self) -> None:
        self._col = len(self._line())
        self.scroll_to_cursor()

    def move_top(self) -> None:
        self.jump(0, 0)

    def move_bottom(self) -> None:
        self.jump(len(self.lines) - 1, len(self.lines[-1]) if self.lines else 0)

    # ---- Editing ----
    def insert_char(self, ch: str) -> None:
        self._ensure_line()
        line = self.lines[self._row]
        self.lines[self._row] = line[: self._col] + ch + line[self._col :]
        self._col += len(ch)
        self.scroll_to_cursor()

    def insert_str(self, text: str) -> None:
        for i, chunk in enumerate(text.split("\n")):
            if i > 0:
                self.newline()
            if chunk:
                self.insert_char(chunk)

    def newline(self) -> None:
        self._ensure_line()
        line = self.lines[self._row]
        self.lines[self._row] = line[: self._col]
        self.lines.insert(self._row + 1, line[self._col :])
        self._row += 1
        self._col = 0
        self.scroll_to_cursor()

    def backspace(self) -> bool:
        if not self.lines:
            return False
        if self._col > 0:
            line = self.lines[self._row]
            self.lines[self._row] = line[: self._col - 1] + line[self._col :]
            self._col -= 1
            self.scroll_to_cursor()
            return True
        if self._row == 0:
            return False
        prev = self.lines[self._row - 1]
        self.lines[self._row - 1] = prev + self.lines.pop(self._row)
        self._row -= 1
        self._col = len(prev)
        self.scroll_to_cursor()
        return True

    def delete(self) -> bool:
        if not self.lines:
            return False
        line = self.lines[self._row]
        if self._col < len(line):
            self.lines[self._row] = line[: self._col] + line[self._col + 1 :]
            return True
        if self._row >= len(self.lines) - 1:
            return False
        self.lines[self._row] = line + self.lines.pop(self._row + 1)
        return True

    def delete_line(self) -> None:
        """Remove the text of the cursor line, leaving the line itself."""
        if not self.lines:
            return
        self.lines[self._row] = ""
        self._col = 0
        self.scroll_to_cursor()

    def replace_line(self, row: int, text: str) -> None:
        self.lines[row] = text

    def input(self, key: KeyEvent) -> bool:
        """Apply one editing key. Returns False when the key is not an edit."""
        code = key.code
        if key.char is not None:
            self.insert_char(key.char)
        elif code == events.ENTER:
            self.newline()
        elif code == events.TAB and not key.shift:
            self.insert_char(INDENT)
        elif code == events.BACKSPACE:
            self.backspace()
        elif code == events.DELETE:
            self.delete()
        elif code == events.LEFT:
            self.move_left()
        elif code == events.RIGHT:
            self.move_right()
        elif code == events.UP:
            self.move_up()
        elif code == events.DOWN:
            self.move_down()
        elif code == events.HOME and key.ctrl:
            self.move_top()
        elif code == events.HOME:
            self.move_home()
        elif code == events.END and key.ctrl:
            self.move_bottom()
        elif code == events.END:
            self.move_end()
        elif code == events.PAGE_UP:
            self.move_up(self.visible_height)
        elif code == events.PAGE_DOWN:
            self.move_down(self.visible_height)
        elif key.is_ctrl("u"):
            self.delete_line()
        else:
            return False
        return True

    def _line(self) -> str:
        if not self.lines:
            return ""
        return self.lines[self._row]

    def _ensure_line(self) -> None:
        if not self.lines:
            self.lines.append("")
            self._row = self._col = 0
