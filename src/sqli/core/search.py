from __future__ import annotations

import logging

from sqli.core.textbuffer import TextBuffer

logger = logging.getLogger(__name__)


class SearchableBuffer(TextBuffer):
    """Text buffer with wrap-around substring search and replace.

    ``last_match`` is the (line, column) of the most recent match, or of the
    cursor when the pattern was set. An empty pattern disables every search
    and replace operation. Misses are reported as ``False``/``0``, never raised.
    """

    def __init__(self, text: str = "", *, visible_height: int = 10) -> None:
        super().__init__(text, visible_height=visible_height)
        self.search_pattern = ""
        self.last_match: tuple[int, int] = (0, 0)

    def set_text(self, text: str) -> None:
        super().set_text(text)
        self.last_match = (0, 0)

    def clear(self) -> None:
        super().clear()
        self.search_pattern = ""

    def set_search_pattern(self, pattern: str) -> None:
        self.search_pattern = pattern
        self.last_match = self.cursor

    def search_forward(self, from_start: bool = False) -> bool:
        pattern = self.search_pattern
        if not pattern or not self.lines:
            return False
        last_line, last_col = self.last_match
        if from_start:
            start_line, start_col = 0, 0
        else:
            if last_line >= len(self.lines):
                return False
            start_line, start_col = last_line, last_col + 1

        for line_idx in range(start_line, len(self.lines)):
            begin = start_col if line_idx == start_line else 0
            col = self.lines[line_idx].find(pattern, begin)
            if col != -1:
                self._record_match(line_idx, col)
                return True

        if not from_start:
            # Wrap to the top, stopping where the previous match began
            for line_idx in range(0, last_line + 1):
                line = self.lines[line_idx]
                end = max(0, last_col) if line_idx == last_line else len(line)
                col = line.find(pattern, 0, end)
                if col != -1:
                    self._record_match(line_idx, col)
                    return True
        return False

    def search_back(self, from_end: bool = False) -> bool:
        pattern = self.search_pattern
        if not pattern or not self.lines:
            return False
        last_line, last_col = self.last_match
        if from_end:
            start_line = len(self.lines) - 1
            start_col = len(self.lines[start_line])
        else:
            if last_line >= len(self.lines):
                return False
            start_line, start_col = last_line, last_col

        for line_idx in range(start_line, -1, -1):
            line = self.lines[line_idx]
            end = max(0, start_col) if line_idx == start_line else len(line)
            col = line.rfind(pattern, 0, end)
            if col != -1:
                self._record_match(line_idx, col)
                return True

        if not from_end:
            # Wrap to the bottom, stopping where the previous match began
            for line_idx in range(len(self.lines) - 1, last_line - 1, -1):
                begin = last_col + 1 if line_idx == last_line else 0
                col = self.lines[line_idx].rfind(pattern, begin)
                if col != -1:
                    self._record_match(line_idx, col)
                    return True
        return False

    def replace_next(self, replacement: str) -> bool:
        pattern = self.search_pattern
        if not pattern:
            return False
        line_idx, col = self.last_match
        if line_idx >= len(self.lines):
            return False
        line = self.lines[line_idx]
        # The buffer may have been edited since the match was recorded
        if not line.startswith(pattern, col):
            return False
        self.lines[line_idx] = line[:col] + replacement + line[col + len(pattern) :]
        end = col + len(replacement)
        self.last_match = (line_idx, end)
        self.jump(line_idx, end)
        return True

    def replace_all(self, replacement: str) -> int:
        """Replace every match, starting at ``last_match`` and wrapping once.

        Scanning resumes right after each inserted replacement, so text a
        replacement introduced is never searched again. Once the scan wraps
        it stops on reaching the starting point, whose column is shifted by
        replacements made before it on the same line.
        """
        pattern = self.search_pattern
        if not pattern:
            return 0
        anchor = self.last_match
        stop = anchor
        delta = len(replacement) - len(pattern)
        count = 0
        wrapped = False
        last_end: tuple[int, int] | None = None
        # Step back one column so a match exactly at the anchor is found first
        self.last_match = (anchor[0], anchor[1] - 1)
        while True:
            line_idx, col = self.last_match
            resume = (line_idx, col + 1)
            if not self.search_forward(False):
                break
            pos = self.last_match
            if pos < resume:
                if wrapped:
                    break
                wrapped = True
            if wrapped and pos >= stop:
                break
            if not self.replace_next(replacement):
                break
            count += 1
            if wrapped and pos[0] == stop[0]:
                stop = (stop[0], stop[1] + delta)
            last_end = self.last_match
            self.last_match = (last_end[0], last_end[1] - 1)

        if last_end is not None:
            self.last_match = last_end
            self.jump(*last_end)
        else:
            self.last_match = anchor
        logger.debug("replaced %d occurrence(s) of %r", count, pattern)
        return count

    def _record_match(self, line_idx: int, col: int) -> None:
        self.last_match = (line_idx, col)
        self.jump(line_idx, col)
