from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class CollectionScope(Enum):
    USER = "user"  # the per-user config directory
    LOCAL = "local"  # ./sqli under the working directory


class EntryKind(Enum):
    FILE = "file"
    FOLDER = "folder"


@dataclass
class Collection:
    """A folder of saved queries."""

    name: str
    scope: CollectionScope
    files: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class TreeEntry:
    kind: EntryKind
    collection: str
    scope: CollectionScope
    file: str | None = None

    @property
    def is_folder(self) -> bool:
        return self.kind is EntryKind.FOLDER

    @property
    def name(self) -> str:
        return self.file if self.file is not None else self.collection

    @property
    def relative_path(self) -> str:
        """Path below the scope's base directory."""
        if self.file is None:
            return self.collection
        return f"{self.collection}/{self.file}"


@dataclass(frozen=True)
class TreeRow:
    entry: TreeEntry
    depth: int
    expanded: bool = False


class CollectionTree:
    """Cursor over collections and their files, folders expandable in place.

    Only expanded folders contribute their files to ``visible_rows``; the
    cursor is an index into those rows and always stays within them.
    """

    def __init__(self, collections: list[Collection] | None = None) -> None:
        self.collections: list[Collection] = []
        self.expanded: set[tuple[str, CollectionScope]] = set()
        self.cursor = 0
        self.scroll_top = 0
        self.set_collections(collections or [])

    def set_collections(self, collections: list[Collection]) -> None:
        """Replace the contents, keeping expansion and selection where possible."""
        previous = self.selected()
        self.collections = sorted(collections, key=lambda c: (c.scope.value, c.name.lower()))
        known = {(c.name, c.scope) for c in self.collections}
        self.expanded &= known
        self.cursor = 0
        if previous is not None:
            self.select_entry(previous)
        self._clamp()

    def visible_rows(self) -> list[TreeRow]:
        rows: list[TreeRow] = []
        for c in self.collections:
            key = (c.name, c.scope)
            is_open = key in self.expanded
            rows.append(TreeRow(TreeEntry(EntryKind.FOLDER, c.name, c.scope), 0, is_open))
            if is_open:
                for file in sorted(c.files):
                    rows.append(TreeRow(TreeEntry(EntryKind.FILE, c.name, c.scope, file), 1))
        return rows

    def selected(self) -> TreeEntry | None:
        rows = self.visible_rows()
        if 0 <= self.cursor < len(rows):
            return rows[self.cursor].entry
        return None

    def select_row(self, index: int) -> TreeEntry | None:
        rows = self.visible_rows()
        if not 0 <= index < len(rows):
            return None
        self.cursor = index
        return rows[index].entry

    def select_entry(self, entry: TreeEntry) -> bool:
        if entry.file is not None:
            self.expanded.add((entry.collection, entry.scope))
        for i, row in enumerate(self.visible_rows()):
            if row.entry == entry:
                self.cursor = i
                return True
        return False

    def up(self) -> None:
        if self.cursor > 0:
            self.cursor -= 1

    def down(self) -> None:
        if self.cursor < len(self.visible_rows()) - 1:
            self.cursor += 1

    def left(self) -> None:
        entry = self.selected()
        if entry is None:
            return
        key = (entry.collection, entry.scope)
        if entry.is_folder:
            self.expanded.discard(key)
        else:
            self.select_entry(TreeEntry(EntryKind.FOLDER, entry.collection, entry.scope))

    def right(self) -> None:
        entry = self.selected()
        if entry is not None and entry.is_folder:
            self.expanded.add((entry.collection, entry.scope))

    def toggle(self) -> None:
        entry = self.selected()
        if entry is None or not entry.is_folder:
            return
        key = (entry.collection, entry.scope)
        if key in self.expanded:
            self.expanded.discard(key)
        else:
            self.expanded.add(key)
        self._clamp()

    def scroll_into_view(self, height: int) -> None:
        height = max(1, height)
        if self.cursor < self.scroll_top:
            self.scroll_top = self.cursor
        elif self.cursor >= self.scroll_top + height:
            self.scroll_top = self.cursor - height + 1

    def _clamp(self) -> None:
        count = len(self.visible_rows())
        self.cursor = max(0, min(self.cursor, count - 1))
        self.scroll_top = min(self.scroll_top, self.cursor)
