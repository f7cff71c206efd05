from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from sqli.core.modals import EditFileValues
from sqli.core.tree import TreeEntry


class CommandKind(Enum):
    EXECUTE_QUERY = "execute_query"
    SAVE_QUERY = "save_query"
    OPEN_FILE = "open_file"  # payload: TreeEntry
    CREATE_ENTRY = "create_entry"  # payload: NewFileValues
    RENAME_ENTRY = "rename_entry"  # payload: RenameRequest
    CONNECT_WITH_PASSWORD = "connect_with_password"
    QUIT = "quit"


@dataclass(frozen=True)
class Command:
    """Side effect requested by the engine and carried out by the app shell."""

    kind: CommandKind
    payload: object = None


@dataclass(frozen=True)
class RenameRequest:
    entry: TreeEntry
    values: EditFileValues
