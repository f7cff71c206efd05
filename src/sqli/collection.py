"""Collections on disk: one directory per collection, one ``.sql`` file per query.

Two roots are scanned, the user directory and ``./sqli`` in the working
directory. Every path handed in from the UI is relative to one of those
roots and may not escape it.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path, PurePosixPath

from sqli.core.modals import EditFileValues, NewFileValues
from sqli.core.tree import Collection, CollectionScope, EntryKind, TreeEntry
from sqli.settings import UserSettings

logger = logging.getLogger(__name__)

SQL_SUFFIX = ".sql"


class CollectionError(ValueError):
    pass


def _restrict(path: Path, mode: int) -> None:
    if os.name == "posix":
        path.chmod(mode)


def resolve(settings: UserSettings, scope: CollectionScope, relative: str) -> Path:
    rel = PurePosixPath(relative.replace("\\", "/"))
    if rel.is_absolute() or not rel.parts:
        raise CollectionError(f"Invalid path: {relative!r}")
    if any(part == ".." for part in rel.parts):
        raise CollectionError(f"Parent directory references are not allowed: {relative!r}")
    return settings.base_dir(scope).joinpath(*rel.parts)


def _scan(base: Path, scope: CollectionScope) -> list[Collection]:
    if not base.is_dir():
        return []
    found: list[Collection] = []
    for folder in sorted(base.iterdir()):
        if not folder.is_dir() or folder.name.startswith("."):
            continue
        files = sorted(p.name for p in folder.iterdir() if p.is_file() and p.suffix == SQL_SUFFIX)
        found.append(Collection(folder.name, scope, files))
    return found


def load_collections(settings: UserSettings) -> list[Collection]:
    collections = _scan(settings.user_dir, CollectionScope.USER)
    collections += _scan(settings.workspace_dir, CollectionScope.LOCAL)
    logger.debug("found %d collection(s)", len(collections))
    return collections


def load_sql(settings: UserSettings, entry: TreeEntry) -> str:
    if entry.is_folder:
        raise CollectionError("Cannot open a folder")
    path = resolve(settings, entry.scope, entry.relative_path)
    if not path.is_file():
        raise CollectionError(f"SQL file not found: {path}")
    return path.read_text(encoding="utf-8")


def save_sql(settings: UserSettings, entry: TreeEntry, text: str) -> Path:
    if entry.is_folder:
        raise CollectionError("Cannot save content to a folder")
    path = resolve(settings, entry.scope, entry.relative_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    _restrict(path, 0o600)
    logger.info("saved %s", path)
    return path


def _with_suffix(name: str) -> str:
    return name if name.endswith(SQL_SUFFIX) else name + SQL_SUFFIX


def create_entry(settings: UserSettings, values: NewFileValues) -> TreeEntry:
    """Create an empty query file or a collection folder."""
    name = values.name.strip().strip("/")
    if values.kind is EntryKind.FOLDER:
        if "/" in name:
            raise CollectionError("Collections cannot be nested")
        entry = TreeEntry(EntryKind.FOLDER, name, values.scope)
    else:
        if "/" in name:
            collection, _, file = name.rpartition("/")
        elif values.parent_folder:
            collection, file = values.parent_folder, name
        else:
            raise CollectionError("Choose a collection for the new file")
        entry = TreeEntry(EntryKind.FILE, collection, values.scope, _with_suffix(file))

    target = resolve(settings, entry.scope, entry.relative_path)
    if target.exists():
        raise CollectionError("File or folder already exists")
    if entry.is_folder:
        target.mkdir(parents=True)
        _restrict(target, 0o700)
    else:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text("", encoding="utf-8")
        _restrict(target, 0o600)
    logger.info("created %s", target)
    return entry


def rename_entry(settings: UserSettings, entry: TreeEntry, values: EditFileValues) -> TreeEntry:
    """Rename a file within its collection, or rename/move a collection folder."""
    name = values.name.strip().strip("/")
    if "/" in name:
        raise CollectionError("Names cannot contain '/'")
    if entry.is_folder:
        renamed = TreeEntry(EntryKind.FOLDER, name, values.scope)
    else:
        renamed = TreeEntry(EntryKind.FILE, entry.collection, entry.scope, _with_suffix(name))

    source = resolve(settings, entry.scope, entry.relative_path)
    target = resolve(settings, renamed.scope, renamed.relative_path)
    if not source.exists():
        raise CollectionError("Source file or folder does not exist")
    if target.exists():
        raise CollectionError("Target file or folder already exists")
    target.parent.mkdir(parents=True, exist_ok=True)
    # Across scopes this is a copy followed by a delete
    shutil.move(str(source), str(target))
    _restrict(target, 0o700 if target.is_dir() else 0o600)
    logger.info("renamed %s -> %s", source, target)
    return renamed
