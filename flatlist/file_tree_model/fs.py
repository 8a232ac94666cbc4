"""Filesystem scanning for flattened tree entries."""

from __future__ import annotations

import os

from .types import Entry, EntryKind

PARENT_NAME = ".."


def entry_kind(child: os.DirEntry) -> EntryKind:
    """Classify a scandir entry without following symlinks."""
    try:
        if child.is_symlink():
            return EntryKind.SYMLINK
        if child.is_dir(follow_symlinks=False):
            return EntryKind.DIR
        if child.is_file(follow_symlinks=False):
            return EntryKind.FILE
    except OSError:
        pass
    return EntryKind.OTHER


def list_directory(path: str) -> list[Entry]:
    """List the immediate children of ``path`` as entries.

    The ``..`` link is reported like ``readdir`` does, the ``.`` self link is
    not. Raises ``OSError`` when the directory cannot be opened or read.
    """
    entries = [Entry(PARENT_NAME, EntryKind.DIR, path)]
    with os.scandir(path) as children:
        for child in children:
            entries.append(Entry(child.name, entry_kind(child), path))
    return entries
