"""Recoverable deletion through a mirrored backup directory.

A deleted file is first copied to ``backup_root + "/" + live_path`` and only
then removed from its live location. Undo copies the backup back and leaves
the backup in place. Because the backup path depends on the live path alone,
deleting the same path twice overwrites the first backup: only the newest
deletion of a given path can be restored, even though the stack still lists
the older one.
"""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass

from .file_tree_model import Entry

logger = logging.getLogger(__name__)

DEFAULT_BACKUP_ROOT = "/tmp/fl-backup"
BACKUP_DIR_MODE = 0o700


@dataclass(frozen=True)
class DeletedEntry:
    """Undo stack record: the removed entry, its backup, and where to restore it.

    Both paths are absolute so a later change of working directory does not
    redirect the restore. The backup location itself is derived from the
    entry path as listed.
    """

    entry: Entry
    backup_path: str
    restore_path: str


def create_parent_directories(path: str, mode: int = BACKUP_DIR_MODE) -> None:
    """Create every missing directory above ``path``.

    Empty and ``.`` components are stepped over instead of created.
    """
    parts = path.split("/")[:-1]
    current = ""
    for idx, part in enumerate(parts):
        current = part if idx == 0 else f"{current}/{part}"
        if part in {"", "."}:
            continue
        if os.path.isdir(current):
            continue
        try:
            os.mkdir(current, mode)
        except FileExistsError:
            if not os.path.isdir(current):
                raise


def copy_file(source: str, destination: str) -> None:
    """Copy bytes, permission bits and timestamps from ``source``."""
    create_parent_directories(destination)
    shutil.copy2(source, destination)


class UndoManager:
    """Owns the backup mirror and the LIFO stack of deleted entries."""

    def __init__(self, backup_root: str = DEFAULT_BACKUP_ROOT) -> None:
        self.backup_root = backup_root.rstrip("/") or "/"
        self._stack: list[DeletedEntry] = []

    def __len__(self) -> int:
        return len(self._stack)

    def backup_path_for(self, live_path: str) -> str:
        return f"{self.backup_root}/{live_path}"

    def soft_delete(self, entry: Entry) -> DeletedEntry:
        """Back up ``entry`` and remove it from disk.

        Raises ``OSError`` when either step fails. The live file is only
        removed after the backup copy completed, and the stack only grows
        after both steps succeeded.
        """
        if entry.is_dir:
            raise IsADirectoryError(21, "Is a directory", entry.full_path)
        backup_path = self.backup_path_for(entry.full_path)
        if os.path.lexists(backup_path):
            os.remove(backup_path)
        copy_file(entry.full_path, backup_path)
        os.remove(entry.full_path)
        deleted = DeletedEntry(
            entry=entry,
            backup_path=os.path.abspath(backup_path),
            restore_path=os.path.abspath(entry.full_path),
        )
        self._stack.append(deleted)
        logger.info("Removed %s (backup at %s)", entry.full_path, backup_path)
        return deleted

    def undo(self) -> Entry | None:
        """Restore the most recently deleted entry.

        Returns ``None`` when there is nothing to undo. Raises ``OSError``
        when the restore copy fails; the stack is left unchanged then.
        """
        if not self._stack:
            return None
        deleted = self._stack[-1]
        copy_file(deleted.backup_path, deleted.restore_path)
        self._stack.pop()
        logger.info("Restored %s from %s", deleted.restore_path, deleted.backup_path)
        return deleted.entry
