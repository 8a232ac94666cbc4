"""Domain datatypes for flattened file tree entries."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass


class EntryKind(enum.Enum):
    """Filesystem object type as reported by the directory listing."""

    FILE = "file"
    DIR = "dir"
    SYMLINK = "symlink"
    OTHER = "other"


@dataclass(frozen=True)
class Entry:
    """One listed filesystem object tagged with the directory that produced it."""

    name: str
    kind: EntryKind
    containing_path: str

    @property
    def full_path(self) -> str:
        return f"{self.containing_path}/{self.name}"

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIR

    @property
    def display_prefix(self) -> str:
        """Containing path as shown on screen: no ``./`` prefix, empty for ``.``."""
        path = self.containing_path
        if path.startswith("./"):
            path = path[2:]
        if path == ".":
            return ""
        return f"{path}/"


def sort_key(entry: Entry) -> tuple[bytes, ...]:
    """Order entries so every directory directly precedes its own subtree.

    Paths compare component by component on raw bytes, which is plain
    lexicographic order with ``/`` ranked below every other byte.
    """
    return tuple(os.fsencode(entry.full_path).split(b"/"))


__all__ = [
    "Entry",
    "EntryKind",
    "sort_key",
]
