"""Domain model for the flattened directory tree.

This package contains non-UI tree primitives:
- entry datatypes and the subtree-contiguous sort key
- filesystem listing helpers
- the ordered ``TreeStore``
"""

from __future__ import annotations

from .fs import PARENT_NAME, entry_kind, list_directory
from .store import DirectoryLister, TreeStore
from .types import Entry, EntryKind, sort_key

__all__ = [
    "Entry",
    "EntryKind",
    "sort_key",
    "PARENT_NAME",
    "entry_kind",
    "list_directory",
    "DirectoryLister",
    "TreeStore",
]
