"""Ordered, flattened store of visible tree entries.

The store keeps a plain list instead of parent/child links. Sorting by
``sort_key`` places every directory immediately before its own children, so a
full re-sort after each structural change keeps expanded subtrees contiguous.

Manual reordering via ``move`` deliberately breaks that order and sets
``ordering_dirty``. Nothing reconciles the two: the next expand, collapse,
insert or explicit ``sort`` re-sorts and the manual order is lost.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator

from ..log import describe_os_error
from .fs import list_directory
from .types import Entry, sort_key

logger = logging.getLogger(__name__)

DirectoryLister = Callable[[str], list[Entry]]


class TreeStore:
    """Flattened view of every currently listed entry."""

    def __init__(self, lister: DirectoryLister = list_directory) -> None:
        self._entries: list[Entry] = []
        self._lister = lister
        self.ordering_dirty = False

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> Entry:
        return self._entries[index]

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries)

    @property
    def entries(self) -> tuple[Entry, ...]:
        return tuple(self._entries)

    def index_of(self, full_path: str) -> int | None:
        for idx, entry in enumerate(self._entries):
            if entry.full_path == full_path:
                return idx
        return None

    def sort(self) -> None:
        """Re-establish subtree-contiguous ordering."""
        self._entries.sort(key=sort_key)
        self.ordering_dirty = False

    def add_directory(self, path: str, insert_at: int | None = None) -> bool:
        """List ``path`` and merge its children into the store.

        Children are inserted at ``insert_at`` (appended when ``None`` or out
        of range) and the store is re-sorted. Children already present are
        skipped. On ``OSError`` the store is left unchanged and ``False`` is
        returned after logging the failure.
        """
        try:
            children = self._lister(path)
        except OSError as exc:
            logger.error("Can not open dir %s: %s", path, describe_os_error(exc))
            return False

        known = {entry.full_path for entry in self._entries}
        fresh: list[Entry] = []
        for child in children:
            if child.full_path in known:
                continue
            known.add(child.full_path)
            fresh.append(child)

        if insert_at is None or insert_at < 0 or insert_at > len(self._entries):
            insert_at = len(self._entries)
        self._entries[insert_at:insert_at] = fresh
        self.sort()
        return True

    def expand(self, entry: Entry, insert_at: int | None = None) -> bool:
        return self.add_directory(entry.full_path, insert_at)

    def collapse(self, entry: Entry) -> int:
        """Drop every entry below ``entry`` and return how many were removed."""
        prefix = entry.full_path + "/"
        kept = [item for item in self._entries if not item.full_path.startswith(prefix)]
        removed = len(self._entries) - len(kept)
        self._entries = kept
        self.sort()
        return removed

    def is_open(self, entry: Entry) -> bool:
        prefix = entry.full_path + "/"
        return any(item.full_path.startswith(prefix) for item in self._entries)

    def move(self, index: int, direction: int) -> int | None:
        """Swap ``index`` with its neighbor and return the entry's new index.

        Returns ``None`` when the neighbor would fall outside the store.
        """
        target = index - 1 if direction < 0 else index + 1
        if not (0 <= index < len(self._entries)) or not (0 <= target < len(self._entries)):
            return None
        entries = self._entries
        entries[index], entries[target] = entries[target], entries[index]
        self.ordering_dirty = True
        return target

    def insert(self, entry: Entry) -> None:
        """Add ``entry`` back into the store at its sorted position."""
        if self.index_of(entry.full_path) is None:
            self._entries.append(entry)
        self.sort()

    def pop(self, index: int) -> Entry:
        return self._entries.pop(index)

    def clear(self) -> None:
        self._entries.clear()
        self.ordering_dirty = False
