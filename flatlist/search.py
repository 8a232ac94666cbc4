"""Circular regex search over the flattened tree."""

from __future__ import annotations

import re
from collections.abc import Sequence

from .errors import PatternError
from .file_tree_model import Entry

SEARCH_FLAGS = re.IGNORECASE


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a case-insensitive search pattern or raise ``PatternError``."""
    try:
        return re.compile(pattern, SEARCH_FLAGS)
    except re.error as exc:
        raise PatternError(pattern, str(exc)) from exc


def find_next(entries: Sequence[Entry], selected_index: int | None, regex: re.Pattern[str]) -> int | None:
    """Return the first entry after ``selected_index`` whose full path matches.

    The scan wraps around the end of ``entries`` and stops before returning
    to the selected entry itself.
    """
    size = len(entries)
    if size == 0:
        return None
    start = 0 if selected_index is None else selected_index
    for step in range(1, size):
        idx = (start + step) % size
        if regex.search(entries[idx].full_path):
            return idx
    return None


class Searcher:
    """Remembers the last pattern so it can be repeated."""

    def __init__(self) -> None:
        self.last_pattern = ""
        self._compiled: re.Pattern[str] | None = None

    def find_next(self, entries: Sequence[Entry], selected_index: int | None, pattern: str | None = None) -> int | None:
        """Search for ``pattern`` (or the last pattern when ``None``).

        An empty pattern is a no-op and keeps the previous pattern. Invalid
        patterns raise ``PatternError`` without replacing the previous one.
        """
        if pattern is None:
            pattern = self.last_pattern
        if not pattern:
            return None
        if pattern != self.last_pattern or self._compiled is None:
            self._compiled = compile_pattern(pattern)
            self.last_pattern = pattern
        return find_next(entries, selected_index, self._compiled)
