"""Error taxonomy for recoverable and fatal failures.

Filesystem failures use the builtin ``OSError`` family. The classes here cover
the remaining cases: child-process launch, search expressions, and startup.
"""

from __future__ import annotations


class FlatlistError(Exception):
    """Base class for flatlist-specific errors."""


class SpawnError(FlatlistError):
    """An external editor or opener could not be launched."""


class PatternError(FlatlistError):
    """A search expression failed to compile."""

    def __init__(self, pattern: str, detail: str) -> None:
        super().__init__(f"invalid pattern {pattern!r}: {detail}")
        self.pattern = pattern
        self.detail = detail


class StartupError(FlatlistError):
    """Fatal condition detected before the interactive loop starts."""
