"""Session context owning every piece of mutable browser state.

All user-level operations live here as methods so the key dispatcher and
tests drive the same code. Recoverable failures are logged, reported through
``status_message``, and leave the store and undo stack unchanged.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass, field

from .errors import PatternError, SpawnError
from .file_tree_model import Entry, TreeStore
from .log import describe_os_error
from .opener import FileOpener
from .search import Searcher
from .ui_theme import DEFAULT_THEME, UITheme
from .undo import UndoManager
from .viewport import ScreenSurface, Viewport

logger = logging.getLogger(__name__)

ROOT_DIRECTORY = "."
MANUAL_ORDER_NOTICE = "[manual order, s to sort]"


@dataclass
class Session:
    store: TreeStore
    viewport: Viewport
    undo_manager: UndoManager
    opener: FileOpener | None = None
    searcher: Searcher = field(default_factory=Searcher)
    theme: UITheme = DEFAULT_THEME
    allow_delete: bool = True
    status_message: str = ""
    dirty: bool = True

    @property
    def ordering_dirty(self) -> bool:
        return self.store.ordering_dirty

    def selected_entry(self) -> Entry | None:
        idx = self.viewport.selected_index
        if idx is None or idx >= len(self.store):
            return None
        return self.store[idx]

    def _report(self, message: str) -> None:
        self.status_message = message
        self.dirty = True

    def _clear_status(self) -> None:
        if self.status_message:
            self.status_message = ""
            self.dirty = True

    def populate(self, paths: Sequence[str] = ()) -> None:
        """List each of ``paths`` and then the working directory."""
        for path in paths:
            self.store.add_directory(path)
        self.store.add_directory(ROOT_DIRECTORY)
        self.viewport.center_on_middle(len(self.store))
        self.dirty = True

    def move_selection(self, delta: int) -> None:
        size = len(self.store)
        for _ in range(abs(delta)):
            if delta < 0:
                self.viewport.move_up(size)
            else:
                self.viewport.move_down(size)
        self.dirty = True

    def select_first(self) -> None:
        self.viewport.move_to_top(len(self.store))
        self.dirty = True

    def select_last(self) -> None:
        self.viewport.move_to_bottom(len(self.store))
        self.dirty = True

    def move_entry(self, direction: int) -> None:
        """Manually swap the selected entry with its neighbor."""
        idx = self.viewport.selected_index
        if idx is None:
            return
        new_idx = self.store.move(idx, direction)
        if new_idx is None:
            return
        self.viewport.select(new_idx, len(self.store))
        self.dirty = True

    def sort(self) -> None:
        self.store.sort()
        self.viewport.clamp(len(self.store))
        self.dirty = True

    def delete_selected(self) -> bool:
        """Back up and remove the selected file, keeping the selection row."""
        if not self.allow_delete:
            return False
        entry = self.selected_entry()
        if entry is None:
            return False
        idx = self.viewport.selected_index
        try:
            self.undo_manager.soft_delete(entry)
        except OSError as exc:
            detail = describe_os_error(exc)
            logger.error("Can't remove `%s`: %s", entry.full_path, detail)
            self._report(f"Delete failed: {detail}")
            return False
        self.store.pop(idx)
        self.viewport.clamp(len(self.store))
        self._report(f"Deleted {entry.full_path} (u to undo)")
        return True

    def undo(self) -> bool:
        """Restore the most recent deletion and put its entry back in the store."""
        try:
            entry = self.undo_manager.undo()
        except OSError as exc:
            detail = describe_os_error(exc)
            logger.error("Can't restore file: %s", detail)
            self._report(f"Undo failed: {detail}")
            return False
        if entry is None:
            return False
        self.store.insert(entry)
        self.viewport.clamp(len(self.store))
        self._report(f"Restored {entry.full_path}")
        return True

    def activate_selected(self) -> None:
        """Open a file, or toggle a directory between expanded and collapsed."""
        entry = self.selected_entry()
        if entry is None:
            return
        if not entry.is_dir:
            self.open_entry(entry)
        elif self.store.is_open(entry):
            self.store.collapse(entry)
        elif not self.store.expand(entry, self.viewport.selected_index + 1):
            self._report(f"Can not open dir {entry.full_path}")
        self.viewport.clamp(len(self.store))
        self.dirty = True

    def open_entry(self, entry: Entry) -> None:
        if self.opener is None:
            return
        try:
            self.opener.open(entry.full_path)
        except SpawnError as exc:
            logger.error("%s", exc)
            self._report(str(exc))
        self.dirty = True

    def change_directory(self) -> bool:
        """Make the selected directory the working directory and relist it."""
        entry = self.selected_entry()
        if entry is None:
            return False
        if not entry.is_dir:
            logger.warning("Can not change dir to %s: it is not a folder", entry.full_path)
            self._report(f"Not a folder: {entry.full_path}")
            return False
        try:
            os.chdir(entry.full_path)
        except OSError as exc:
            detail = describe_os_error(exc)
            logger.error("Can not change dir to %s: %s", entry.full_path, detail)
            self._report(f"cd failed: {detail}")
            return False
        self.store.clear()
        self.store.add_directory(ROOT_DIRECTORY)
        self.viewport.center_on_middle(len(self.store))
        self._clear_status()
        self.dirty = True
        return True

    def search(self, pattern: str | None = None) -> int | None:
        """Select the next entry matching ``pattern`` (or the last pattern)."""
        try:
            idx = self.searcher.find_next(self.store.entries, self.viewport.selected_index, pattern)
        except PatternError as exc:
            logger.error("regcomp error: %s", exc.detail)
            self._report(str(exc))
            return None
        if idx is not None:
            self.viewport.select(idx, len(self.store))
        self.dirty = True
        return idx

    def status_line(self) -> str:
        parts = [self.status_message]
        if self.ordering_dirty:
            parts.append(MANUAL_ORDER_NOTICE)
        return "  ".join(part for part in parts if part)

    def render(self, surface: ScreenSurface) -> None:
        self.viewport.render(self.store, surface, self.theme, self.status_line())
        self.dirty = False
