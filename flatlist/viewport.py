"""Selection and scrolling over the flattened tree.

``Viewport`` never holds entries itself; callers pass the store size (or the
store, for rendering) so the selection can be clamped after every change.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from .file_tree_model import Entry, TreeStore
from .ui_theme import DEFAULT_THEME, UITheme


class ScreenSurface(Protocol):
    def write_screen(self, lines: list[str]) -> None: ...


@dataclass
class Viewport:
    """Selected row, first visible row, and number of visible tree rows."""

    height: int = 1
    selected_index: int | None = None
    offset: int = 0

    def resize(self, rows: int) -> None:
        """Adopt a new terminal height, reserving one row for status."""
        self.height = max(1, rows - 1)

    def clamp(self, size: int) -> None:
        if size <= 0:
            self.selected_index = None
            self.offset = 0
            return
        if self.selected_index is None:
            self.selected_index = 0
        self.selected_index = max(0, min(self.selected_index, size - 1))
        self.offset = max(0, min(self.offset, size - 1))

    def move_up(self, size: int) -> None:
        self.clamp(size)
        if self.selected_index is not None and self.selected_index > 0:
            self.selected_index -= 1

    def move_down(self, size: int) -> None:
        self.clamp(size)
        if self.selected_index is not None and self.selected_index < size - 1:
            self.selected_index += 1

    def move_to_top(self, size: int) -> None:
        self.selected_index = 0 if size > 0 else None
        self.clamp(size)

    def move_to_bottom(self, size: int) -> None:
        self.selected_index = size - 1 if size > 0 else None
        self.clamp(size)

    def select(self, index: int, size: int) -> None:
        self.selected_index = index
        self.clamp(size)

    def scroll_to_keep_visible(self) -> None:
        if self.selected_index is None:
            self.offset = 0
            return
        if self.selected_index < self.offset:
            self.offset = self.selected_index
        if self.selected_index >= self.offset + self.height:
            self.offset = self.selected_index - self.height + 1

    def center_on_middle(self, size: int) -> None:
        """Place the selection mid-store and center it on screen."""
        if size <= 0:
            self.selected_index = None
            self.offset = 0
            return
        self.selected_index = size // 2
        if size <= self.height:
            self.offset = 0
        else:
            self.offset = max(0, self.selected_index - self.height // 2)

    def visible_range(self, size: int) -> range:
        start = max(0, min(self.offset, size))
        return range(start, min(size, start + self.height))

    def render(
        self,
        store: TreeStore,
        surface: ScreenSurface,
        theme: UITheme = DEFAULT_THEME,
        status: str = "",
    ) -> None:
        """Write the visible window of ``store`` plus one status row."""
        self.clamp(len(store))
        self.scroll_to_keep_visible()
        lines = [
            render_entry_line(store[idx], theme, selected=idx == self.selected_index)
            for idx in self.visible_range(len(store))
        ]
        if status:
            lines.append(f"{theme.status}{status}{theme.reset}")
        surface.write_screen(lines)


def render_entry_line(entry: Entry, theme: UITheme, selected: bool = False) -> str:
    """Format one tree row with its path prefix and a kind-colored name."""
    line = f"{entry.display_prefix}{theme.color_for(entry.kind)}{entry.name}{theme.reset}"
    if selected:
        return f"{theme.reverse}{line}"
    return line
