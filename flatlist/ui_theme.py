"""ANSI palette used when rendering tree rows."""

from __future__ import annotations

from dataclasses import dataclass

from .file_tree_model import EntryKind


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by the viewport renderer."""

    name: str
    reverse: str
    reset: str
    tree_dir: str
    tree_symlink: str
    tree_file_default: str
    status: str

    def color_for(self, kind: EntryKind) -> str:
        if kind is EntryKind.DIR:
            return self.tree_dir
        if kind is EntryKind.SYMLINK:
            return self.tree_symlink
        return self.tree_file_default


DEFAULT_THEME = UITheme(
    name="default",
    reverse="\033[7m",
    reset="\033[0m",
    tree_dir="\033[34m",
    tree_symlink="\033[36m",
    tree_file_default="",
    status="\033[2m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reverse="\033[7m",
    reset="\033[0m",
    tree_dir="",
    tree_symlink="",
    tree_file_default="",
    status="",
)

_THEMES: dict[str, UITheme] = {theme.name: theme for theme in (DEFAULT_THEME, PLAIN_THEME)}


def available_theme_names() -> list[str]:
    return sorted(_THEMES)


def resolve_theme(name: str | None) -> UITheme:
    """Return the named theme, falling back to ``DEFAULT_THEME``."""
    if name is None:
        return DEFAULT_THEME
    return _THEMES.get(name.strip().lower(), DEFAULT_THEME)
