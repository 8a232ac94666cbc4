"""Persistent JSON config helpers.

Reads the backup root, opener preferences, and the delete switch.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_dir

from .undo import DEFAULT_BACKUP_ROOT

APP_NAME = "flatlist"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

DEFAULT_EXTERNAL_OPENER = "xdg-open"
DEFAULT_EXTERNAL_EXTENSIONS = (".pdf",)


@dataclass(frozen=True)
class Settings:
    """Effective runtime options after merging config file and CLI flags."""

    backup_dir: str = DEFAULT_BACKUP_ROOT
    open_external: bool = False
    allow_delete: bool = True
    external_opener: str = DEFAULT_EXTERNAL_OPENER
    external_extensions: tuple[str, ...] = field(default=DEFAULT_EXTERNAL_EXTENSIONS)
    theme: str | None = None


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def _string(value: object, default: str) -> str:
    if not isinstance(value, str):
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _boolean(value: object, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def _extensions(value: object) -> tuple[str, ...]:
    if not isinstance(value, list):
        return DEFAULT_EXTERNAL_EXTENSIONS
    return tuple(item.lower() for item in value if isinstance(item, str) and item)


def load_settings() -> Settings:
    """Build ``Settings`` from the config file, dropping invalid values."""
    data = load_config()
    theme = data.get("theme")
    return Settings(
        backup_dir=_string(data.get("backup_dir"), DEFAULT_BACKUP_ROOT),
        open_external=_boolean(data.get("open_external"), False),
        allow_delete=_boolean(data.get("allow_delete"), True),
        external_opener=_string(data.get("external_opener"), DEFAULT_EXTERNAL_OPENER),
        external_extensions=_extensions(data.get("external_extensions")),
        theme=theme.strip() if isinstance(theme, str) and theme.strip() else None,
    )
