"""Launch helpers for opening files in an editor or the desktop opener.

The internal path runs ``$EDITOR`` while temporarily leaving raw/alternate
screen TUI mode and waits for it. The external path hands the file to the
desktop opener in its own session without waiting.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from collections.abc import Callable, Sequence

from .errors import SpawnError

logger = logging.getLogger(__name__)


def spawn_and_wait(argv: Sequence[str]) -> int:
    """Run ``argv`` in the foreground and return its exit status."""
    try:
        completed = subprocess.run(list(argv), check=False)
    except OSError as exc:
        raise SpawnError(f"Failed to launch {argv[0]}: {exc}") from exc
    return completed.returncode


def spawn_detached(argv: Sequence[str]) -> subprocess.Popen:
    """Start ``argv`` in a new session with its output discarded."""
    try:
        return subprocess.Popen(
            list(argv),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as exc:
        raise SpawnError(f"Failed to launch {argv[0]}: {exc}") from exc


def editor_command() -> list[str] | None:
    """Return ``$EDITOR`` split into argv, or ``None`` when unset/empty."""
    editor_env = os.environ.get("EDITOR", "").strip()
    if not editor_env:
        return None
    cmd = shlex.split(editor_env)
    return cmd or None


def launch_editor(
    target: str,
    disable_tui_mode: Callable[[], None],
    enable_tui_mode: Callable[[], None],
    spawn: Callable[[Sequence[str]], int] = spawn_and_wait,
) -> int:
    """Edit ``target`` with ``$EDITOR`` and return the editor's exit status.

    Raises ``SpawnError`` when no editor is configured or it cannot start.
    The TUI is re-entered on every path once it has been left.
    """
    cmd = editor_command()
    if cmd is None:
        raise SpawnError("Can not find env `EDITOR`")

    disable_tui_mode()
    try:
        return spawn([*cmd, target])
    finally:
        enable_tui_mode()


class FileOpener:
    """Decide between the editor and the external opener for a path."""

    def __init__(
        self,
        open_external: bool,
        external_opener: str,
        external_extensions: Sequence[str],
        disable_tui_mode: Callable[[], None],
        enable_tui_mode: Callable[[], None],
        spawn: Callable[[Sequence[str]], int] = spawn_and_wait,
        spawn_background: Callable[[Sequence[str]], object] = spawn_detached,
    ) -> None:
        self.open_external = open_external
        self.external_opener = external_opener
        self.external_extensions = tuple(ext.lower() for ext in external_extensions)
        self._disable_tui_mode = disable_tui_mode
        self._enable_tui_mode = enable_tui_mode
        self._spawn = spawn
        self._spawn_background = spawn_background

    def prefers_external(self, path: str) -> bool:
        return self.open_external or path.lower().endswith(self.external_extensions)

    def open_externally(self, path: str) -> None:
        argv = [*shlex.split(self.external_opener), path]
        self._spawn_background(argv)
        logger.info("Opened %s with %s", path, argv[0])

    def open(self, path: str) -> int | None:
        """Open ``path`` and return the editor exit status when one was waited on.

        A missing ``$EDITOR`` falls back to the external opener.
        """
        if self.prefers_external(path):
            self.open_externally(path)
            return None
        if editor_command() is None:
            logger.warning("Can not find env `EDITOR`, opening %s externally", path)
            self.open_externally(path)
            return None
        status = launch_editor(path, self._disable_tui_mode, self._enable_tui_mode, self._spawn)
        if status != 0:
            logger.warning("Editor exited with status %d for %s", status, path)
        return status
