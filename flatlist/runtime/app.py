"""Interactive session bootstrap.

Checks the controlling terminal, wires the session to the terminal, and runs
the event loop with the terminal restored on every exit path.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence

from ..config import Settings
from ..errors import StartupError
from ..file_tree_model import TreeStore
from ..input import KeyReader
from ..log import record
from ..opener import FileOpener
from ..session import Session
from ..terminal import ResizeWatcher, TerminalController, TerminalSurface, terminal_rows
from ..ui_theme import resolve_theme
from ..undo import UndoManager
from ..viewport import Viewport
from .loop import run_main_loop

TTY_PATH = "/dev/tty"


def build_session(
    settings: Settings,
    paths: Sequence[str],
    controller: TerminalController | None = None,
    rows: int = 24,
) -> Session:
    """Create a populated session from effective settings."""
    opener = None
    if controller is not None:
        opener = FileOpener(
            open_external=settings.open_external,
            external_opener=settings.external_opener,
            external_extensions=settings.external_extensions,
            disable_tui_mode=controller.disable_tui_mode,
            enable_tui_mode=controller.enable_tui_mode,
        )
    session = Session(
        store=TreeStore(),
        viewport=Viewport(),
        undo_manager=UndoManager(settings.backup_dir),
        opener=opener,
        theme=resolve_theme(settings.theme),
        allow_delete=settings.allow_delete,
    )
    session.viewport.resize(rows)
    session.populate(paths)
    return session


def run_browser(settings: Settings, paths: Sequence[str]) -> None:
    """Run the interactive browser; raises ``StartupError`` on fatal setup failures."""
    stdin_fd = sys.stdin.fileno()
    if not os.isatty(stdin_fd):
        raise StartupError("Can't use fl, stdin doesn't refer to a terminal")
    try:
        tty_fd = os.open(TTY_PATH, os.O_WRONLY)
    except OSError as exc:
        raise StartupError(f"Can't use fl, stdout doesn't refer to a terminal: {exc.strerror}") from exc

    resize = ResizeWatcher()
    try:
        resize.install()
        controller = TerminalController(stdin_fd, tty_fd)
        surface = TerminalSurface(tty_fd)
        session = build_session(settings, paths, controller, terminal_rows(stdin_fd))
        record(f"Started in {os.getcwd()} with {len(session.store)} entries")
        with controller.raw_mode():
            run_main_loop(
                session,
                surface,
                KeyReader(stdin_fd).read,
                resize,
                terminal_rows=lambda: terminal_rows(stdin_fd),
                prompt=controller.read_line,
            )
    finally:
        resize.uninstall()
        os.close(tty_fd)
