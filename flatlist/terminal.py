"""Terminal control helpers for the TUI session.

Owns raw-mode lifecycle, alternate-screen switching, the line prompt used by
search, full-screen redraws, and resize notification.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import signal
import termios
import tty

from .errors import StartupError

ENTER_TUI = b"\x1b[?1049h\x1b[?25l\x1b[2J\x1b[H"
LEAVE_TUI = b"\x1b[?25h\x1b[?1049l"
SHOW_CURSOR = b"\x1b[?25h"
HIDE_CURSOR = b"\x1b[?25l"
CLEAR_HOME = "\x1b[2J\x1b[H"
BOTTOM_ROW = b"\x1b[999;1H\x1b[2K"


class TerminalController:
    """Manage raw/cooked transitions around the alternate screen."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Capture tty state and bind stdin/stdout file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)
        self.tui_active = False

    def _set_raw(self) -> None:
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)

    def _set_cooked(self) -> None:
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with a hidden cursor."""
        if self.tui_active:
            return
        self._set_raw()
        os.write(self.stdout_fd, ENTER_TUI)
        self.tui_active = True

    def disable_tui_mode(self) -> None:
        """Restore the cooked terminal and the main screen buffer."""
        if not self.tui_active:
            return
        os.write(self.stdout_fd, LEAVE_TUI)
        self._set_cooked()
        self.tui_active = False

    def read_line(self, prompt: str, max_bytes: int = 4096) -> str:
        """Prompt on the bottom of the alternate screen and read one cooked line."""
        os.write(self.stdout_fd, BOTTOM_ROW + prompt.encode("utf-8") + SHOW_CURSOR)
        self._set_cooked()
        try:
            data = os.read(self.stdin_fd, max_bytes)
        finally:
            if self.tui_active:
                self._set_raw()
                os.write(self.stdout_fd, HIDE_CURSOR)
        return data.decode("utf-8", errors="replace").rstrip()

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()


class TerminalSurface:
    """Clear-and-redraw output target for rendered rows."""

    def __init__(self, stdout_fd: int) -> None:
        self.stdout_fd = stdout_fd

    def write_screen(self, lines: list[str]) -> None:
        payload = CLEAR_HOME + "\r\n".join(lines)
        os.write(self.stdout_fd, payload.encode("utf-8", errors="surrogateescape"))


class ResizeWatcher:
    """Record SIGWINCH deliveries for the main loop to pick up.

    The signal handler only flips a flag; terminal size queries and redraws
    happen in ``consume`` on the loop's own schedule.
    """

    def __init__(self) -> None:
        self.pending = False
        self._previous_handler = None
        self._installed = False

    def _on_resize(self, signum, frame) -> None:
        self.pending = True

    def install(self) -> None:
        try:
            self._previous_handler = signal.signal(signal.SIGWINCH, self._on_resize)
        except (OSError, ValueError) as exc:
            raise StartupError(f"Can't set window resize handler: {exc}") from exc
        self._installed = True

    def uninstall(self) -> None:
        if not self._installed:
            return
        signal.signal(signal.SIGWINCH, self._previous_handler or signal.SIG_DFL)
        self._installed = False

    def consume(self) -> bool:
        """Return whether a resize arrived since the last call, clearing it."""
        pending = self.pending
        self.pending = False
        return pending


def terminal_rows(fd: int | None = None, fallback: tuple[int, int] = (80, 24)) -> int:
    """Return the row count of the terminal on ``fd``, else of stdout."""
    if fd is not None:
        try:
            return os.get_terminal_size(fd).lines
        except OSError:
            pass
    return shutil.get_terminal_size(fallback).lines
