"""Low-level terminal input decoding.

``KeyReader`` turns raw stdin bytes into key tokens. Arrow keys are the only
escape sequences it understands; any other sequence becomes ``ESC`` and the
byte after the escape is kept for the next read.
"""

from __future__ import annotations

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25

CONTROL_TOKENS = {
    b"\x03": "CTRL_C",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE",
    b"\r": "ENTER_CR",
    b"\n": "ENTER_LF",
}
ARROW_TOKENS = {b"A": "UP", b"B": "DOWN", b"C": "RIGHT", b"D": "LEFT"}


def _wait_readable(fd: int, timeout_ms: int) -> bool:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    return bool(ready)


class KeyReader:
    """Decodes keys from one file descriptor.

    A byte read after ESC that does not start an arrow sequence is
    held back and returned by the next ``read`` call.
    """

    def __init__(self, fd: int) -> None:
        self.fd = fd
        self._held: bytes | None = None

    def _next_byte(self, timeout_ms: int | None) -> bytes | None:
        if self._held is not None:
            ch, self._held = self._held, None
            return ch
        if timeout_ms is not None and not _wait_readable(self.fd, timeout_ms):
            return None
        ch = os.read(self.fd, 1)
        if not ch:
            raise EOFError("stdin closed")
        return ch

    def _sequence_byte(self) -> bytes | None:
        if not _wait_readable(self.fd, ESC_SEQUENCE_TIMEOUT_MS):
            return None
        return os.read(self.fd, 1) or None

    def read(self, timeout_ms: int | None = None) -> str:
        """Read one key token, or ``""`` when ``timeout_ms`` elapses first.

        Raises ``EOFError`` when the input stream is closed.
        """
        ch = self._next_byte(timeout_ms)
        if ch is None:
            return ""
        if ch in CONTROL_TOKENS:
            return CONTROL_TOKENS[ch]
        if ch != b"\x1b":
            return ch.decode("utf-8", errors="replace")

        follow = self._sequence_byte()
        if follow is None:
            return "ESC"
        if follow != b"[":
            self._held = follow
            return "ESC"
        final = self._sequence_byte()
        return ARROW_TOKENS.get(final, "ESC")
