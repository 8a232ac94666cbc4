"""Main interactive event loop for the terminal UI.

Each iteration redraws when needed, then waits for one key with a short
timeout so pending resize notifications are noticed without input.
"""

from __future__ import annotations

from collections.abc import Callable

from ..key_handlers import KeyContext, handle_key
from ..session import Session
from ..terminal import ResizeWatcher
from ..viewport import ScreenSurface

RESIZE_POLL_MS = 100


def run_main_loop(
    session: Session,
    surface: ScreenSurface,
    read_key: Callable[..., str],
    resize: ResizeWatcher,
    terminal_rows: Callable[[], int],
    prompt: Callable[[str], str],
) -> None:
    """Run until a quit key arrives or stdin closes.

    ``read_key(timeout_ms=...)`` returns one key token, ``""`` on timeout, and
    raises ``EOFError`` once input is closed.
    """
    context = KeyContext(session=session, prompt=prompt)
    session.viewport.resize(terminal_rows())
    while True:
        if resize.consume():
            session.viewport.resize(terminal_rows())
            session.dirty = True
        if session.dirty:
            session.render(surface)
        try:
            key = read_key(timeout_ms=RESIZE_POLL_MS)
        except EOFError:
            return
        if not key:
            continue
        if handle_key(key, context):
            return
