"""Normal-mode keyboard handling."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .session import Session

SEARCH_PROMPT = "search >> "

QUIT_KEYS = {"q", "CTRL_C"}
ACTIVATE_KEYS = {"ENTER_CR", "ENTER_LF", "BACKSPACE"}


@dataclass(frozen=True)
class KeyContext:
    """Session plus the terminal operations key handling needs."""

    session: Session
    prompt: Callable[[str], str]


def handle_key(key: str, context: KeyContext) -> bool:
    """Handle one key and return ``True`` when the app should quit."""
    session = context.session

    if key in QUIT_KEYS:
        return True
    if key in {"k", "UP"}:
        session.move_selection(-1)
    elif key in {"j", "DOWN"}:
        session.move_selection(1)
    elif key == "K":
        session.move_entry(-1)
    elif key == "J":
        session.move_entry(1)
    elif key == "g":
        session.select_first()
    elif key == "G":
        session.select_last()
    elif key == "d":
        session.delete_selected()
    elif key == "u":
        session.undo()
    elif key == " ":
        session.change_directory()
    elif key == "/":
        pattern = context.prompt(SEARCH_PROMPT)
        if pattern:
            session.search(pattern)
        session.dirty = True
    elif key == "n":
        session.search()
    elif key in ACTIVATE_KEYS:
        session.activate_selected()
    elif key == "s":
        session.sort()
    else:
        session.dirty = True
    return False
