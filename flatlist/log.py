"""Append-only log sink for notable errors and events.

Records go to a plain text file under the platform state directory, one line
per message. Nothing in flatlist reads the log back.
"""

from __future__ import annotations

import logging
from pathlib import Path

from platformdirs import user_state_dir

APP_NAME = "flatlist"
LOG_FILENAME = "flatlist.log"
DEFAULT_LOG_PATH = Path(user_state_dir(APP_NAME, appauthor=False)) / LOG_FILENAME
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logger = logging.getLogger(APP_NAME)


def configure_logging(path: Path | None = None, level: int = logging.INFO) -> Path | None:
    """Attach a file handler to the package logger.

    Returns the log path in use, or ``None`` when the file cannot be opened.
    In that case records are dropped instead of reaching the terminal, which
    is owned by the TUI.
    """
    log_path = DEFAULT_LOG_PATH if path is None else path
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(level)
    logger.propagate = False
    try:
        log_path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    except OSError:
        logger.addHandler(logging.NullHandler())
        return None
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return log_path


def record(message: str) -> None:
    """Write one informational line to the log sink."""
    logger.info(message)


def describe_os_error(exc: OSError) -> str:
    """Return ``strerror``-style detail for an ``OSError``."""
    detail = exc.strerror or str(exc)
    if exc.filename is not None:
        return f"{detail}: {exc.filename}"
    return detail
