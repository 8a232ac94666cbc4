"""Command-line front door for flatlist.

Parses CLI options, merges them over the JSON config, prepares the log sink
and working directory, then dispatches into the interactive runtime. On a
normal quit the final working directory is printed so a shell wrapper can
``cd`` into it.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import sys
from collections.abc import Sequence
from pathlib import Path

from .config import Settings, load_settings
from .errors import StartupError
from .log import configure_logging, describe_os_error, record
from .runtime import run_browser
from .ui_theme import available_theme_names

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fl",
        description="Browse nested directories in one flattened, editable list.",
    )
    parser.add_argument("paths", nargs="*", help="Directories listed above the working directory.")
    parser.add_argument(
        "-E",
        "--external",
        dest="open_external",
        action="store_const",
        const=True,
        default=None,
        help="Open files with the external opener.",
    )
    parser.add_argument(
        "-I",
        "--internal",
        dest="open_external",
        action="store_const",
        const=False,
        help="Open files with $EDITOR (default).",
    )
    parser.add_argument(
        "-D",
        "--no-delete",
        "--dumb",
        dest="no_delete",
        action="store_true",
        help="Disable the delete key.",
    )
    parser.add_argument("-d", "--directory", default=None, help="Change to DIRECTORY before listing.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--log-file", type=Path, default=None, help="Append log records to this file.")
    return parser


def effective_settings(args: argparse.Namespace, base: Settings) -> Settings:
    """Overlay explicitly given CLI flags on config-file settings."""
    changes: dict[str, object] = {}
    if args.open_external is not None:
        changes["open_external"] = args.open_external
    if args.no_delete:
        changes["allow_delete"] = False
    if args.theme is not None:
        changes["theme"] = args.theme
    return dataclasses.replace(base, **changes)


def main(argv: Sequence[str] | None = None) -> None:
    """Parse CLI arguments and launch the browser.

    Startup failures exit with a non-zero status and a message on stderr.
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.log_file)
    settings = effective_settings(args, load_settings())

    if args.directory is not None:
        try:
            os.chdir(args.directory)
        except OSError as exc:
            logger.error("Can not change dir to %s: %s", args.directory, describe_os_error(exc))
            raise SystemExit(f"Can not change dir to {args.directory}: {exc.strerror}") from exc

    try:
        run_browser(settings, args.paths)
    except StartupError as exc:
        logger.error("%s", exc)
        raise SystemExit(str(exc)) from exc
    record(f"Quit in {os.getcwd()}")
    sys.stdout.write(os.getcwd() + "\n")


if __name__ == "__main__":
    main()
