"""Module entrypoint for ``python -m flatlist``.

This keeps module-mode execution behavior identical to the ``fl`` script.
All argument parsing and runtime setup happen in ``flatlist.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
