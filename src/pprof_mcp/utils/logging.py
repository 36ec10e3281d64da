"""Logging setup for the server entry point.

Modules log through ``logging.getLogger(__name__)``; this only wires the
root handler.  Output goes to stderr because the stdio transport owns stdout.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_THIRD_PARTY_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def configure_logging(*, debug: bool = False) -> None:
    """Install a single rich handler on the root logger."""
    level = logging.DEBUG if debug else logging.INFO
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=debug,
        rich_tracebacks=True,
    )
    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=[handler], force=True)

    for name in _THIRD_PARTY_LOGGERS:
        third_party = logging.getLogger(name)
        third_party.handlers.clear()
        third_party.propagate = True
