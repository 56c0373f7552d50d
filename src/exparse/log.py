"""Logging setup for exparse."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_LOG_LEVEL = "WARNING"


def setup_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Route log records through rich on stderr.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ...). Unknown names fall
            back to WARNING.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=Console(stderr=True),
                rich_tracebacks=True,
                show_path=False,
            ),
        ],
        force=True,
    )
