"""Logging setup for the command line: stdlib loggers, rich handler on stderr."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(verbose: bool = False, debug: bool = False) -> None:
    """Route ``gitglance.*`` loggers to stderr. Parsers warn about dropped records."""
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=debug,
        show_time=debug,
        markup=False,
    )
    logger = logging.getLogger("gitglance")
    logger.handlers[:] = [handler]
    logger.setLevel(level)
    logger.propagate = False
