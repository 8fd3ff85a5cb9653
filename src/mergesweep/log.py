"""Logging setup."""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

LOG_LEVEL_ENV = "MERGESWEEP_LOG_LEVEL"


def setup_logging(verbose: bool = False) -> None:
    """Send ``mergesweep`` log records to stderr through rich.

    ``--verbose`` forces DEBUG; otherwise ``MERGESWEEP_LOG_LEVEL`` is used,
    falling back to WARNING.
    """
    if verbose:
        level = logging.DEBUG
    else:
        name = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
        level = logging.getLevelName(name) if name else logging.WARNING
        if not isinstance(level, int):
            level = logging.WARNING

    logger = logging.getLogger("mergesweep")
    logger.setLevel(level)
    logger.handlers = []
    handler = RichHandler(console=Console(stderr=True), show_path=False, show_time=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
