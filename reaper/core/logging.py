"""
Logging for the reaper process.

Everything goes to stdout, one line per event, and every cycle ends with a
summary line.
"""

import logging
import sys


def setup_logging(level: int | str = logging.INFO) -> None:
    """Configure the root logger; ``level`` may be a name such as "DEBUG"."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=level,
        stream=sys.stdout,
    )
    # Every provider request is already logged by the transport
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Module logger, e.g. ``get_logger(__name__)``."""
    return logging.getLogger(name)
