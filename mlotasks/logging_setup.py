"""Logging configuration for applications embedding mlotasks."""

import logging
import sys
from typing import Optional

from mlotasks.config import get_log_level

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: Optional[str] = None, debug_mode: bool = False) -> None:
    """Configure the `mlotasks` logger with a single stderr handler.

    Safe to call more than once; existing handlers are replaced.

    Args:
        level: Log level name. Defaults to MLO_LOG_LEVEL (or DEBUG when MLO_DEBUG is set).
        debug_mode: Force DEBUG level (mirrors the `debugMode` setting).
    """
    resolved = "DEBUG" if debug_mode else (level or get_log_level())

    logger = logging.getLogger("mlotasks")
    logger.setLevel(resolved)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
