"""Logging setup for genbridge.

Adapters log through ``genbridge.<module>`` child loggers. Nothing is printed
until the application calls :func:`setup_logging`, normally with the
``log_level`` value from ``.genbridge.yml``.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

LOGGER_NAME = "genbridge"

DEBUG_FORMAT = "[%(asctime)s] %(levelname)-8s [%(name)s] %(message)s"
DEFAULT_FORMAT = "%(levelname)-8s %(message)s"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Attach a single stdout handler to the package logger at ``level``.

    Unknown level names fall back to INFO. Calling this again replaces the
    previous handler.
    """
    effective_level = logging.getLevelName(level.upper())
    if not isinstance(effective_level, int):
        effective_level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(effective_level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(effective_level)
    if effective_level <= logging.DEBUG:
        # Request tracing needs the logger name to tell the two paths apart.
        handler.setFormatter(logging.Formatter(DEBUG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    else:
        handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
    logger.addHandler(handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if name:
        return logging.getLogger(f"{LOGGER_NAME}.{name}")
    return logging.getLogger(LOGGER_NAME)
