"""
logging_config.py - console / file logging for the scene emulator

Every module logs through ``logging.getLogger(__name__)``; this helper only
attaches handlers to the ``scene_emulator`` package logger. DEBUG shows the
per-frame values (sun lux, XYZ triples, per-material RGGB), INFO the
configuration changes and live-scene updates, WARNING failed fetches.
"""

from __future__ import annotations
import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "scene_emulator"
LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"
DATE_FORMAT = "%H:%M:%S"


def _handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(level: int | str = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Route package logs to stdout and, optionally, a file.

    Parameters
    ----------
    level : int | str
        Threshold, e.g. logging.DEBUG or "DEBUG".
    log_file : str | None
        Path of a log file (overwritten on each call).

    Returns
    -------
    The configured package logger. Calling again replaces its handlers.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    logger.addHandler(_handler(logging.StreamHandler(sys.stdout), level))
    if log_file:
        logger.addHandler(_handler(logging.FileHandler(log_file, mode="w", encoding="utf-8"), level))

    logger.debug("Logging to stdout%s at %s", f" and {log_file}" if log_file else "",
                 logging.getLevelName(level))
    return logger
