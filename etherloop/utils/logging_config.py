from __future__ import annotations

import logging
import sys
from pathlib import Path

LOGGER_NAME = "etherloop"
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
# PIL chatters about every PNG chunk at DEBUG while recording
QUIET_LOGGERS = ("PIL",)


def _handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    return handler


def setup_logging(level: int = logging.INFO, log_file: str | Path | None = None) -> logging.Logger:
    """Console (and optional file) output for the ``etherloop`` loggers. Safe to call again."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    logger.addHandler(_handler(logging.StreamHandler(sys.stdout), level))
    if log_file:
        logger.addHandler(_handler(logging.FileHandler(log_file, mode="w", encoding="utf-8"), level))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))

    logger.debug("logging at %s%s", logging.getLevelName(level), f", file {log_file}" if log_file else "")
    return logger
