"""Logging setup shared by every harvester module."""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str | None = None):
    """Configure plain-text logging for the harvester.

    Uses a simple format including time, level, logger and message. In production
    you could swap to JSON logging without touching the call sites.
    """
    root = logging.getLogger()
    if root.handlers:
        # Already configured (module import, pytest, host application); only adjust the level
        if level:
            root.setLevel(level.upper())
        return
    level = (level or os.getenv("JOB_HARVEST_LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)


def get_logger(name: str):
    configure_logging()
    return logging.getLogger(name)
