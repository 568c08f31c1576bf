"""Logging configuration for the command line and the HTTP API."""
from __future__ import annotations

import logging

from . import config

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int | None = None) -> None:
    """
    Configure the root logger once.

    level defaults to PANDEMIC_LOG_LEVEL. Library modules only create
    loggers; handlers are installed here by the entry points.
    """
    if level is None:
        level = config.LOG_LEVEL
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved

    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("pandemic").setLevel(level)
