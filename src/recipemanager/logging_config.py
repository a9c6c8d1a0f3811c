"""
Logging configuration for the CLI entrypoint.

Every module logs through ``logger = logging.getLogger(__name__)``;
this sets up the single stderr handler those loggers propagate to.

Level precedence: CLI flag > RECIPEMANAGER_LOG_LEVEL > WARNING.
"""

from __future__ import annotations

import logging
import os
import sys


_FMT_MINIMAL = "%(levelname)s: %(message)s"
_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d - %(message)s"
_DATEFMT = "%H:%M:%S"

ENV_LEVEL = "RECIPEMANAGER_LOG_LEVEL"


def setup_logging(level: str | None = None) -> None:
    numeric_level = _parse_level(level or os.environ.get(ENV_LEVEL) or "WARNING")

    if numeric_level <= logging.DEBUG:
        fmt, datefmt = _FMT_DEBUG, _DATEFMT
    elif numeric_level <= logging.INFO:
        fmt, datefmt = _FMT_VERBOSE, _DATEFMT
    else:
        fmt, datefmt = _FMT_MINIMAL, None

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root.setLevel(numeric_level)


def _parse_level(level: str) -> int:
    value = logging.getLevelName(str(level).strip().upper())
    if isinstance(value, int):
        return value
    return logging.WARNING
