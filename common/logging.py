"""Logging setup shared by the visualizer packages."""
from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Tuple

LEVEL_ENV = "SMVIZ_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Third-party loggers kept at WARNING or above.
_QUIET_LOGGERS: Tuple[str, ...] = ("graphviz",)


def level_from(value: int | str | None = None) -> int:
    """Translate a level name or number.

    Unset or unknown values fall back to ``SMVIZ_LOG_LEVEL`` and then INFO.
    """

    for candidate in (value, os.environ.get(LEVEL_ENV)):
        if isinstance(candidate, int):
            return candidate
        if isinstance(candidate, str) and candidate.strip():
            level = logging.getLevelName(candidate.strip().upper())
            if isinstance(level, int):
                return level
    return logging.INFO


def configure_logging(level: int | str | None = None) -> int:
    resolved = level_from(level)
    root = logging.getLogger()
    if root.hasHandlers():
        root.setLevel(resolved)
    else:
        logging.basicConfig(level=resolved, format=LOG_FORMAT, stream=sys.stderr)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))
    return resolved


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if not logging.getLogger().hasHandlers():
        configure_logging()
    return logging.getLogger(name or "visualizer")
