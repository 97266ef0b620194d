"""
Logging setup for the contentlens package.

The stream handler is attached to the "contentlens" package logger rather
than the root logger, so a host application embedding the core keeps its own
logging configuration. Records go to stderr; stdout belongs to CLI output.

Level: set_log_level() (CLI --log-level) wins over CONTENTLENS_LOG_LEVEL,
which defaults to INFO.
"""

from __future__ import annotations

import logging
import os
from typing import Final

PACKAGE_LOGGER: Final[str] = "contentlens"
_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_handler: logging.Handler | None = None
_level_override: int | None = None


def _resolve_level() -> int:
    if _level_override is not None:
        return _level_override
    level_name = os.getenv("CONTENTLENS_LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def _configure_package_logger() -> logging.Logger:
    global _handler

    package = logging.getLogger(PACKAGE_LOGGER)
    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        package.addHandler(_handler)
    package.setLevel(_resolve_level())
    return package


def get_logger(name: str) -> logging.Logger:
    """Return a module logger under the contentlens hierarchy."""
    _configure_package_logger()
    return logging.getLogger(name)


def set_log_level(level: str | int) -> None:
    """
    Override the environment level for the whole package.

    Raises:
        ValueError: for an unknown level name
    """
    global _level_override

    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved
    _level_override = level
    _configure_package_logger()
