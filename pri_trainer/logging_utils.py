"""
Logging setup for the trainer.

Library modules only create module-level loggers; handlers are installed
once by the entry point.
"""
from __future__ import annotations

import logging
import os

from .settings import LOG_LEVEL_ENV

PACKAGE_LOGGER = "pri_trainer"
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def resolve_level(raw: str | None, default: int = logging.WARNING) -> int:
    if not raw:
        return default
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else default


def configure_logging(level: int | None = None) -> logging.Logger:
    """
    Attach a single stream handler to the package logger.

    Args:
        level: Explicit level. None = read PRI_TRAINER_LOG_LEVEL (default WARNING).

    Returns:
        The configured package logger. Calling this again does not add
        duplicate handlers.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    if level is None:
        level = resolve_level(os.environ.get(LOG_LEVEL_ENV))
    logger.setLevel(level)

    if not any(getattr(h, "_pri_trainer", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._pri_trainer = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger
