"""Logging setup for the clipmerge package."""

from __future__ import annotations

import logging
import sys
from typing import Optional, Union

from ..config import env_flag

LOGGER_NAME = "clipmerge"
DEBUG_ENV = "CLIPMERGE_DEBUG"

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def debug_enabled() -> bool:
    return env_flag(DEBUG_ENV)


def configure_logging(level: Optional[Union[int, str]] = None) -> logging.Logger:
    """Attach one stderr handler to the package logger (idempotent).

    Level defaults to INFO, or DEBUG when CLIPMERGE_DEBUG is set.
    """
    if level is None:
        level = logging.DEBUG if debug_enabled() else logging.INFO
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    if not any(getattr(h, "_clipmerge", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._clipmerge = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger


__all__ = ["configure_logging", "debug_enabled", "LOGGER_NAME"]
