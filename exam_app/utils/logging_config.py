"""Logging configuration helpers for the exam application."""

from __future__ import annotations

import logging
from logging import Logger

# Per-request access lines, one per /state poll of the browser page.
_CHATTY_LOGGERS = ("uvicorn.access",)


def configure_logging(level: int | str = logging.INFO) -> Logger:
    """Configure basic logging for the application and return the package logger."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, level))
    return logging.getLogger("exam_app")
