"""Rotating file loggers shared by the services."""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from core.settings import LOGGING


LOGGER_PREFIX = "voicetasks"


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(f"{LOGGER_PREFIX}.{name}")
    root = logging.getLogger(LOGGER_PREFIX)
    if not root.handlers:
        LOGGING.directory.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            LOGGING.directory / LOGGING.filename,
            maxBytes=LOGGING.max_bytes,
            backupCount=LOGGING.backup_count,
            encoding="utf-8",
        )
        formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        handler.setFormatter(formatter)
        root.addHandler(handler)
        root.setLevel(LOGGING.level)
    return logger


__all__ = ["get_logger"]
