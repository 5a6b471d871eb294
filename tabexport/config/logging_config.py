"""
Logging setup for the export CLI and HTTP server.
"""
from __future__ import annotations
import logging
import os
from typing import Optional

DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Attach a console handler to the ``tabexport`` logger.

    Args:
        level: Log level name; defaults to TABEXPORT_LOG_LEVEL or INFO

    Returns:
        The configured package logger
    """
    logger = logging.getLogger("tabexport")
    name = (level or os.getenv("TABEXPORT_LOG_LEVEL", DEFAULT_LOG_LEVEL)).upper()
    log_level = getattr(logging, name, logging.INFO)
    logger.setLevel(log_level)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(handler)
    return logger
