"""
Logging setup for BioTutor.

Modules log through ``logging.getLogger(__name__)``; this installs a single
console handler on the package logger.
"""

import logging
import sys
from typing import Optional

from .config import settings


LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _parse_level(level: str) -> int:
    return logging.getLevelNamesMapping().get((level or "INFO").upper(), logging.INFO)


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Configure the ``biotutor`` logger.

    Idempotent: safe to call multiple times (each app factory call does).
    """
    logger = logging.getLogger("biotutor")
    logger.setLevel(_parse_level(level or settings.LOG_LEVEL))
    if getattr(logger, "_configured", False):
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)

    logger._configured = True  # type: ignore[attr-defined]
    return logger
