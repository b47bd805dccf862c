"""
Logging setup for the MenuPro menu API.

Call setup_logging() once when the app starts. Every module then logs through
logging.getLogger(__name__) under the "menupro" namespace.

Environment variables:
    LOG_LEVEL: DEBUG, INFO, WARNING (or WARN), ERROR, CRITICAL. Default INFO.
    LOG_SQL:   "true" to echo SQLAlchemy statements regardless of LOG_LEVEL.
"""
import logging
import os
import sys
from typing import Optional

APP_LOGGER = "menupro"
LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

_LEVEL_NAMES = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Loggers that flood stdout on every menu request
_CHATTY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "alembic.runtime.migration")


def resolve_level(name: Optional[str]) -> int:
    """Map a level name to its numeric value; unknown names mean INFO."""
    return _LEVEL_NAMES.get((name or "").strip().upper(), logging.INFO)


def setup_logging(level: Optional[str] = None) -> int:
    """
    Configure root and app logging.

    Args:
        level: Level name. Falls back to LOG_LEVEL, then INFO.

    Returns:
        The numeric level applied to the "menupro" logger.
    """
    numeric_level = resolve_level(level if level is not None else os.getenv("LOG_LEVEL"))

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, stream=sys.stdout)
    logging.getLogger(APP_LOGGER).setLevel(numeric_level)

    quiet = logging.NOTSET if numeric_level <= logging.DEBUG else logging.WARNING
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(quiet)

    if os.getenv("LOG_SQL", "false").lower() == "true":
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)

    logging.getLogger(__name__).debug("Logging at %s", logging.getLevelName(numeric_level))
    return numeric_level
