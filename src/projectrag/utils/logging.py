"""
Logging setup.

Modules log through ``logging.getLogger(__name__)``. A single stderr handler
on the ``projectrag`` logger serves the whole package.
"""

import logging
import re
import sys

PACKAGE_LOGGER = "projectrag"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_API_KEY_PATTERN = re.compile(r"sk-[A-Za-z0-9_\-]{4,}")


class APIKeyFilter(logging.Filter):
    """Mask OpenAI API keys quoted in provider error messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        if _API_KEY_PATTERN.search(message):
            record.msg = _API_KEY_PATTERN.sub("sk-***", message)
            record.args = None
        return True


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    """
    Get a package logger, installing the package handler on first use.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger whose records reach the package handler
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.addFilter(APIKeyFilter())
        package_logger.addHandler(handler)
        package_logger.setLevel(logging.INFO)

    return logging.getLogger(name)


def set_log_level(level: int | str) -> None:
    """
    Set the level of every projectrag logger.

    Args:
        level: Level number or name (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Raises:
        ValueError: If the level name is unknown
    """
    if isinstance(level, str):
        name = level.upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {name}")

    get_logger().setLevel(level)
