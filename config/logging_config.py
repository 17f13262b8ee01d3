"""
Centralized logging configuration.
Every engine module logs through here instead of print().

Handlers live on the 'content_engine' logger only; module loggers are
its children and propagate to it, so each record is emitted once.
"""
import logging
import logging.handlers
from pathlib import Path
from .constants import (
    LOG_LEVEL, LOG_FORMAT, LOG_FILE,
    LOG_MAX_SIZE_MB, LOG_BACKUP_COUNT
)

ROOT_LOGGER_NAME = 'content_engine'


def _configure(logger: logging.Logger) -> None:
    logger.setLevel(getattr(logging, LOG_LEVEL))

    # Console handler - INFO level
    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console)

    # File handler with rotation - DEBUG level
    log_path = Path(LOG_FILE)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.handlers.RotatingFileHandler(
        LOG_FILE,
        maxBytes=LOG_MAX_SIZE_MB * 1024 * 1024,
        backupCount=LOG_BACKUP_COUNT
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(file_handler)


def setup_logger(name: str = None) -> logging.Logger:
    """
    Get or create a configured logger.

    Usage:
        from config.logging_config import setup_logger
        logger = setup_logger(__name__)
        logger.info("Message here")

    Args:
        name: Logger name. If None, uses 'content_engine'. Names outside
            the 'content_engine' hierarchy are nested under it.

    Returns:
        Configured logging.Logger instance.
    """
    base = logging.getLogger(ROOT_LOGGER_NAME)

    # Avoid adding handlers multiple times
    if not base.handlers:
        _configure(base)

    if not name or name == ROOT_LOGGER_NAME:
        return base
    if not name.startswith(ROOT_LOGGER_NAME + '.'):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def get_logger(name: str = None) -> logging.Logger:
    """
    Alias for setup_logger for convenience.

    Usage:
        from config.logging_config import get_logger
        logger = get_logger(__name__)
    """
    return setup_logger(name)


def set_level(level: str) -> None:
    """Apply a level (e.g. from Settings.log_level) to the engine logger tree."""
    setup_logger().setLevel(getattr(logging, level.upper(), logging.INFO))


# Singleton logger for quick imports
# Usage: from config.logging_config import logger
logger = setup_logger(ROOT_LOGGER_NAME)
