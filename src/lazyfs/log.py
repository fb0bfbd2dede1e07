"""Logging setup for the ``lazyfs`` logger hierarchy."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from lazyfs.config.models import LoggingSettings

PACKAGE_LOGGER = "lazyfs"
_HANDLER_NAME = "lazyfs-file"
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: LoggingSettings) -> logging.Logger:
    """Apply ``settings`` to the package logger.

    Sets the level and, when ``settings.file`` is given, attaches a rotating
    file handler. Calling this again replaces the handler it attached before.

    Args:
        settings: Logging configuration to apply.

    Returns:
        logging.Logger: The configured ``lazyfs`` logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(settings.level.upper())

    for handler in list(logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            logger.removeHandler(handler)
            handler.close()

    if settings.file:
        handler = RotatingFileHandler(
            settings.file,
            maxBytes=settings.max_size_mb * 1024 * 1024,
            backupCount=settings.backup_count,
            encoding="utf-8",
        )
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
    return logger


__all__ = ["PACKAGE_LOGGER", "configure_logging"]
