"""Logging configuration for the image cache proxy."""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Set up console logging for the package.

    Args:
        level: Log level name (e.g. "INFO", "DEBUG")

    Returns:
        The package logger
    """
    logger = logging.getLogger("image_cache_proxy")
    logger.setLevel(level.upper())

    # Clear existing handlers so repeated calls don't duplicate output
    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False

    return logger
