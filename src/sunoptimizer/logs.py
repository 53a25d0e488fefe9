"""Logging setup for applications embedding the engine."""

import logging

from sunoptimizer.config import Settings, get_settings

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: Settings | None = None) -> logging.Logger:
    """Attach a stream handler to the package logger at the configured level.

    Calling it again only updates the level; no duplicate handlers are added.

    Returns:
        The "sunoptimizer" logger.
    """
    settings = settings or get_settings()
    logger = logging.getLogger("sunoptimizer")
    level = logging.getLevelName(settings.log_level)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {settings.log_level}")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
    return logger
