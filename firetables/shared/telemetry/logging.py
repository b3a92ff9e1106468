"""Logging for firetables.

Every module logs through ``get_logger(__name__)``, so all records land under
the ``firetables`` logger. ``setup_logging`` configures only that logger and
leaves the host application's root logger alone.
"""

import logging
import sys

from firetables.core.config import get_settings

LOGGER_NAME = "firetables"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: int | None = None) -> logging.Logger:
    """Attach a stdout handler to the ``firetables`` logger and set its level.

    Without ``level``, the level is DEBUG when FIREBASE_DEBUG is set and INFO
    otherwise. Calling it again only updates the level.
    """
    if level is None:
        level = logging.DEBUG if get_settings().debug else logging.INFO
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name``, placed under the ``firetables`` logger."""
    if name != LOGGER_NAME and not name.startswith(LOGGER_NAME + "."):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)
