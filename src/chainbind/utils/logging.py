"""
Logging helpers for chainbind.

All modules log through children of the ``chainbind`` logger. The library
installs a NullHandler only; applications opt in with configure_logging().
"""

from __future__ import annotations

import logging
from typing import Optional, Union

ROOT_LOGGER_NAME = "chainbind"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Return a logger under the chainbind namespace.

    Args:
        name: Module name, usually ``__name__``. Names outside the
            ``chainbind`` namespace are nested under it.
    """
    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(
    level: Union[int, str] = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
    handler: Optional[logging.Handler] = None,
) -> logging.Logger:
    """
    Attach a stream handler (or the given one) to the chainbind logger.

    Calling it again replaces the handler installed by the previous call.
    """
    logger = get_logger()
    for existing in list(logger.handlers):
        if getattr(existing, "_chainbind_managed", False):
            logger.removeHandler(existing)

    handler = handler or logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt))
    handler._chainbind_managed = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.disabled = False
    return logger


def set_level(level: Union[int, str]) -> None:
    get_logger().setLevel(level)


def enable_debug() -> None:
    """Shortcut for configure_logging(logging.DEBUG)."""
    configure_logging(logging.DEBUG)


def disable_logging() -> None:
    """Silence chainbind and all of its child loggers."""
    logger = get_logger()
    logger.setLevel(logging.CRITICAL + 1)
    logger.disabled = True
