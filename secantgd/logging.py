"""Logging helpers for secantgd.

Every module logs through :func:`get_logger` so that all messages share the
``secantgd.`` namespace and can be silenced or raised in one place.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

_DEFAULT_LEVEL = logging.WARNING
_DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

_loggers: dict[str, logging.Logger] = {}


def _resolve_level(level: int | str) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.WARNING)
    return level


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the cached logger for ``name``.

    Args:
        name: Logger name, usually ``__name__``. ``None`` gives the package
            logger.

    Returns:
        A logger writing ``[LEVEL] name: message`` lines to stderr.

    Example:
        >>> from secantgd.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.debug("derivative estimated")
    """
    if name is None:
        name = "secantgd"
    logger_name = name if name.startswith("secantgd") else f"secantgd.{name}"

    if logger_name in _loggers:
        return _loggers[logger_name]

    logger = logging.getLogger(logger_name)
    if not logger.handlers:
        logger.setLevel(_DEFAULT_LEVEL)
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(_DEFAULT_LEVEL)
        handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    _loggers[logger_name] = logger
    return logger


def set_log_level(level: int | str) -> None:
    """Set the level of every secantgd logger, including ones created later.

    Args:
        level: A ``logging`` level or its name (``"DEBUG"``, ``"INFO"``, ...).
    """
    level = _resolve_level(level)
    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)

    global _DEFAULT_LEVEL
    _DEFAULT_LEVEL = level


def configure_logging(
    level: int | str = logging.WARNING,
    format_string: Optional[str] = None,
    stream: Optional[object] = None,
) -> None:
    """Replace the handlers of all secantgd loggers.

    Args:
        level: Logging level (default: WARNING).
        format_string: Record format. Defaults to ``[LEVEL] name: message``.
        stream: Output stream (default: ``sys.stderr``).

    Example:
        >>> import logging
        >>> from secantgd.logging import configure_logging
        >>> configure_logging(level=logging.INFO)
    """
    level = _resolve_level(level)
    formatter = logging.Formatter(format_string or _DEFAULT_FORMAT)
    if stream is None:
        stream = sys.stderr

    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        handler = logging.StreamHandler(stream)
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    global _DEFAULT_LEVEL
    _DEFAULT_LEVEL = level


__all__ = ["configure_logging", "get_logger", "set_log_level"]
