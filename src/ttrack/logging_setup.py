#!/usr/bin/env python3
"""
Logging configuration for the ``ttrack`` package.

Library modules only call ``get_logger("ttrack.<module>")``. Until the CLI
runs ``configure_logging`` the package logger carries a ``NullHandler``, so
library use stays silent.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO, Optional, Union

_PKG_LOGGER_NAME = "ttrack"
_CONFIGURED = False


def _level_from_name(name: str) -> Optional[int]:
    name = name.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = getattr(logging, name, None)
    return numeric if isinstance(numeric, int) else None


def _parse_level(level: Union[int, str, None]) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        numeric = _level_from_name(level)
        if numeric is not None:
            return numeric
    # Env override when explicit ``level`` is missing or unknown
    env_val = os.getenv("TTRACK_LOG_LEVEL")
    if env_val:
        numeric = _level_from_name(env_val)
        if numeric is not None:
            return numeric
    return logging.WARNING


def configure_logging(
    level: Union[int, str, None] = None,
    *,
    fmt: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """
    Configure the package root logger exactly once.

    Parameters
    ----------
    level : Union[int, str, None], optional
        Logging level as ``int`` or level-name string. When ``None`` the
        ``TTRACK_LOG_LEVEL`` environment variable is used, otherwise
        ``logging.WARNING``.
    fmt : Optional[str], optional
        Format string (default: ``"ttrack: %(levelname)s %(message)s"``).
    stream : Optional[IO[str]], optional
        Output stream for the ``StreamHandler`` (default: ``sys.stderr``).

    Returns
    -------
    None
        The package logger is configured in place.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    numeric = _parse_level(level)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(numeric)
    handler.setFormatter(logging.Formatter(fmt or "ttrack: %(levelname)s %(message)s"))

    logger.setLevel(numeric)
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger by name.

    A ``NullHandler`` is attached to the package logger until logging has
    been configured.

    Parameters
    ----------
    name : str
        Logger name, usually ``"ttrack.<module>"``.

    Returns
    -------
    logging.Logger
        Named logger.
    """

    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
