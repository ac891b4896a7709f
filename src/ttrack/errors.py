#!/usr/bin/env python3
"""
Error kinds raised by ttrack.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class TrackError(Exception):
    """
    Base class for ttrack errors.
    """


class ParseError(TrackError, ValueError):
    """
    Malformed date, range or duration spec.

    Attributes
    ----------
    token : str
        Offending user input.
    """

    def __init__(self, message: str, token: str = "") -> None:
        super().__init__(message)
        self.token = token


class LedgerIOError(TrackError):
    """
    Ledger file could not be read, decoded or written.

    Attributes
    ----------
    path : Path
        Ledger path.
    cause : Optional[Exception]
        Underlying OS or decoding error.
    line : Optional[int]
        Ledger line the failure was found on, when known.
    """

    def __init__(
        self,
        path: Union[str, Path],
        cause: Optional[Exception] = None,
        action: str = "access",
        line: Optional[int] = None,
    ) -> None:
        self.path = Path(path)
        self.cause = cause
        self.line = line
        reason = getattr(cause, "strerror", None) or str(cause)
        where = f"{self.path}:{line}" if line is not None else str(self.path)
        super().__init__(f"cannot {action} ledger {where}: {reason}")


class RangeResolutionError(TrackError):
    """
    Named period could not be resolved.
    """


class FreshnessUnavailableError(TrackError):
    """
    Ledger modification time is unavailable.
    """


class ConfigError(TrackError):
    """
    Config file could not be parsed.
    """
