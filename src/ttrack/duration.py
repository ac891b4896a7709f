#!/usr/bin/env python3
"""
Duration specs for recorded entries and ledger freshness.
"""

from __future__ import annotations

import re
import time
from pathlib import Path
from typing import Optional, Union

from .errors import FreshnessUnavailableError, ParseError
from .ledger import Ledger

HOURS_FIRST_RE = re.compile(r"^(?:(?P<hours>\d+(?:\.\d+)?)h)?(?:(?P<minutes>\d+)m)?$")
MINUTES_FIRST_RE = re.compile(r"^(?:(?P<minutes>\d+)m)?(?:(?P<hours>\d+(?:\.\d+)?)h)?$")
SINCE_LAST_WRITE = "s"


def freshness(
    ledger_path: Union[str, Path, None] = None,
    now: Optional[float] = None,
) -> Optional[int]:
    """
    Return whole minutes since the ledger was last written.

    Parameters
    ----------
    ledger_path : Union[str, Path, None], optional
        Ledger path (default: ``~/.timetrack``).
    now : Optional[float], optional
        Current epoch seconds (default: ``time.time()``).

    Returns
    -------
    Optional[int]
        Minutes rounded to the nearest minute (0 when the ledger mtime lies in
        the future), or None when there is no ledger.
    """
    mtime = Ledger(ledger_path).mtime()
    if mtime is None:
        return None
    current = time.time() if now is None else now
    return max(0, int(round((current - mtime) / 60.0)))


def reset_freshness(ledger_path: Union[str, Path, None] = None) -> None:
    """
    Mark the ledger as just written without changing its rows.
    """
    Ledger(ledger_path).touch()


def parse_duration_spec(
    token: Optional[str],
    ledger_path: Union[str, Path, None] = None,
    now: Optional[float] = None,
) -> int:
    """
    Parse a duration spec into minutes.

    Rules, in order: empty means 0; digits are minutes; ``s`` is the time
    since the last ledger write; ``[H(.H)h][Mm]`` in either order.

    Hours and minutes add up as ``H * 60 + M``, so ``1h30m`` is 90 minutes
    (not the 150 quoted in some older usage notes for this format).

    Parameters
    ----------
    token : Optional[str]
        Duration spec.
    ledger_path : Union[str, Path, None], optional
        Ledger consulted for ``s``.
    now : Optional[float], optional
        Current epoch seconds for ``s``.

    Returns
    -------
    int
        Minutes.

    Raises
    ------
    ParseError
        If the token is not a valid time spec.
    FreshnessUnavailableError
        If ``s`` is used and the ledger does not exist.

    Examples
    --------
    >>> parse_duration_spec("45")
    45
    >>> parse_duration_spec("1h30m")
    90
    >>> parse_duration_spec("30m1h")
    90
    >>> parse_duration_spec("1.5h")
    90
    >>> parse_duration_spec("")
    0
    """
    text = (token or "").strip()
    if not text:
        return 0
    if text.isdigit():
        return int(text)
    if text == SINCE_LAST_WRITE:
        minutes = freshness(ledger_path, now=now)
        if minutes is None:
            path = Ledger(ledger_path).path
            raise FreshnessUnavailableError(f"ledger {path} does not exist")
        return minutes
    for pattern in (HOURS_FIRST_RE, MINUTES_FIRST_RE):
        match = pattern.match(text)
        if match and (match.group("hours") or match.group("minutes")):
            hours = float(match.group("hours") or 0)
            return int(round(hours * 60)) + int(match.group("minutes") or 0)
    raise ParseError(f"not a valid time spec: {token!r}", token=text)
