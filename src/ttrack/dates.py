#!/usr/bin/env python3
"""
Canonical date parsing and calendar arithmetic.

Every date handled by ttrack is a ``YYYY-MM-DD`` string. Day stepping is done
from local noon so that a daylight-saving shift on the day never skips or
repeats a calendar date.
"""

from __future__ import annotations

import re
import time
from datetime import date
from typing import List, Optional, Tuple

from .errors import ParseError, RangeResolutionError

DateRange = Tuple[str, str]

SECONDS_PER_DAY = 86400
NOON = 12

MONTHS = {
    "Jan": 1,
    "Feb": 2,
    "Mar": 3,
    "Apr": 4,
    "May": 5,
    "Jun": 6,
    "Jul": 7,
    "Aug": 8,
    "Sep": 9,
    "Oct": 10,
    "Nov": 11,
    "Dec": 12,
}

WEEKDAY_NAMES = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)

CANONICAL_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
RELATIVE_RE = re.compile(r"^(\d+)\s*([dw])$")
ISO_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
US_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
MONTH_NAME_RE = re.compile(r"^([A-Z][a-z]{2})\s+(\d{1,2}),?\s+(\d{4})$")


def mkdate(year: int, month: int, day: int) -> str:
    """
    Build a canonical date from explicit parts.

    Parameters
    ----------
    year : int
        Four-digit year.
    month : int
        Month, 1-12.
    day : int
        Day of month.

    Returns
    -------
    str
        Zero-padded ``YYYY-MM-DD`` date.

    Raises
    ------
    ParseError
        If the parts do not name a real calendar date.

    Examples
    --------
    >>> mkdate(2024, 7, 4)
    '2024-07-04'
    >>> mkdate(987, 1, 2)
    '0987-01-02'
    """
    try:
        date(int(year), int(month), int(day))
    except ValueError as exc:
        raise ParseError(
            f"invalid date {year}-{month}-{day}: {exc}",
            token=f"{year}-{month}-{day}",
        ) from exc
    return f"{int(year):04d}-{int(month):02d}-{int(day):02d}"


def split_date(value: str) -> Tuple[int, int, int]:
    """
    Split a canonical date into integer parts.

    Examples
    --------
    >>> split_date("2024-03-15")
    (2024, 3, 15)
    """
    match = CANONICAL_RE.match(value)
    if not match:
        raise ParseError(f"not a canonical date: {value!r}", token=value)
    return int(match.group(1)), int(match.group(2)), int(match.group(3))


def is_canonical(value: str) -> bool:
    """
    Return True when ``value`` is shaped like ``YYYY-MM-DD``.

    Examples
    --------
    >>> is_canonical("2024-03-15")
    True
    >>> is_canonical("2024-3-15")
    False
    """
    return bool(CANONICAL_RE.match(value))


def _local_noon(value: str) -> float:
    year, month, day = split_date(value)
    return time.mktime((year, month, day, NOON, 0, 0, 0, 0, -1))


def _from_timestamp(stamp: float) -> str:
    return time.strftime("%Y-%m-%d", time.localtime(stamp))


def current_date(now: Optional[float] = None) -> str:
    """
    Return the local calendar date for ``now`` (default: the current time).
    """
    return _from_timestamp(time.time() if now is None else now)


def next_date(value: str) -> str:
    """
    Return the calendar day after ``value``.

    Examples
    --------
    >>> next_date("2024-02-28")
    '2024-02-29'
    >>> next_date("2023-12-31")
    '2024-01-01'
    """
    return _from_timestamp(_local_noon(value) + SECONDS_PER_DAY)


def prev_date(value: str) -> str:
    """
    Return the calendar day before ``value``.

    Examples
    --------
    >>> prev_date("2024-03-01")
    '2024-02-29'
    """
    return _from_timestamp(_local_noon(value) - SECONDS_PER_DAY)


def apply_offset(value: str, days: int) -> str:
    """
    Step ``days`` calendar days forward (positive) or back (negative).

    Examples
    --------
    >>> apply_offset("2024-01-30", 3)
    '2024-02-02'
    >>> apply_offset("2024-01-02", -2)
    '2023-12-31'
    """
    step = next_date if days >= 0 else prev_date
    current = value
    for _ in range(abs(days)):
        current = step(current)
    return current


def weekday(value: str) -> int:
    """
    Return the weekday of ``value`` with 0 = Sunday and 6 = Saturday.

    Examples
    --------
    >>> weekday("2024-03-15")
    5
    >>> weekday("2024-03-17")
    0
    """
    year, month, day = split_date(value)
    # date.weekday() counts from Monday
    return (date(year, month, day).weekday() + 1) % 7


def prev_weekday(value: str, target: int) -> str:
    """
    Return the most recent date on or before ``value`` falling on ``target``.

    Parameters
    ----------
    value : str
        Canonical reference date.
    target : int
        Weekday, 0 = Sunday through 6 = Saturday.

    Returns
    -------
    str
        ``value`` itself when it already falls on ``target``.

    Raises
    ------
    RangeResolutionError
        If ``target`` is not a weekday number.

    Examples
    --------
    >>> prev_weekday("2024-03-15", 1)
    '2024-03-11'
    >>> prev_weekday("2024-03-11", 1)
    '2024-03-11'
    """
    if isinstance(target, bool) or not isinstance(target, int) or not 0 <= target <= 6:
        raise RangeResolutionError(f"invalid week start day: {target!r}")
    current = value
    while weekday(current) != target:
        current = prev_date(current)
    return current


def month_range(value: str) -> DateRange:
    """
    Return the first and last day of the month containing ``value``.

    Examples
    --------
    >>> month_range("2024-02-10")
    ('2024-02-01', '2024-02-29')
    >>> month_range("2023-12-25")
    ('2023-12-01', '2023-12-31')
    """
    year, month, _day = split_date(value)
    first = mkdate(year, month, 1)
    following = mkdate(year + month // 12, month % 12 + 1, 1)
    return first, prev_date(following)


def year_range(value: str) -> DateRange:
    """
    Return January 1 through December 31 of the year containing ``value``.

    Examples
    --------
    >>> year_range("2024-06-30")
    ('2024-01-01', '2024-12-31')
    """
    year, _month, _day = split_date(value)
    return mkdate(year, 1, 1), mkdate(year, 12, 31)


def normalize_range(first: str, second: str) -> DateRange:
    """
    Order two canonical dates so the earlier comes first.

    Examples
    --------
    >>> normalize_range("2024-03-02", "2024-03-01")
    ('2024-03-01', '2024-03-02')
    """
    return (first, second) if first <= second else (second, first)


def expand_range(start: str, end: str) -> List[str]:
    """
    List every calendar day from ``start`` to ``end`` inclusive.

    Examples
    --------
    >>> expand_range("2024-02-27", "2024-03-01")
    ['2024-02-27', '2024-02-28', '2024-02-29', '2024-03-01']
    >>> expand_range("2024-01-01", "2024-01-01")
    ['2024-01-01']
    """
    start, end = normalize_range(start, end)
    days = [start]
    while days[-1] < end:
        days.append(next_date(days[-1]))
    return days


def parse_date_spec(token: str, today: Optional[str] = None) -> str:
    """
    Parse a user date token into a canonical date.

    Accepted forms, first match wins: ``N d`` or ``N w`` (days or weeks
    before today), ``YYYY-M-D``, ``M/D/YYYY`` and ``Mon D YYYY``. Relative
    weekday phrases such as "last Tuesday" are not supported.

    Parameters
    ----------
    token : str
        User input.
    today : Optional[str], optional
        Canonical date that relative forms count back from (default: the
        current local date).

    Returns
    -------
    str
        Canonical date.

    Raises
    ------
    ParseError
        If no form matches or the date does not exist.

    Examples
    --------
    >>> parse_date_spec("2024-7-4")
    '2024-07-04'
    >>> parse_date_spec("7/4/2024")
    '2024-07-04'
    >>> parse_date_spec("Jul 4 2024")
    '2024-07-04'
    >>> parse_date_spec("2d", today="2024-03-01")
    '2024-02-28'
    >>> parse_date_spec("1w", today="2024-03-15")
    '2024-03-08'
    """
    text = (token or "").strip()
    match = RELATIVE_RE.match(text)
    if match:
        count = int(match.group(1))
        if match.group(2) == "w":
            count *= 7
        base = today or current_date()
        return apply_offset(base, -count)
    match = ISO_RE.match(text)
    if match:
        return mkdate(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    match = US_RE.match(text)
    if match:
        return mkdate(int(match.group(3)), int(match.group(1)), int(match.group(2)))
    match = MONTH_NAME_RE.match(text)
    if match and match.group(1) in MONTHS:
        return mkdate(int(match.group(3)), MONTHS[match.group(1)], int(match.group(2)))
    raise ParseError(f"not a valid date spec: {token!r}", token=token)


def parse_weekday(value: object) -> Optional[int]:
    """
    Interpret a weekday name, abbreviation or number (0 = Sunday).

    Returns
    -------
    Optional[int]
        Weekday number, or None when unrecognized.

    Examples
    --------
    >>> parse_weekday("Monday")
    1
    >>> parse_weekday("sat")
    6
    >>> parse_weekday(0)
    0
    >>> parse_weekday("someday") is None
    True
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if 0 <= value <= 6 else None
    text = str(value or "").strip().lower()
    if text.isdigit():
        number = int(text)
        return number if 0 <= number <= 6 else None
    if len(text) < 3:
        return None
    for index, name in enumerate(WEEKDAY_NAMES):
        if name.startswith(text):
            return index
    return None
