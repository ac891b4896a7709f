#!/usr/bin/env python3
"""
Resolve named and explicit periods into inclusive date ranges.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Dict, Optional

from .dates import (
    DateRange,
    apply_offset,
    mkdate,
    month_range,
    next_date,
    normalize_range,
    parse_date_spec,
    prev_weekday,
    split_date,
    year_range,
)
from .errors import ParseError, RangeResolutionError
from .logging_setup import get_logger

SIGNED_OFFSET_RE = re.compile(r"^([+-])(\d+)$")
DAY_OF_MONTH_RE = re.compile(r"^\d+$")

# Longest gap between a date and the next occurrence of a day-of-month (Feb 1 to Mar 31).
MAX_DAY_OF_MONTH_STEPS = 62


def _day(reference: str, _week_start: Optional[int]) -> DateRange:
    return reference, reference


def _week(reference: str, week_start: Optional[int]) -> DateRange:
    start = prev_weekday(reference, week_start)
    return start, apply_offset(start, 6)


def _month(reference: str, _week_start: Optional[int]) -> DateRange:
    return month_range(reference)


def _month_to_date(reference: str, _week_start: Optional[int]) -> DateRange:
    year, month, _day_of_month = split_date(reference)
    return mkdate(year, month, 1), reference


def _year(reference: str, _week_start: Optional[int]) -> DateRange:
    return year_range(reference)


def _year_to_date(reference: str, _week_start: Optional[int]) -> DateRange:
    year, _month_number, _day_of_month = split_date(reference)
    return mkdate(year, 1, 1), reference


NAMED_PERIODS: Dict[str, Callable[[str, Optional[int]], DateRange]] = {
    "day": _day,
    "week": _week,
    "w": _week,
    "month": _month,
    "mtd": _month_to_date,
    "m": _month_to_date,
    "year": _year,
    "ytd": _year_to_date,
    "y": _year_to_date,
}


def _step_to_day_of_month(start: str, day_of_month: int, token: str) -> str:
    if not 1 <= day_of_month <= 31:
        raise ParseError(f"day of month out of range: {token!r}", token=token)
    current = start
    for _ in range(MAX_DAY_OF_MONTH_STEPS):
        if split_date(current)[2] == day_of_month:
            return current
        current = next_date(current)
    raise ParseError(f"no day {day_of_month} follows {start}", token=token)


def parse_range_spec(spec: str, today: Optional[str] = None) -> DateRange:
    """
    Parse an explicit ``A[:B]`` range spec.

    ``A`` is a date spec. ``B`` is a date spec, a signed day offset from ``A``
    (``+N`` or ``-N``) or a bare day of month reached by stepping forward from
    ``A``. Without ``B`` the range is the single day ``A``. Two date specs are
    returned earliest first.

    Parameters
    ----------
    spec : str
        Range spec.
    today : Optional[str], optional
        Date that relative date specs count back from.

    Returns
    -------
    DateRange
        Inclusive ``(start, end)`` pair.

    Raises
    ------
    ParseError
        If either side is malformed.

    Examples
    --------
    >>> parse_range_spec("2024-03-01:2024-03-05")
    ('2024-03-01', '2024-03-05')
    >>> parse_range_spec("2024-03-10:-3")
    ('2024-03-07', '2024-03-10')
    >>> parse_range_spec("2024-03-10:+2")
    ('2024-03-10', '2024-03-12')
    >>> parse_range_spec("2024-01-25:5")
    ('2024-01-25', '2024-02-05')
    >>> parse_range_spec("3/1/2024")
    ('2024-03-01', '2024-03-01')
    """
    text = (spec or "").strip()
    first_text, sep, second_text = text.partition(":")
    first = parse_date_spec(first_text, today=today)
    if not sep:
        return first, first
    second_text = second_text.strip()
    try:
        second = parse_date_spec(second_text, today=today)
    except ParseError:
        pass
    else:
        return normalize_range(first, second)

    match = SIGNED_OFFSET_RE.match(second_text)
    if match:
        days = int(match.group(2))
        if match.group(1) == "-":
            return apply_offset(first, -days), first
        return first, apply_offset(first, days)
    if DAY_OF_MONTH_RE.match(second_text):
        return first, _step_to_day_of_month(first, int(second_text), second_text)
    raise ParseError(f"not a valid range end: {second_text!r}", token=spec)


def resolve_period(
    period: Optional[str],
    reference_date: str,
    week_start: Optional[int],
    *,
    strict: bool = False,
    logger: Optional[logging.Logger] = None,
) -> DateRange:
    """
    Resolve a period token against a reference date.

    Named tokens: ``day`` (also the default), ``week``/``w``, ``month``,
    ``mtd``/``m``, ``year`` and ``ytd``/``y``. Anything else is an explicit
    range spec (see ``parse_range_spec``).

    Parameters
    ----------
    period : Optional[str]
        Period token.
    reference_date : str
        Canonical date the period is anchored on.
    week_start : Optional[int]
        First day of the week, 0 = Sunday.
    strict : bool, optional
        Raise instead of falling back to the reference day (default: False).
    logger : Optional[logging.Logger], optional
        Receives a warning whenever the fallback is taken.

    Returns
    -------
    DateRange
        Inclusive ``(start, end)`` pair.

    Examples
    --------
    >>> resolve_period("mtd", "2024-03-15", 0)
    ('2024-03-01', '2024-03-15')
    >>> resolve_period("week", "2024-03-15", 1)
    ('2024-03-11', '2024-03-17')
    >>> resolve_period("bogus", "2024-03-15", 0)
    ('2024-03-15', '2024-03-15')
    """
    logger = logger or get_logger(__name__)
    token = (period or "").strip()
    if not token:
        return _day(reference_date, week_start)
    resolver = NAMED_PERIODS.get(token)
    try:
        if resolver is not None:
            return resolver(reference_date, week_start)
        return parse_range_spec(token, today=reference_date)
    except (ParseError, RangeResolutionError) as exc:
        if strict:
            raise
        logger.warning("%s; using %s", exc, reference_date)
        return reference_date, reference_date
