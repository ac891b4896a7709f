#!/usr/bin/env python3
"""
Operations behind the ttrack commands.

Each function takes an explicit ``TrackContext`` and either returns a result
or raises one of the ``ttrack.errors`` kinds; presentation and exit codes
belong to the CLI.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from . import duration
from .aggregate import Report, build_report, format_report
from .config import TrackContext
from .dates import DateRange, parse_date_spec
from .ledger import Ledger, LedgerRow
from .periods import resolve_period


def _ledger(ctx: TrackContext) -> Ledger:
    return Ledger(ctx.ledger_path, logger=ctx.logger)


def resolve_reference(ctx: TrackContext, reference_spec: Optional[str]) -> str:
    """
    Return the date named by ``reference_spec``, or the context date.
    """
    if not reference_spec or not reference_spec.strip():
        return ctx.reference_date
    return parse_date_spec(reference_spec, today=ctx.reference_date)


def resolve_range(
    ctx: TrackContext,
    period: Optional[str],
    reference_spec: Optional[str] = None,
) -> DateRange:
    """
    Resolve a period token against the context (or an explicit reference date).
    """
    reference = resolve_reference(ctx, reference_spec)
    return resolve_period(period, reference, ctx.week_start, logger=ctx.logger)


def record(
    ctx: TrackContext,
    date_spec: Optional[str],
    project: str,
    duration_spec: Optional[str],
    comment_words: Sequence[str] = (),
    now: Optional[float] = None,
) -> LedgerRow:
    """
    Append an entry to the ledger.

    Parameters
    ----------
    ctx : TrackContext
        Invocation context.
    date_spec : Optional[str]
        Date spec; the context reference date when empty.
    project : str
        Project name.
    duration_spec : Optional[str]
        Duration spec (see ``duration.parse_duration_spec``).
    comment_words : Sequence[str], optional
        Comment words, joined with single spaces.
    now : Optional[float], optional
        Current epoch seconds, used by the ``s`` duration.

    Returns
    -------
    LedgerRow
        The row written.
    """
    entry_date = resolve_reference(ctx, date_spec)
    minutes = duration.parse_duration_spec(duration_spec, ctx.ledger_path, now=now)
    comment = " ".join(word for word in comment_words if word)
    row = _ledger(ctx).append(entry_date, project, minutes, comment)
    ctx.logger.info("recorded %d minutes on %s for %s", row.minutes, row.project, row.date)
    return row


def build_period_report(
    ctx: TrackContext,
    period: Optional[str],
    reference_spec: Optional[str] = None,
    include_zero: bool = True,
) -> Report:
    """
    Aggregate the ledger over a resolved period.
    """
    date_range = resolve_range(ctx, period, reference_spec)
    extracted = _ledger(ctx).extract(date_range)
    ctx.logger.debug(
        "period %r resolved to %s..%s with %d dated groups",
        period,
        date_range[0],
        date_range[1],
        len(extracted),
    )
    return build_report(extracted, date_range, ctx.rates, include_zero=include_zero)


def report(
    ctx: TrackContext,
    period: Optional[str],
    reference_spec: Optional[str] = None,
    full: bool = False,
    include_zero: bool = True,
) -> List[str]:
    """
    Return formatted totals for a period.

    Parameters
    ----------
    ctx : TrackContext
        Invocation context.
    period : Optional[str]
        Period token (``day``, ``week``, ``mtd``, ``A:B``...).
    reference_spec : Optional[str], optional
        Date spec to anchor the period on instead of the context date.
    full : bool, optional
        Include a per-day breakdown.
    include_zero : bool, optional
        Keep zero-minute rows (default: True).

    Returns
    -------
    List[str]
        Report lines.
    """
    summary = build_period_report(ctx, period, reference_spec, include_zero=include_zero)
    return format_report(summary, full=full)


def entries(
    ctx: TrackContext,
    period: Optional[str],
    reference_spec: Optional[str] = None,
) -> List[LedgerRow]:
    """
    Return the raw rows in a period, by date then file order.
    """
    date_range = resolve_range(ctx, period, reference_spec)
    extracted = _ledger(ctx).extract(date_range)
    return [row for day in sorted(extracted) for row in extracted[day]]


def projects(ctx: TrackContext) -> List[str]:
    return _ledger(ctx).projects()


def freshness(ctx: TrackContext, now: Optional[float] = None) -> Optional[int]:
    """
    Minutes since the last ledger write, or None without a ledger.
    """
    return duration.freshness(ctx.ledger_path, now=now)


def reset_freshness(ctx: TrackContext) -> None:
    duration.reset_freshness(ctx.ledger_path)
    ctx.logger.info("reset freshness of %s", ctx.ledger_path)
