#!/usr/bin/env python3
"""
Fold ledger rows into per-project totals, billed amounts and reports.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .dates import DateRange, expand_range
from .ledger import LedgerRow

Totals = Dict[str, int]
RateTable = Mapping[str, float]

NO_DATA = "no data"
UNBILLABLE = "-"


@dataclass(frozen=True)
class BilledTotals:
    """
    Totals converted to billed amounts.

    Attributes
    ----------
    per_project : Dict[str, Optional[float]]
        Amount per project, or None when the project has no rate.
    total_minutes : int
        Minutes across every project, billable or not.
    total_billed : float
        Sum of the billable amounts.
    """

    per_project: Dict[str, Optional[float]]
    total_minutes: int
    total_billed: float


@dataclass(frozen=True)
class DayReport:
    date: str
    totals: Totals = field(default_factory=dict)
    billing: Optional[BilledTotals] = None

    @property
    def has_data(self) -> bool:
        return bool(self.totals)


@dataclass(frozen=True)
class Report:
    """
    Aggregated view of a date range.

    Attributes
    ----------
    date_range : DateRange
        Inclusive range reported on.
    days : List[DayReport]
        One entry per calendar day in the range, including empty days.
    totals : Totals
        Minutes per project across the range.
    billing : BilledTotals
        Billed amounts for ``totals``.
    """

    date_range: DateRange
    days: List[DayReport]
    totals: Totals
    billing: BilledTotals


def sum_totals(rows: Iterable[LedgerRow], include_zero: bool = True) -> Totals:
    """
    Sum minutes per project.

    Parameters
    ----------
    rows : Iterable[LedgerRow]
        Rows to fold.
    include_zero : bool, optional
        Keep rows with zero minutes (default: True). False gives the
        billable-only view.

    Returns
    -------
    Totals
        Minutes per project in order of first appearance.

    Examples
    --------
    >>> rows = [
    ...     LedgerRow("2024-01-01", "eng", 60, "x"),
    ...     LedgerRow("2024-01-01", "eng", 30, "y"),
    ...     LedgerRow("2024-01-01", "ops", 0, "mark"),
    ... ]
    >>> sum_totals(rows)
    {'eng': 90, 'ops': 0}
    >>> sum_totals(rows, include_zero=False)
    {'eng': 90}
    """
    totals: Totals = {}
    for row in rows:
        if not include_zero and row.minutes <= 0:
            continue
        totals[row.project] = totals.get(row.project, 0) + row.minutes
    return totals


def billed(totals: Mapping[str, int], rates: Optional[RateTable] = None) -> BilledTotals:
    """
    Convert minutes to billed amounts using hourly rates.

    Examples
    --------
    >>> result = billed({"eng": 90, "misc": 30}, {"eng": 100.0})
    >>> result.per_project
    {'eng': 150.0, 'misc': None}
    >>> result.total_minutes, result.total_billed
    (120, 150.0)
    """
    rates = rates or {}
    per_project: Dict[str, Optional[float]] = {}
    total_billed = 0.0
    for project, minutes in totals.items():
        rate = rates.get(project)
        if rate is None:
            per_project[project] = None
            continue
        amount = minutes / 60.0 * float(rate)
        per_project[project] = amount
        total_billed += amount
    return BilledTotals(
        per_project=per_project,
        total_minutes=sum(totals.values()),
        total_billed=total_billed,
    )


def build_report(
    extracted: Mapping[str, Sequence[LedgerRow]],
    date_range: DateRange,
    rates: Optional[RateTable] = None,
    include_zero: bool = True,
) -> Report:
    """
    Build a report for every calendar day of a range.

    Parameters
    ----------
    extracted : Mapping[str, Sequence[LedgerRow]]
        Rows grouped by date, as returned by ``Ledger.extract``.
    date_range : DateRange
        Inclusive range to report on.
    rates : Optional[RateTable], optional
        Hourly rates per project.
    include_zero : bool, optional
        Keep zero-minute rows (default: True).

    Returns
    -------
    Report
        Per-day totals and range totals.
    """
    days: List[DayReport] = []
    in_range: List[LedgerRow] = []
    for day in expand_range(*date_range):
        rows = list(extracted.get(day, ()))
        in_range.extend(rows)
        day_totals = sum_totals(rows, include_zero)
        days.append(DayReport(date=day, totals=day_totals, billing=billed(day_totals, rates)))
    totals = sum_totals(in_range, include_zero)
    return Report(
        date_range=(days[0].date, days[-1].date),
        days=days,
        totals=totals,
        billing=billed(totals, rates),
    )


def format_minutes(minutes: int) -> str:
    """
    Format minutes as ``H:MM``.

    Examples
    --------
    >>> format_minutes(150)
    '2:30'
    >>> format_minutes(5)
    '0:05'
    """
    hours, rest = divmod(int(minutes), 60)
    return f"{hours}:{rest:02d}"


def _amount_column(amount: Optional[float]) -> str:
    return UNBILLABLE if amount is None else f"{amount:.2f}"


def _line(label: str, width: int, minutes: int, amount: Optional[str]) -> str:
    line = f"  {label:<{width}}  {minutes:>5}  {format_minutes(minutes):>7}"
    if amount is not None:
        line += f"  {amount:>10}"
    return line


def format_report(report: Report, full: bool = False) -> List[str]:
    """
    Render a report as text lines.

    The billed column appears when at least one reported project has a rate.

    Parameters
    ----------
    report : Report
        Report to render.
    full : bool, optional
        Include the per-day breakdown before the range summary.

    Returns
    -------
    List[str]
        Output lines.

    Examples
    --------
    >>> rows = {"2024-03-01": [LedgerRow("2024-03-01", "eng", 90, "x")]}
    >>> report = build_report(rows, ("2024-03-01", "2024-03-02"), {"eng": 100.0})
    >>> for line in format_report(report, full=True):
    ...     print(line)
    2024-03-01
      eng       90     1:30      150.00
    2024-03-02  no data
    2024-03-01 .. 2024-03-02
      eng       90     1:30      150.00
      TOTAL     90     1:30      150.00
    """
    start, end = report.date_range
    width = max([len(project) for project in report.totals] + [len("TOTAL")])
    show_billing = any(amount is not None for amount in report.billing.per_project.values())
    lines: List[str] = []
    if full:
        for day in report.days:
            if not day.has_data:
                lines.append(f"{day.date}  {NO_DATA}")
                continue
            lines.append(day.date)
            for project in sorted(day.totals):
                amount = day.billing.per_project.get(project) if day.billing else None
                lines.append(
                    _line(
                        project,
                        width,
                        day.totals[project],
                        _amount_column(amount) if show_billing else None,
                    )
                )
    lines.append(start if start == end else f"{start} .. {end}")
    if not report.totals:
        lines.append(f"  {NO_DATA}")
        return lines
    for project in sorted(report.totals):
        amount = report.billing.per_project.get(project)
        lines.append(
            _line(
                project,
                width,
                report.totals[project],
                _amount_column(amount) if show_billing else None,
            )
        )
    lines.append(
        _line(
            "TOTAL",
            width,
            report.billing.total_minutes,
            f"{report.billing.total_billed:.2f}" if show_billing else None,
        )
    )
    return lines
