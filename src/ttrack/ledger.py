#!/usr/bin/env python3
"""
Append-only text ledger of tracked time.

Each row is one line::

    2024-03-15  eng   90  Reviewed the parser changes

Fields are separated by any run of whitespace; only the writer pads columns.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

from .dates import DateRange, is_canonical, normalize_range
from .errors import LedgerIOError, ParseError
from .logging_setup import get_logger

DEFAULT_LEDGER_PATH = "~/.timetrack"

NEWLINE_RUN_RE = re.compile(r"[\r\n]+")
COMMENT_JOINER = ".  "


@dataclass(frozen=True)
class LedgerRow:
    """
    One tracked entry.

    Attributes
    ----------
    date : str
        Canonical date the time was spent on.
    project : str
        Project name (no whitespace).
    minutes : int
        Minutes spent.
    comment : str
        Single-line comment.
    """

    date: str
    project: str
    minutes: int
    comment: str = ""


def normalize_comment(text: Optional[str]) -> str:
    """
    Collapse embedded newlines so a comment fits on one ledger line.

    Examples
    --------
    >>> normalize_comment("fixed bug\\nwrote tests")
    'fixed bug.  wrote tests'
    >>> normalize_comment("trailing\\r\\n")
    'trailing'
    """
    text = str(text or "").strip()
    return NEWLINE_RUN_RE.sub(COMMENT_JOINER, text)


def format_row(row: LedgerRow) -> str:
    """
    Format a row as a ledger line (without the newline).

    Examples
    --------
    >>> format_row(LedgerRow("2024-03-15", "eng", 90, "review"))
    '2024-03-15  eng   90  review'
    """
    return f"{row.date}  {row.project}  {row.minutes:>3}  {row.comment}".rstrip()


def parse_row(line: str) -> Optional[LedgerRow]:
    """
    Parse one ledger line.

    Parameters
    ----------
    line : str
        Raw line, with or without its newline.

    Returns
    -------
    Optional[LedgerRow]
        Parsed row, or None for lines that do not start with a date.

    Raises
    ------
    ParseError
        If a dated line lacks a project or an integer minutes field.

    Examples
    --------
    >>> parse_row("2024-03-15 eng\\t\\t 90   two  words\\n")
    LedgerRow(date='2024-03-15', project='eng', minutes=90, comment='two  words')
    >>> parse_row("# notes") is None
    True
    """
    fields = line.rstrip("\r\n").split(None, 3)
    if not fields or not is_canonical(fields[0]):
        return None
    if len(fields) < 3:
        raise ParseError(f"incomplete ledger line: {line.strip()!r}", token=line.strip())
    try:
        minutes = int(fields[2])
    except ValueError as exc:
        raise ParseError(
            f"invalid minutes {fields[2]!r} in ledger line", token=line.strip()
        ) from exc
    comment = fields[3].rstrip() if len(fields) > 3 else ""
    return LedgerRow(date=fields[0], project=fields[1], minutes=minutes, comment=comment)


def validate_row(row: LedgerRow) -> None:
    """
    Ensure a row can be written and read back unchanged.
    """
    if not is_canonical(row.date):
        raise ParseError(f"not a canonical date: {row.date!r}", token=row.date)
    if not row.project or any(char.isspace() for char in row.project):
        raise ParseError(
            f"project name must be one non-empty word: {row.project!r}",
            token=row.project,
        )
    if isinstance(row.minutes, bool) or not isinstance(row.minutes, int) or row.minutes < 0:
        raise ParseError(f"minutes must be a non-negative integer: {row.minutes!r}")


class Ledger:
    """
    Line-oriented, append-only ledger file.

    No locking is performed. Appends are single ``write`` calls of one line,
    so concurrent writers can only interleave whole rows.
    """

    def __init__(
        self,
        path: Union[str, Path, None] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.path = Path(os.path.expanduser(str(path or DEFAULT_LEDGER_PATH)))
        self.logger = logger or get_logger(__name__)

    def exists(self) -> bool:
        return self.path.is_file()

    def mtime(self) -> Optional[float]:
        """
        Return the last modification time, or None when the ledger is missing.
        """
        try:
            return self.path.stat().st_mtime
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise LedgerIOError(self.path, exc, action="stat") from exc

    def append(self, date: str, project: str, minutes: int, comment: str = "") -> LedgerRow:
        """
        Append one row.

        Parameters
        ----------
        date : str
            Canonical date.
        project : str
            Project name.
        minutes : int
            Minutes spent.
        comment : str, optional
            Free text; embedded newlines are collapsed.

        Returns
        -------
        LedgerRow
            Row as written.

        Raises
        ------
        ParseError
            If the row fields are invalid.
        LedgerIOError
            If the ledger cannot be opened or written.
        """
        row = LedgerRow(
            date=date,
            project=project,
            minutes=minutes,
            comment=normalize_comment(comment),
        )
        validate_row(row)
        line = format_row(row) + "\n"
        try:
            with self.path.open("a", encoding="utf-8") as handle:
                handle.write(line)
        except OSError as exc:
            raise LedgerIOError(self.path, exc, action="append to") from exc
        self.logger.debug("appended to %s: %s", self.path, line.rstrip())
        return row

    def rows(self) -> Iterator[LedgerRow]:
        """
        Yield every row in file order, reading the ledger once.

        A missing ledger yields nothing. Dated lines that cannot be parsed are
        reported through the logger and skipped; a line that is not UTF-8
        raises ``LedgerIOError`` naming its line number.
        """
        try:
            handle = self.path.open("rb")
        except FileNotFoundError:
            self.logger.debug("ledger %s does not exist yet", self.path)
            return
        except OSError as exc:
            raise LedgerIOError(self.path, exc, action="read") from exc
        with handle:
            try:
                for number, raw in enumerate(handle, start=1):
                    try:
                        line = raw.decode("utf-8")
                    except UnicodeDecodeError as exc:
                        raise LedgerIOError(self.path, exc, action="decode", line=number) from exc
                    try:
                        row = parse_row(line)
                    except ParseError as exc:
                        self.logger.warning("%s:%d: %s", self.path, number, exc)
                        continue
                    if row is not None:
                        yield row
            except OSError as exc:
                raise LedgerIOError(self.path, exc, action="read") from exc

    def extract(self, date_range: DateRange) -> Dict[str, List[LedgerRow]]:
        """
        Group the rows dated within an inclusive range by date.

        Parameters
        ----------
        date_range : DateRange
            ``(start, end)`` canonical dates.

        Returns
        -------
        Dict[str, List[LedgerRow]]
            Rows per date; dates in order of first appearance, rows in file order.
        """
        start, end = normalize_range(*date_range)
        grouped: Dict[str, List[LedgerRow]] = {}
        for row in self.rows():
            if start <= row.date <= end:
                grouped.setdefault(row.date, []).append(row)
        return grouped

    def projects(self) -> List[str]:
        """
        Return distinct project names in order of first appearance.
        """
        seen: Dict[str, None] = {}
        for row in self.rows():
            seen.setdefault(row.project, None)
        return list(seen)

    def touch(self) -> None:
        """
        Update the modification time without changing content.
        """
        try:
            self.path.touch(exist_ok=True)
        except OSError as exc:
            raise LedgerIOError(self.path, exc, action="touch") from exc
