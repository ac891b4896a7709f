"""
Tests for duration specs and ledger freshness.
"""

from __future__ import annotations

import doctest
import os

import pytest

import ttrack.duration as duration
from ttrack.errors import FreshnessUnavailableError, ParseError


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("", 0),
        (None, 0),
        ("45", 45),
        ("0", 0),
        ("1h30m", 90),
        ("30m1h", 90),
        ("2h", 120),
        ("15m", 15),
        ("1.5h", 90),
        ("0.25h10m", 25),
        ("10m0.5h", 40),
    ],
)
@pytest.mark.unit
def test_parse_duration_spec(token, expected):
    """
    Ensure duration specs parse into minutes.

    Returns
    -------
    None
        This test asserts duration parsing.
    """
    assert duration.parse_duration_spec(token) == expected


@pytest.mark.parametrize("token", ["abc", "h", "m", "1h2h", "1x", "-5", "1.5m", "1 h"])
@pytest.mark.unit
def test_parse_duration_spec_rejects(token):
    """
    Ensure invalid duration specs raise ParseError.

    Returns
    -------
    None
        This test asserts duration failures.
    """
    with pytest.raises(ParseError, match="not a valid time spec"):
        duration.parse_duration_spec(token)


@pytest.mark.unit
def test_since_last_write_uses_ledger_mtime(tmp_path):
    """
    Ensure ``s`` measures minutes since the ledger was modified.

    Returns
    -------
    None
        This test asserts the since-last-write duration.
    """
    ledger = tmp_path / "ledger"
    ledger.write_text("", encoding="utf-8")
    os.utime(ledger, (1_700_000_000, 1_700_000_000))

    assert duration.parse_duration_spec("s", ledger, now=1_700_000_000 + 25 * 60 + 40) == 26
    assert duration.freshness(ledger, now=1_700_000_000 + 89) == 1


@pytest.mark.unit
def test_freshness_clamps_future_mtime(tmp_path):
    """
    Ensure a ledger modified in the future reports zero minutes.

    Returns
    -------
    None
        This test asserts clock-skew handling.
    """
    ledger = tmp_path / "ledger"
    ledger.write_text("", encoding="utf-8")
    os.utime(ledger, (1_700_000_000, 1_700_000_000))

    assert duration.freshness(ledger, now=1_700_000_000 - 5 * 60) == 0
    assert duration.parse_duration_spec("s", ledger, now=1_700_000_000 - 5 * 60) == 0


@pytest.mark.unit
def test_since_last_write_without_ledger(tmp_path):
    """
    Ensure ``s`` signals unavailability when there is no ledger.

    Returns
    -------
    None
        This test asserts missing-ledger handling.
    """
    missing = tmp_path / "missing"
    assert duration.freshness(missing) is None
    with pytest.raises(FreshnessUnavailableError):
        duration.parse_duration_spec("s", missing)


@pytest.mark.unit
def test_reset_freshness_keeps_content(tmp_path):
    """
    Ensure resetting freshness touches mtime without changing rows.

    Returns
    -------
    None
        This test asserts the kill behavior.
    """
    ledger = tmp_path / "ledger"
    ledger.write_text("2024-01-01  eng   60  x\n", encoding="utf-8")
    os.utime(ledger, (1_000_000, 1_000_000))

    duration.reset_freshness(ledger)

    assert ledger.stat().st_mtime > 1_000_000
    assert ledger.read_text(encoding="utf-8") == "2024-01-01  eng   60  x\n"


@pytest.mark.unit
def test_duration_doctest_examples():
    """
    Run doctest examples embedded in duration docstrings.

    Returns
    -------
    None
        This test asserts doctest coverage for duration helpers.
    """
    results = doctest.testmod(duration)
    assert results.failed == 0
