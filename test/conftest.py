"""
Shared pytest fixtures for ttrack tests.
"""

from __future__ import annotations

import logging
import time

import pytest

import ttrack.logging_setup as logging_setup


@pytest.fixture(autouse=True)
def isolate_ledger_and_config(tmp_path, monkeypatch) -> None:
    """
    Ensure tests never read the real config or write the real ledger.

    Parameters
    ----------
    tmp_path : pathlib.Path
        Temporary path provided by pytest.
    monkeypatch : pytest.MonkeyPatch
        Monkeypatch fixture for environment updates.
    """
    monkeypatch.setenv("TTRACK_CONFIG", str(tmp_path / "missing-config.toml"))
    monkeypatch.setenv("TTRACK_LEDGER", str(tmp_path / "timetrack"))
    monkeypatch.delenv("TTRACK_LOG_LEVEL", raising=False)


@pytest.fixture(autouse=True)
def reset_logging():
    """
    Undo CLI logging configuration between tests.
    """
    yield
    logger = logging.getLogger("ttrack")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    logging_setup._CONFIGURED = False


@pytest.fixture
def new_york_tz(monkeypatch):
    """
    Pin the process timezone to America/New_York.
    """
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is unavailable on this platform")
    monkeypatch.setenv("TZ", "America/New_York")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()
