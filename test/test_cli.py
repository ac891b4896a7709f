"""
Tests for the ttrack command line.
"""

from __future__ import annotations

import pytest
from typer.testing import CliRunner

import ttrack
import ttrack.editor as editor
from ttrack.ledger import Ledger


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def ledger_path(tmp_path):
    return tmp_path / "timetrack"


@pytest.mark.unit
def test_add_appends_and_echoes(runner, ledger_path):
    """
    Verify `add` records an entry and prints the ledger line.

    Returns
    -------
    None
        This test asserts the add command.
    """
    result = runner.invoke(
        ttrack.build_app(),
        ["add", "--date", "2024-3-15", "eng", "1h", "pairing", "session"],
    )

    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "2024-03-15  eng   60  pairing session"
    assert ledger_path.read_text(encoding="utf-8") == "2024-03-15  eng   60  pairing session\n"


@pytest.mark.unit
def test_add_rejects_bad_duration(runner, ledger_path):
    """
    Verify invalid durations are reported with a non-zero exit.

    Returns
    -------
    None
        This test asserts add failures.
    """
    result = runner.invoke(ttrack.build_app(), ["add", "eng", "abc"])

    assert result.exit_code == 1
    assert "not a valid time spec" in result.output
    assert "'abc'" in result.output
    assert not ledger_path.exists()


@pytest.mark.unit
def test_report_full_week(runner, ledger_path):
    """
    Verify `report` prints per-day and range totals.

    Returns
    -------
    None
        This test asserts the report command.
    """
    ledger = Ledger(ledger_path)
    ledger.append("2024-03-11", "eng", 90, "a")
    ledger.append("2024-03-12", "ops", 30, "b")

    result = runner.invoke(
        ttrack.build_app(),
        ["report", "week", "--date", "2024-03-15", "--full"],
    )

    assert result.exit_code == 0, result.output
    lines = result.stdout.splitlines()
    assert lines[0] == "2024-03-10  no data"
    assert "2024-03-10 .. 2024-03-16" in lines
    assert lines[-1].split() == ["TOTAL", "120", "2:00"]


@pytest.mark.unit
def test_report_uses_config_week_start_and_rates(runner, ledger_path, tmp_path, monkeypatch):
    """
    Verify config settings reach the report.

    Returns
    -------
    None
        This test asserts config integration.
    """
    config_path = tmp_path / "config.toml"
    config_path.write_text('week_start = "monday"\n[rates]\neng = 30\n', encoding="utf-8")
    monkeypatch.setenv("TTRACK_CONFIG", str(config_path))
    Ledger(ledger_path).append("2024-03-17", "eng", 120, "sunday work")

    result = runner.invoke(ttrack.build_app(), ["report", "w", "-d", "2024-03-15"])

    assert result.exit_code == 0, result.output
    lines = result.stdout.splitlines()
    assert lines[0] == "2024-03-11 .. 2024-03-17"
    assert lines[-1].split() == ["TOTAL", "120", "2:00", "60.00"]


@pytest.mark.unit
def test_report_bad_reference_date_fails(runner):
    """
    Verify a malformed reference date aborts the report.

    Returns
    -------
    None
        This test asserts report failures.
    """
    result = runner.invoke(ttrack.build_app(), ["report", "--date", "whenever"])
    assert result.exit_code == 1
    assert "whenever" in result.output


@pytest.mark.unit
def test_report_non_utf8_ledger_fails_cleanly(runner, ledger_path):
    """
    Verify an undecodable ledger aborts with a ttrack message, not a traceback.

    Returns
    -------
    None
        This test asserts ledger decode failures.
    """
    ledger_path.write_bytes(b"2024-03-15  eng   30  caf\xe9\n")

    result = runner.invoke(ttrack.build_app(), ["report", "--date", "2024-03-15"])

    assert result.exit_code == 1
    assert not isinstance(result.exception, UnicodeDecodeError)
    assert "ttrack: report failed: cannot decode ledger" in result.output


@pytest.mark.unit
def test_report_non_utf8_config_fails_cleanly(runner, tmp_path, monkeypatch):
    """
    Verify an undecodable config aborts with a ttrack message, not a traceback.

    Returns
    -------
    None
        This test asserts config decode failures.
    """
    config_path = tmp_path / "config.toml"
    config_path.write_bytes(b'ledger = "caf\xe9"\n')
    monkeypatch.setenv("TTRACK_CONFIG", str(config_path))

    result = runner.invoke(ttrack.build_app(), ["report"])

    assert result.exit_code == 1
    assert not isinstance(result.exception, UnicodeDecodeError)
    assert "cannot load config" in result.output


@pytest.mark.unit
def test_entries_lists_rows(runner, ledger_path):
    """
    Verify `entries` prints rows in range and a notice when empty.

    Returns
    -------
    None
        This test asserts the entries command.
    """
    Ledger(ledger_path).append("2024-03-12", "eng", 15, "standup")

    found = runner.invoke(ttrack.build_app(), ["entries", "2024-03-10:2024-03-16"])
    empty = runner.invoke(ttrack.build_app(), ["entries", "2024-04-01"])

    assert found.stdout.splitlines() == ["2024-03-12  eng   15  standup"]
    assert empty.stdout.strip() == "No entries found."


@pytest.mark.unit
def test_since_and_kill(runner, ledger_path):
    """
    Verify `since` reports unavailability and `kill` creates freshness.

    Returns
    -------
    None
        This test asserts freshness commands.
    """
    missing = runner.invoke(ttrack.build_app(), ["since"])
    assert missing.exit_code == 1
    assert missing.stdout.strip() == "-"

    killed = runner.invoke(ttrack.build_app(), ["kill"])
    assert killed.exit_code == 0

    fresh = runner.invoke(ttrack.build_app(), ["since"])
    assert fresh.exit_code == 0
    assert fresh.stdout.strip() == "0 (0:00)"


@pytest.mark.unit
def test_ledger_option_overrides_environment(runner, tmp_path):
    """
    Verify `--ledger` selects another ledger file.

    Returns
    -------
    None
        This test asserts the global ledger option.
    """
    other = tmp_path / "other-ledger"
    result = runner.invoke(
        ttrack.build_app(),
        ["--ledger", str(other), "add", "-d", "2024-03-01", "ops", "5"],
    )

    assert result.exit_code == 0, result.output
    assert other.exists()
    projects = runner.invoke(ttrack.build_app(), ["--ledger", str(other), "projects"])
    assert projects.stdout.splitlines() == ["ops"]


@pytest.mark.unit
def test_edit_runs_editor_on_ledger(runner, ledger_path, monkeypatch):
    """
    Verify `edit` launches the configured editor with the ledger path.

    Returns
    -------
    None
        This test asserts editor delegation.
    """
    calls = []

    class Completed:
        returncode = 0

    def fake_run(args, check=False):
        calls.append(args)
        return Completed()

    monkeypatch.setenv("EDITOR", "nano -w")
    monkeypatch.delenv("VISUAL", raising=False)
    monkeypatch.setattr(editor.subprocess, "run", fake_run)

    result = runner.invoke(ttrack.build_app(), ["edit"])

    assert result.exit_code == 0, result.output
    assert calls == [["nano", "-w", str(ledger_path)]]


@pytest.mark.unit
def test_edit_reports_missing_editor(runner, monkeypatch):
    """
    Verify a missing editor executable is reported.

    Returns
    -------
    None
        This test asserts editor failures.
    """

    def missing_editor(args, check=False):
        raise FileNotFoundError(2, "No such file or directory", args[0])

    monkeypatch.setattr(editor.subprocess, "run", missing_editor)

    result = runner.invoke(ttrack.build_app(), ["edit"])

    assert result.exit_code == 1
    assert "edit failed" in result.output
