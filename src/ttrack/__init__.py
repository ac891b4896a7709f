#!/usr/bin/env python3
"""
Personal time-tracking ledger: record entries and report totals over periods.
"""

import dataclasses
import sys
from typing import List, Optional, Sequence

from .aggregate import format_minutes
from .config import TrackContext, build_context, expand_path, load_config
from .errors import TrackError
from .ledger import format_row
from .logging_setup import configure_logging, get_logger

__all__ = ["build_app", "load_context", "main"]


def load_context(
    ledger: Optional[str] = None,
    reference_date: Optional[str] = None,
) -> TrackContext:
    """
    Load settings and build the context for one command.

    Parameters
    ----------
    ledger : Optional[str], optional
        Ledger path overriding the configured one.
    reference_date : Optional[str], optional
        Canonical reference date (default: today).

    Returns
    -------
    TrackContext
        Context for service calls.
    """
    logger = get_logger("ttrack")
    config = load_config(logger=logger)
    if ledger:
        config = dataclasses.replace(config, ledger_path=expand_path(ledger))
    return build_context(config, reference_date=reference_date, logger=logger)


def _report_failure(action: str, exc: Exception) -> int:
    print(f"ttrack: {action} failed: {exc}", file=sys.stderr)
    return 1


def run_add(
    project: str,
    duration_spec: Optional[str],
    comment_words: Sequence[str],
    *,
    date_spec: Optional[str] = None,
    ledger: Optional[str] = None,
) -> int:
    """
    Record an entry and echo the ledger line.
    """
    from . import service

    try:
        ctx = load_context(ledger)
        row = service.record(ctx, date_spec, project, duration_spec, comment_words)
    except TrackError as exc:
        return _report_failure("add", exc)
    print(format_row(row))
    return 0


def run_report(
    period: Optional[str],
    *,
    date_spec: Optional[str] = None,
    full: bool = False,
    include_zero: bool = True,
    ledger: Optional[str] = None,
) -> int:
    """
    Print totals for a period.
    """
    from . import service

    try:
        ctx = load_context(ledger)
        lines = service.report(
            ctx,
            period,
            reference_spec=date_spec,
            full=full,
            include_zero=include_zero,
        )
    except TrackError as exc:
        return _report_failure("report", exc)
    for line in lines:
        print(line)
    return 0


def run_entries(
    period: Optional[str],
    *,
    date_spec: Optional[str] = None,
    ledger: Optional[str] = None,
) -> int:
    """
    Print the raw rows in a period.
    """
    from . import service

    try:
        ctx = load_context(ledger)
        rows = service.entries(ctx, period, reference_spec=date_spec)
    except TrackError as exc:
        return _report_failure("entries", exc)
    if not rows:
        print("No entries found.")
        return 0
    for row in rows:
        print(format_row(row))
    return 0


def run_since(*, ledger: Optional[str] = None) -> int:
    """
    Print minutes since the last ledger write, or ``-`` when there is no ledger.
    """
    from . import service

    try:
        ctx = load_context(ledger)
        minutes = service.freshness(ctx)
    except TrackError as exc:
        return _report_failure("since", exc)
    if minutes is None:
        print("-")
        return 1
    print(f"{minutes} ({format_minutes(minutes)})")
    return 0


def run_kill(*, ledger: Optional[str] = None) -> int:
    """
    Reset the ledger's freshness without changing its rows.
    """
    from . import service

    try:
        ctx = load_context(ledger)
        service.reset_freshness(ctx)
    except TrackError as exc:
        return _report_failure("kill", exc)
    return 0


def run_projects(*, ledger: Optional[str] = None) -> int:
    from . import service

    try:
        ctx = load_context(ledger)
        names = service.projects(ctx)
    except TrackError as exc:
        return _report_failure("projects", exc)
    for name in names:
        print(name)
    return 0


def run_edit(*, ledger: Optional[str] = None) -> int:
    """
    Open the ledger in ``$VISUAL``/``$EDITOR``.
    """
    from .editor import open_in_editor

    try:
        ctx = load_context(ledger)
    except TrackError as exc:
        return _report_failure("edit", exc)
    try:
        return open_in_editor(ctx.ledger_path)
    except FileNotFoundError as exc:
        return _report_failure("edit", exc)


def build_app():
    """
    Build the Typer app lazily to keep fast-path imports light.

    Returns
    -------
    typer.Typer
        Configured Typer application for the ttrack CLI.
    """
    import typer

    app = typer.Typer(help="Record time against projects and report totals.")

    @app.callback()
    def main_callback(
        ctx: typer.Context,
        log_level: Optional[str] = typer.Option(
            None,
            "--log-level",
            help="Diagnostics level (DEBUG/INFO/WARNING/ERROR).",
        ),
        ledger: Optional[str] = typer.Option(
            None,
            "--ledger",
            help="Ledger file (default: config 'ledger' or ~/.timetrack).",
        ),
    ):
        configure_logging(log_level)
        ctx.obj = {"ledger": ledger}

    def _ledger(ctx: typer.Context) -> Optional[str]:
        return (ctx.obj or {}).get("ledger")

    @app.command("add")
    def add_cmd(
        ctx: typer.Context,
        project: str = typer.Argument(..., help="Project name."),
        duration: str = typer.Argument(
            "",
            help="Minutes, 1h30m, 1.5h, 30m1h, or 's' for time since the last entry.",
        ),
        comment: Optional[List[str]] = typer.Argument(None, help="Comment words."),
        date: Optional[str] = typer.Option(
            None,
            "--date",
            "-d",
            help="Entry date (2d, 1w, YYYY-M-D, M/D/YYYY, 'Jul 4 2024').",
        ),
    ):
        """
        Append an entry to the ledger.
        """
        exit_code = run_add(
            project,
            duration,
            comment or [],
            date_spec=date,
            ledger=_ledger(ctx),
        )
        raise typer.Exit(code=exit_code)

    @app.command("report")
    def report_cmd(
        ctx: typer.Context,
        period: Optional[str] = typer.Argument(
            None,
            help="day, week/w, month, mtd/m, year, ytd/y, or A[:B] range.",
        ),
        date: Optional[str] = typer.Option(
            None,
            "--date",
            "-d",
            help="Reference date the period is anchored on (default: today).",
        ),
        full: bool = typer.Option(
            False,
            "--full",
            "-f",
            help="Show a per-day breakdown.",
        ),
        billable_only: bool = typer.Option(
            False,
            "--billable-only",
            help="Leave out zero-minute entries.",
        ),
    ):
        """
        Print per-project totals for a period.
        """
        exit_code = run_report(
            period,
            date_spec=date,
            full=full,
            include_zero=not billable_only,
            ledger=_ledger(ctx),
        )
        raise typer.Exit(code=exit_code)

    @app.command("entries")
    def entries_cmd(
        ctx: typer.Context,
        period: Optional[str] = typer.Argument(None, help="Period token or range."),
        date: Optional[str] = typer.Option(
            None,
            "--date",
            "-d",
            help="Reference date the period is anchored on (default: today).",
        ),
    ):
        """
        List ledger rows in a period.
        """
        exit_code = run_entries(period, date_spec=date, ledger=_ledger(ctx))
        raise typer.Exit(code=exit_code)

    @app.command("since")
    def since_cmd(ctx: typer.Context):
        """
        Print minutes since the last ledger write.
        """
        raise typer.Exit(code=run_since(ledger=_ledger(ctx)))

    @app.command("kill")
    def kill_cmd(ctx: typer.Context):
        """
        Reset the time since the last ledger write.
        """
        raise typer.Exit(code=run_kill(ledger=_ledger(ctx)))

    @app.command("projects")
    def projects_cmd(ctx: typer.Context):
        """
        List projects found in the ledger.
        """
        raise typer.Exit(code=run_projects(ledger=_ledger(ctx)))

    @app.command("edit")
    def edit_cmd(ctx: typer.Context):
        """
        Open the ledger in your editor.
        """
        raise typer.Exit(code=run_edit(ledger=_ledger(ctx)))

    return app


def main():
    """
    Entry point for the ttrack command.
    """
    app = build_app()
    app()


if __name__ == "__main__":
    main()
