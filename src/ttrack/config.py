#!/usr/bin/env python3
"""
Load ttrack settings and build the per-invocation context.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import tomllib

from .dates import current_date, parse_weekday
from .errors import ConfigError
from .ledger import DEFAULT_LEDGER_PATH
from .logging_setup import get_logger

DEFAULT_WEEK_START = 0


@dataclass(frozen=True)
class TrackConfig:
    """
    Settings read from the config file.

    Attributes
    ----------
    ledger_path : Path
        Ledger file location.
    week_start : Optional[int]
        First day of the week, 0 = Sunday; None when the configured value
        was not recognized.
    rates : Dict[str, float]
        Hourly rate per project.
    """

    ledger_path: Path = field(default_factory=lambda: expand_path(DEFAULT_LEDGER_PATH))
    week_start: Optional[int] = DEFAULT_WEEK_START
    rates: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class TrackContext:
    """
    Explicit state for one invocation.

    Attributes
    ----------
    reference_date : str
        Canonical date periods are resolved against.
    week_start : Optional[int]
        First day of the week, 0 = Sunday.
    rates : Dict[str, float]
        Hourly rate per project.
    ledger_path : Path
        Ledger file location.
    logger : logging.Logger
        Destination for diagnostics (silent unless logging is configured).
    """

    reference_date: str
    week_start: Optional[int] = DEFAULT_WEEK_START
    rates: Dict[str, float] = field(default_factory=dict)
    ledger_path: Path = field(default_factory=lambda: expand_path(DEFAULT_LEDGER_PATH))
    logger: logging.Logger = field(default_factory=lambda: get_logger("ttrack"))


def expand_path(value: str) -> Path:
    """
    Expand ``~`` and environment variables in a path.

    Examples
    --------
    >>> str(expand_path("/tmp/ledger"))
    '/tmp/ledger'
    """
    return Path(os.path.expandvars(os.path.expanduser(value)))


def get_config_path() -> Path:
    """
    Return the config file path.

    Returns
    -------
    Path
        ``$TTRACK_CONFIG`` when set, else ``~/.config/ttrack/config.toml``.

    Examples
    --------
    >>> isinstance(get_config_path(), Path)
    True
    """
    override = os.environ.get("TTRACK_CONFIG", "").strip()
    if override:
        return expand_path(override)
    return Path.home() / ".config" / "ttrack" / "config.toml"


def _parse_rates(raw: Any, path: Path) -> Dict[str, float]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: [rates] must be a table of project = rate")
    rates: Dict[str, float] = {}
    for project, value in raw.items():
        if isinstance(value, bool):
            raise ConfigError(f"{path}: rate for {project!r} is not a number")
        try:
            rates[str(project)] = float(value)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"{path}: rate for {project!r} is not a number") from exc
    return rates


def parse_config(
    parsed: Dict[str, Any],
    path: Path,
    logger: Optional[logging.Logger] = None,
) -> TrackConfig:
    """
    Build settings from a parsed TOML document.

    Examples
    --------
    >>> config = parse_config(
    ...     {"week_start": "monday", "rates": {"eng": 120}}, Path("config.toml")
    ... )
    >>> config.week_start, config.rates
    (1, {'eng': 120.0})
    """
    logger = logger or get_logger(__name__)
    week_start: Optional[int] = DEFAULT_WEEK_START
    if "week_start" in parsed:
        week_start = parse_weekday(parsed["week_start"])
        if week_start is None:
            logger.warning(
                "%s: unrecognized week_start %r", path, parsed["week_start"]
            )
    ledger_value = parsed.get("ledger") or DEFAULT_LEDGER_PATH
    env_ledger = os.environ.get("TTRACK_LEDGER", "").strip()
    if env_ledger:
        ledger_value = env_ledger
    return TrackConfig(
        ledger_path=expand_path(str(ledger_value)),
        week_start=week_start,
        rates=_parse_rates(parsed.get("rates"), path),
    )


def load_config(
    path: Optional[Path] = None,
    logger: Optional[logging.Logger] = None,
) -> TrackConfig:
    """
    Load settings from disk.

    Parameters
    ----------
    path : Optional[Path], optional
        Config file (defaults to ``get_config_path()``).
    logger : Optional[logging.Logger], optional
        Receives config warnings.

    Returns
    -------
    TrackConfig
        Parsed settings; defaults when the file does not exist.

    Raises
    ------
    ConfigError
        If the file cannot be read, is not UTF-8 or is not valid TOML.
    """
    config_path = path or get_config_path()
    if not config_path.exists():
        return parse_config({}, config_path, logger=logger)
    try:
        raw_text = config_path.read_text(encoding="utf-8")
        parsed = tomllib.loads(raw_text)
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"cannot load config {config_path}: {exc}") from exc
    return parse_config(parsed, config_path, logger=logger)


def build_context(
    config: TrackConfig,
    reference_date: Optional[str] = None,
    logger: Optional[logging.Logger] = None,
) -> TrackContext:
    """
    Combine settings with the reference date for one invocation.
    """
    return TrackContext(
        reference_date=reference_date or current_date(),
        week_start=config.week_start,
        rates=dict(config.rates),
        ledger_path=config.ledger_path,
        logger=logger or get_logger("ttrack"),
    )
