"""Shared helpers for CLI commands."""

from __future__ import annotations

__all__ = [
    "config_option",
    "facts_file_option",
    "load_config_or_exit",
    "make_fact_source",
    "resolve_config_path",
    "setup_logging",
]

import sys
from pathlib import Path

import click

from hwready.config import AppConfig, get_config_path, get_system_log_path
from hwready.exceptions import ConfigurationError, FactCollectionError
from hwready.facts import FactSource, StaticFactSource, WindowsFactSource
from hwready.telemetry.system_logger import configure_system_logger_file, set_console_level

from .styling import style_error

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: OS app directory)",
)

facts_file_option = click.option(
    "--facts-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Evaluate facts from a JSON file instead of probing this host",
)


def resolve_config_path(config_path: Path | None) -> Path:
    return config_path if config_path is not None else get_config_path()


def load_config_or_exit(config_path: Path | None) -> AppConfig:
    """Load the config, or print a styled error and exit 1."""
    path = resolve_config_path(config_path)
    try:
        return AppConfig.load_from_files(path)
    except (FileNotFoundError, ConfigurationError) as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(1)


def setup_logging(config: AppConfig, *, quiet: bool = False) -> None:
    """Apply the config's logging settings. quiet=True limits stderr to warnings (for --json)."""
    set_console_level("WARNING" if quiet else config.logging.log_level)
    configure_system_logger_file(get_system_log_path(config))


def make_fact_source(facts_file: Path | None) -> FactSource:
    """Fact source for a command: the facts file if given, else this host.

    A facts file that cannot be loaded is a usage error (exit 1), not a
    FAILED_TO_RUN verdict.
    """
    if facts_file is None:
        return WindowsFactSource()
    try:
        return StaticFactSource.from_file(facts_file)
    except FactCollectionError as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(1)
