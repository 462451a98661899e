"""Config command group: show the active configuration and its location."""

from __future__ import annotations

__all__ = ["config"]

import json
from pathlib import Path

import click

from hwready.config import get_system_log_path

from ..helpers import config_option, load_config_or_exit, resolve_config_path
from ..styling import style_header


@click.group()
def config() -> None:
    """Configuration management commands."""


@config.command("show")
@config_option
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def config_show(config_path: Path | None, as_json: bool) -> None:
    """Display the current configuration."""
    path = resolve_config_path(config_path)
    loaded = load_config_or_exit(path)

    if as_json:
        data = loaded.model_dump(mode="json")
        data["_computed"] = {
            "config_file": str(path),
            "system_log": str(get_system_log_path(loaded)),
        }
        click.echo(json.dumps(data, indent=2))
        return

    click.echo(f"\nhwready configuration ({path}):\n")
    click.echo(style_header("Destination"))
    click.echo(f"  kind: {loaded.destination.kind}")
    if loaded.destination.kind == "http":
        click.echo(f"  url: {loaded.destination.url}")
        click.echo(f"  timeout_seconds: {loaded.destination.timeout_seconds}")
    else:
        click.echo(f"  path: {loaded.destination.path}")
    click.echo()
    click.echo(style_header("State"))
    click.echo(f"  marker_path: {loaded.state.marker_path}")
    click.echo(f"  queue_dir: {loaded.state.queue_dir}")
    click.echo()
    click.echo(style_header("Logging"))
    click.echo(f"  log_dir: {loaded.logging.log_dir}")
    click.echo(f"  log_level: {loaded.logging.log_level}")
    click.echo()
    click.echo(f"target_min_build: {loaded.target_min_build}")


@config.command("path")
@config_option
def config_path_cmd(config_path: Path | None) -> None:
    """Print the config file location."""
    click.echo(str(resolve_config_path(config_path)))
