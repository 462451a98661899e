"""Init command: write a configuration file."""

from __future__ import annotations

__all__ = ["init"]

import sys
from pathlib import Path

import click
from pydantic import ValidationError

from hwready.config import AppConfig, DestinationConfig, LoggingConfig, StateConfig
from hwready.constants import DEFAULT_HTTP_TIMEOUT_SECONDS, TARGET_MIN_BUILD

from ..helpers import config_option, resolve_config_path
from ..styling import style_error, style_success


@click.command()
@config_option
@click.option("--share", "share_path", help="Deliver records to this path (UNC or mounted share)")
@click.option("--url", help="Deliver records via HTTP PUT to this base URL")
@click.option(
    "--timeout",
    type=int,
    default=DEFAULT_HTTP_TIMEOUT_SECONDS,
    show_default=True,
    help="HTTP timeout in seconds",
)
@click.option("--marker-path", help="Run-once marker file")
@click.option("--queue-dir", help="Local queue directory")
@click.option("--log-dir", help="Directory for system.jsonl")
@click.option("--target-build", type=int, default=TARGET_MIN_BUILD, show_default=True, help="Skip hosts at or above this OS build")
@click.option("--force", is_flag=True, help="Overwrite an existing config")
def init(
    config_path: Path | None,
    share_path: str | None,
    url: str | None,
    timeout: int,
    marker_path: str | None,
    queue_dir: str | None,
    log_dir: str | None,
    target_build: int,
    force: bool,
) -> None:
    """Create the configuration file.

    Exactly one of --share or --url is required.

    \b
    Examples:
        hwready init --share \\\\fileserver\\readiness$
        hwready init --url https://collector.example.com/records
    """
    if bool(share_path) == bool(url):
        click.echo(style_error("Specify exactly one of --share or --url"), err=True)
        sys.exit(1)

    path = resolve_config_path(config_path)
    if path.exists() and not force:
        click.echo(style_error(f"Config already exists at {path} (use --force to overwrite)"), err=True)
        sys.exit(1)

    state_overrides = {k: v for k, v in {"marker_path": marker_path, "queue_dir": queue_dir}.items() if v}
    try:
        config = AppConfig(
            destination=DestinationConfig(
                kind="share" if share_path else "http",
                path=share_path,
                url=url,
                timeout_seconds=timeout,
            ),
            state=StateConfig(**state_overrides),
            logging=LoggingConfig(log_dir=log_dir) if log_dir else LoggingConfig(),
            target_min_build=target_build,
        )
    except ValidationError as e:
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"]) or "destination"
            click.echo(style_error(f"{loc}: {error['msg']}"), err=True)
        sys.exit(1)

    config.save_to_file(path)
    click.echo(style_success(f"Configuration saved to {path}"))
