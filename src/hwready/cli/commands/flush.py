"""Flush command: deliver queued records without evaluating."""

from __future__ import annotations

__all__ = ["flush"]

import json
import sys
from pathlib import Path

import click

from hwready.runner import build_delivery

from ..helpers import config_option, load_config_or_exit, setup_logging
from ..styling import style_dim, style_success, style_warning


@click.command()
@config_option
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def flush(config_path: Path | None, as_json: bool) -> None:
    """Deliver queued records to the destination.

    Exits 1 if any record is still queued afterwards.
    """
    config = load_config_or_exit(config_path)
    setup_logging(config, quiet=as_json)

    report = build_delivery(config).flush()

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
    elif not report.attempted:
        click.echo(style_dim("Queue is empty."))
    else:
        if report.delivered:
            click.echo(style_success(f"Delivered {len(report.delivered)} queued record(s)"))
        if report.remaining:
            click.echo(style_warning(f"{len(report.remaining)} record(s) still queued"))

    if report.remaining:
        sys.exit(1)
