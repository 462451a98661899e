"""Reset command: deliberately remove the run-once marker."""

from __future__ import annotations

__all__ = ["reset"]

from pathlib import Path

import click

from hwready.runner import build_gate

from ..helpers import config_option, load_config_or_exit, setup_logging
from ..styling import style_dim, style_success


@click.command()
@config_option
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
def reset(config_path: Path | None, yes: bool) -> None:
    """Remove the run-once marker so the next run re-evaluates this device."""
    config = load_config_or_exit(config_path)
    setup_logging(config)
    gate = build_gate(config)

    if gate.is_open:
        click.echo(style_dim("No marker present; nothing to reset."))
        return

    if not yes:
        click.confirm(f"Remove {config.state.marker}?", abort=True)

    gate.reset()
    click.echo(style_success("Marker removed; the next run will evaluate this device"))
