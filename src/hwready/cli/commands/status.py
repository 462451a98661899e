"""Status command: run-once marker state and queued records."""

from __future__ import annotations

__all__ = ["status"]

import json
from pathlib import Path

import click

from hwready.runner import build_delivery, build_gate

from ..helpers import config_option, load_config_or_exit
from ..styling import style_dim, style_header, style_label


@click.command()
@config_option
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def status(config_path: Path | None, as_json: bool) -> None:
    """Show whether this device has been evaluated and what is queued."""
    config = load_config_or_exit(config_path)
    gate = build_gate(config)
    delivery = build_delivery(config)
    entries = delivery.queue.entries()

    result = {
        "gate": gate.state.value,
        "marker_path": str(config.state.marker),
        "marker": gate.read_marker(),
        "destination": delivery.destination.describe(),
        "queue_dir": str(config.state.queue),
        "queued": [entry.record_name for entry in entries],
    }

    if as_json:
        click.echo(json.dumps(result, indent=2))
        return

    click.echo(style_header("Run-once gate"))
    click.echo(f"  {style_label('State')} {gate.state.value}")
    click.echo(f"  {style_label('Marker')} {config.state.marker}")
    click.echo()
    click.echo(style_header("Delivery"))
    click.echo(f"  {style_label('Destination')} {delivery.destination.describe()}")
    click.echo(f"  {style_label('Queue')} {config.state.queue}")
    if not entries:
        click.echo(style_dim("  No queued records."))
    for entry in entries:
        click.echo(f"    {entry.sequence:>4}  {entry.record_name}")
