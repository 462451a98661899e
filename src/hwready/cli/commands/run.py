"""Run command: one full invocation (gate, checks, delivery, marker).

This is what the scheduler calls on every device.
"""

from __future__ import annotations

__all__ = ["run"]

import json
import sys
from pathlib import Path

import click

from hwready.delivery.layer import DeliveryOutcome
from hwready.runner import InvocationOutcome, RunResult, build_assessor

from ..helpers import config_option, facts_file_option, load_config_or_exit, make_fact_source, setup_logging
from ..styling import style_dim, style_label, style_success, style_verdict, style_warning


def _echo_result(result: RunResult) -> None:
    if result.outcome is InvocationOutcome.ALREADY_COMPLETED:
        click.echo(style_dim("Device already evaluated; checks skipped."))
    elif result.outcome is InvocationOutcome.TARGET_BUILD:
        click.echo(style_dim("OS build already meets the target; checks skipped."))

    if result.record is not None:
        record = result.record
        click.echo(f"{style_label('Verdict')} {style_verdict(record.verdict, record.verdict_label)}")
        if record.reason:
            click.echo(f"{style_label('Reason')} {record.reason}")
        click.echo(f"{style_label('Trail')} {record.trail.strip()}")
        click.echo(f"{style_label('Record')} {record.filename}")

        if result.delivery is None:
            click.echo(style_warning("Record could not be delivered or queued"))
        elif result.delivery is DeliveryOutcome.DELIVERED:
            click.echo(style_success("Record delivered"))
        else:
            click.echo(style_warning("Destination unavailable; record queued for the next run"))

    flush = result.flush
    if flush.attempted:
        click.echo(
            f"{style_label('Queue')} {len(flush.delivered)} delivered, {len(flush.remaining)} still queued"
        )


@click.command()
@config_option
@facts_file_option
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def run(config_path: Path | None, facts_file: Path | None, as_json: bool) -> None:
    """Evaluate this device once and deliver the record.

    Skips evaluation when the run-once marker exists or the OS build already
    meets the target; queued records are flushed either way.

    Exits 1 when facts could not be collected (FAILED TO RUN) or the record
    could be neither delivered nor queued.
    """
    config = load_config_or_exit(config_path)
    setup_logging(config, quiet=as_json)

    result = build_assessor(config, make_fact_source(facts_file)).run()

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _echo_result(result)

    if result.outcome is InvocationOutcome.FAILED_TO_RUN or (result.record is not None and result.delivery is None):
        sys.exit(1)
