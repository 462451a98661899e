"""Check command: evaluate and print the verdict without side effects.

No gate, no record delivery, no marker. Useful for trying a facts file or
seeing why a device gets its verdict.
"""

from __future__ import annotations

__all__ = ["check"]

import json
import sys
from pathlib import Path

import click

from hwready.checks.verdict import VerdictResult, evaluate, failed_to_run
from hwready.exceptions import FactCollectionError
from hwready.facts.collector import collect_facts

from ..helpers import facts_file_option, make_fact_source
from ..styling import style_label, style_verdict

_STATUS_COLORS = {"PASS": "green", "FAIL": "red", "UNDETERMINED": "yellow"}


def _result_dict(result: VerdictResult) -> dict[str, object]:
    return {
        "verdict": int(result.verdict),
        "verdict_label": result.verdict.label,
        "reason": result.reason,
        "trail": result.trail,
        "checks": {
            o.name: {"status": o.status.value, "values": o.values, "exemption": o.exemption}
            for o in result.outcomes
        },
        "error": result.error,
    }


@click.command()
@facts_file_option
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def check(facts_file: Path | None, as_json: bool) -> None:
    """Evaluate the checks and print the verdict (no delivery, no marker).

    Exits 1 when facts could not be collected (FAILED TO RUN).
    """
    try:
        result = evaluate(collect_facts(make_fact_source(facts_file)))
    except FactCollectionError as e:
        result = failed_to_run(str(e))

    if as_json:
        click.echo(json.dumps(_result_dict(result), indent=2, default=str))
    else:
        for outcome in result.outcomes:
            status = click.style(outcome.status.value, fg=_STATUS_COLORS[outcome.status.value], bold=True)
            click.echo(f"  {status} {outcome.fragment.strip()}")
        if result.error:
            click.echo(f"{style_label('Error')} {result.error}")
        click.echo(f"{style_label('Verdict')} {style_verdict(int(result.verdict), result.verdict.label)}")
        if result.reason:
            click.echo(f"{style_label('Reason')} {result.reason}")

    if result.error is not None:
        sys.exit(1)
