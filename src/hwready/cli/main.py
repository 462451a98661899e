"""Main CLI entry point for hwready.

Defines the CLI group and registers all subcommands.

Commands:
    check   - Evaluate and print the verdict (no delivery, no marker)
    config  - Configuration display (show, path)
    flush   - Deliver queued records
    init    - Create the configuration file
    reset   - Remove the run-once marker
    run     - Full invocation: gate, checks, delivery, marker
    status  - Marker state and queued records

Subcommand help:
    hwready COMMAND -h         Show help for a specific command
"""

from __future__ import annotations

__all__ = ["cli", "main"]

import sys

import click

from hwready import __version__

from .commands.check import check
from .commands.config import config
from .commands.flush import flush
from .commands.init import init
from .commands.reset import reset
from .commands.run import run
from .commands.status import status


@click.group(
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.pass_context
def cli(ctx: click.Context, version: bool) -> None:
    """hwready: run-once hardware eligibility checker."""
    if version:
        click.echo(f"hwready {__version__}")
        sys.exit(0)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Register commands
cli.add_command(check)
cli.add_command(config)
cli.add_command(flush)
cli.add_command(init)
cli.add_command(reset)
cli.add_command(run)
cli.add_command(status)


def main() -> None:
    """CLI entry point."""
    cli()
