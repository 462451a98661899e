"""CLI output styling utilities.

Provides consistent styling helpers for CLI output:
- Cyan bold for section headers and labels
- Green for success messages (with checkmark)
- Red for error messages (with cross)
- Yellow for warnings
- Dim for neutral/empty state messages
"""

from __future__ import annotations

__all__ = [
    "style_dim",
    "style_error",
    "style_header",
    "style_label",
    "style_success",
    "style_verdict",
    "style_warning",
]

import click

from hwready.checks.verdict import Verdict


def style_header(title: str) -> str:
    """Style a section header with dashes.

    Example:
        >>> click.echo(style_header("Queue"))
        --- Queue ---
    """
    return click.style(f"--- {title} ---", fg="cyan", bold=True)


def style_label(label: str) -> str:
    """Style a label (adds the colon)."""
    return click.style(f"{label}:", fg="cyan", bold=True)


def style_success(message: str) -> str:
    return click.style(f"✓ {message}", fg="green")


def style_error(message: str) -> str:
    return click.style(f"✗ {message}", fg="red")


def style_dim(message: str) -> str:
    return click.style(message, dim=True)


def style_warning(message: str) -> str:
    return click.style(f"Warning: {message}", fg="yellow", bold=True)


# Verdict code -> color
_VERDICT_COLORS: dict[int, str] = {
    Verdict.CAPABLE: "green",
    Verdict.NOT_CAPABLE: "red",
    Verdict.UNDETERMINED: "yellow",
    Verdict.FAILED_TO_RUN: "magenta",
}


def style_verdict(code: int, label: str) -> str:
    """Style a verdict label by code, e.g. "NOT CAPABLE (1)" in red."""
    return click.style(f"{label} ({code})", fg=_VERDICT_COLORS.get(code, "white"), bold=True)
