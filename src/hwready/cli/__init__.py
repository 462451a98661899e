"""Command-line interface for hwready."""

from .main import cli, main

__all__ = ["cli", "main"]
