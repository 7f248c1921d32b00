"""Terminal output helpers for Ritsu.

All user-facing messages go through click so that colors are stripped
automatically when output is not a terminal and so that CliRunner captures
them in tests.
"""

from __future__ import annotations

import click


def info(message: str) -> None:
    """Print a progress or status line."""
    click.echo(f"{click.style('INFO', fg='green', bold=True)} {message}")


def success(message: str) -> None:
    click.echo(f"{click.style('DONE', fg='cyan', bold=True)} {message}")


def warn(message: str) -> None:
    click.echo(f"{click.style('WARN', fg='yellow', bold=True)} {message}", err=True)


def error(message: str) -> None:
    """Print a single-line failure message to stderr."""
    click.echo(f"{click.style('ERROR', fg='red', bold=True)} {message}", err=True)


def hint(command: str) -> str:
    """Format a shell command for inclusion in a message."""
    return click.style(f"`{command}`", fg="blue")
