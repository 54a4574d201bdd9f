"""Output helpers for CLI commands with clear intent.

user_output is for messages meant for a person (stderr); machine_output is for
results another program may consume (stdout).
"""

from typing import Any

import click


def user_output(message: Any = "", nl: bool = True) -> None:
    """Print a human-facing message to stderr."""
    click.echo(message, nl=nl, err=True)


def machine_output(message: Any = "", nl: bool = True) -> None:
    """Print a result to stdout."""
    click.echo(message, nl=nl)
