"""Error boundary handling for CLI commands.

Catches well-known exceptions at CLI entry points and displays clean error
messages without stack traces.
"""

import functools
import logging
from collections.abc import Callable
from typing import Any, TypeVar

import click

from aether.errors import AetherError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Callable[..., Any])


def cli_error_boundary(func: T) -> T:
    """Decorator that catches well-known exceptions and displays clean error messages.

    Catches:
        - AetherError: Every domain error (invalid package, conflicts, ...)
        - FileNotFoundError: Missing files/directories
        - PermissionError: Permission denied errors
        - ValueError: Invalid input or configuration

    All other exceptions bubble up normally with full stack traces.

    Example:
        @click.command()
        @cli_error_boundary
        def my_command():
            ...
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except (AetherError, FileNotFoundError, PermissionError, ValueError) as e:
            logger.debug("Command failed", exc_info=True)
            click.echo(click.style("Error: ", fg="red") + str(e), err=True)
            raise SystemExit(1) from None

    return wrapper  # type: ignore[return-value]
