import logging
import os

import click

from aether.cli.commands.config_cmd import config_group
from aether.cli.commands.install_cmd import install_cmd, remove_cmd
from aether.cli.commands.list_cmd import conflicts_cmd, list_cmd
from aether.cli.commands.package_cmd import show_cmd, validate_cmd
from aether.cli.error_boundary import cli_error_boundary
from aether.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


def configure_logging(debug: bool) -> None:
    """Enable debug logging if requested by flag or the AETHER_DEBUG variable."""
    if debug or os.getenv("AETHER_DEBUG"):
        logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="aether")
@click.option("--debug", is_flag=True, help="Log every step to stderr.")
@click.pass_context
@cli_error_boundary
def cli(ctx: click.Context, debug: bool) -> None:
    """Install Arch-style binary packages per user, without root."""
    configure_logging(debug)
    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context(debug=debug)


cli.add_command(config_group)
cli.add_command(conflicts_cmd)
cli.add_command(install_cmd)
cli.add_command(list_cmd)
cli.add_command(remove_cmd)
cli.add_command(show_cmd)
cli.add_command(validate_cmd)


def main() -> None:
    """CLI entry point used by the `aether` console script."""
    cli()
