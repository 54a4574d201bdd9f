"""Commands that report on the installed package set."""

import click

from aether.cli.error_boundary import cli_error_boundary
from aether.cli.output import machine_output, user_output
from aether.context import AetherContext


@click.command("list")
@click.pass_obj
@cli_error_boundary
def list_cmd(ctx: AetherContext) -> None:
    """List installed packages."""
    registry = ctx.load_registry()
    if len(registry) == 0:
        user_output("No packages installed.")
        return
    for package in registry:
        machine_output(f"{package.name} {package.version}")


@click.command("conflicts")
@click.pass_obj
@cli_error_boundary
def conflicts_cmd(ctx: AetherContext) -> None:
    """Report executable names provided by more than one installed package."""
    conflicts = ctx.load_registry().exec_conflicts()
    if not conflicts:
        user_output("No conflicts.")
        return
    for conflict in conflicts:
        machine_output(f"{conflict.name}: {conflict.owner} conflicts with {conflict.conflicting}")
    raise SystemExit(1)
