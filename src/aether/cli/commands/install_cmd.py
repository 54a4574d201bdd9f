"""Install and remove commands."""

from pathlib import Path

import click

from aether.cli.error_boundary import cli_error_boundary
from aether.cli.output import user_output
from aether.context import AetherContext
from aether.errors import MissingPackageError
from aether.package import Package
from aether.registry import validate_removal_policy


@click.command("install")
@click.argument("directory", type=click.Path(file_okay=False, path_type=Path))
@click.pass_obj
@cli_error_boundary
def install_cmd(ctx: AetherContext, directory: Path) -> None:
    """Install the package in DIRECTORY.

    The package is copied into the package store and its executables are
    linked into the binary directory.
    """
    package = Package.from_dir(directory, ctx.validator)
    registry = ctx.load_registry()
    installed = registry.install(package)

    executables = installed.list_executables()
    user_output(click.style("✓ ", fg="green") + f"Installed {installed.reference_string()}")
    user_output(f"  {len(installed.files)} file(s) in {installed.path}")
    if executables:
        user_output(f"  Linked {', '.join(e.name for e in executables)} into {ctx.config.bin_dir}")


@click.command("remove")
@click.argument("reference")
@click.option(
    "--strict",
    is_flag=True,
    help="Fail if any file or executable link of the package is already missing.",
)
@click.pass_obj
@cli_error_boundary
def remove_cmd(ctx: AetherContext, reference: str, strict: bool) -> None:
    """Remove the installed package REFERENCE (name-version)."""
    registry = ctx.load_registry()
    package = registry.get(reference)
    if package is None:
        raise MissingPackageError(reference)

    registry.remove(package, policy=validate_removal_policy("strict" if strict else "lenient"))
    user_output(click.style("✓ ", fg="green") + f"Removed {reference}")
