"""Commands that inspect a package directory without installing it."""

from pathlib import Path

import click

from aether.cli.error_boundary import cli_error_boundary
from aether.cli.output import machine_output, user_output
from aether.context import AetherContext
from aether.package import Package


@click.command("validate")
@click.argument("directory", type=click.Path(file_okay=False, path_type=Path))
@click.pass_obj
@cli_error_boundary
def validate_cmd(ctx: AetherContext, directory: Path) -> None:
    """Check that DIRECTORY is a well-formed package."""
    ctx.validator.validate(directory)
    user_output(click.style("✓ ", fg="green") + f"{directory} is a valid package")


@click.command("show")
@click.argument("directory", type=click.Path(file_okay=False, path_type=Path))
@click.option("--files", "show_files", is_flag=True, help="Also list every file in the package.")
@click.option("--manifest", "show_manifest", is_flag=True, help="Also list manifest entries.")
@click.pass_obj
@cli_error_boundary
def show_cmd(ctx: AetherContext, directory: Path, show_files: bool, show_manifest: bool) -> None:
    """Show metadata of the package in DIRECTORY."""
    package = Package.from_dir(directory, ctx.validator)
    machine_output(package.describe())

    executables = package.list_executables()
    machine_output(f"Executables     : {'  '.join(e.name for e in executables) or 'None'}")

    if show_files:
        machine_output("")
        for relative in package.relative_files():
            machine_output(str(relative))

    if show_manifest:
        machine_output("")
        for entry in package.manifest.entries():
            keywords = " ".join(f"{key}={value}" for key, value in entry.keywords.items())
            machine_output(f"{entry.path} {keywords}".rstrip())
