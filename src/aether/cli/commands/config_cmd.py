import click

from aether.cli.error_boundary import cli_error_boundary
from aether.cli.output import machine_output, user_output
from aether.config import render_config
from aether.context import AetherContext


@click.group("config")
def config_group() -> None:
    """Manage aether configuration."""


@config_group.command("show")
@click.pass_obj
@cli_error_boundary
def show_config(ctx: AetherContext) -> None:
    """Print the effective configuration."""
    machine_output(render_config(ctx.config), nl=False)


@config_group.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing config file.")
@click.pass_obj
@cli_error_boundary
def init_config(ctx: AetherContext, force: bool) -> None:
    """Write the effective configuration to config.toml."""
    store = ctx.config_store
    if store.exists() and not force:
        user_output(f"Config already exists at {store.path()} (use --force to overwrite)")
        raise SystemExit(1)
    store.save(ctx.config)
    user_output(click.style("✓ ", fg="green") + f"Wrote {store.path()}")
