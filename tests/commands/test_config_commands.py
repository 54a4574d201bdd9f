"""Tests for the config command group."""

import logging
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

from aether.cli.cli import cli
from aether.config import InMemoryConfigStore
from aether.context import AetherContext


def test_config_show_renders_toml(tmp_path: Path) -> None:
    ctx = AetherContext.for_test(root=tmp_path)
    runner = CliRunner()

    result = runner.invoke(cli, ["config", "show"], obj=ctx)

    assert result.exit_code == 0
    assert f'bin_dir = "{tmp_path / "bin"}"' in result.output
    assert 'decompress_command = ["gzip", "-dc"]' in result.output


def test_config_show_reports_errors_cleanly(tmp_path: Path) -> None:
    ctx = AetherContext.for_test(root=tmp_path)
    runner = CliRunner()

    with patch(
        "aether.cli.commands.config_cmd.render_config",
        side_effect=ValueError("bin_dir is not a path"),
    ):
        result = runner.invoke(cli, ["config", "show"], obj=ctx)

    assert result.exit_code == 1
    assert "Error: bin_dir is not a path" in result.output
    assert result.exception is None or isinstance(result.exception, SystemExit)


def test_config_init_writes_config(tmp_path: Path) -> None:
    store = InMemoryConfigStore()
    ctx = AetherContext.for_test(root=tmp_path, config_store=store)
    runner = CliRunner()

    result = runner.invoke(cli, ["config", "init"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Wrote" in result.output
    assert store.exists()


def test_config_init_refuses_to_overwrite(tmp_path: Path) -> None:
    ctx = AetherContext.for_test(root=tmp_path)
    runner = CliRunner()

    result = runner.invoke(cli, ["config", "init"], obj=ctx)
    forced = runner.invoke(cli, ["config", "init", "--force"], obj=ctx)

    assert result.exit_code == 1
    assert "Config already exists" in result.output
    assert forced.exit_code == 0


def test_debug_flag_configures_logging(tmp_path: Path) -> None:
    ctx = AetherContext.for_test(root=tmp_path)
    runner = CliRunner()

    with patch("aether.cli.cli.logging.basicConfig") as mock_basic_config:
        result = runner.invoke(cli, ["--debug", "list"], obj=ctx)

    assert result.exit_code == 0
    mock_basic_config.assert_called_once()
    assert mock_basic_config.call_args.kwargs["level"] == logging.DEBUG
