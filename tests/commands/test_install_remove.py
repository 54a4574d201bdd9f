"""Tests for the install and remove commands using the test context."""

import os
from pathlib import Path

from click.testing import CliRunner

from aether.cli.cli import cli
from aether.context import AetherContext
from tests.test_utils.package_builder import create_package_dir


def test_install_links_executables(tmp_path: Path) -> None:
    ctx = AetherContext.for_test(root=tmp_path)
    source = create_package_dir(tmp_path / "sources", "foo", executables=["foo"])
    runner = CliRunner()

    result = runner.invoke(cli, ["install", str(source)], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Installed foo-1.0-1" in result.output
    assert "Linked foo" in result.output
    assert (tmp_path / "bin" / "foo").is_symlink()
    assert (tmp_path / "store" / "foo-1.0-1" / "usr/bin/foo").is_file()


def test_install_conflict_reports_error(tmp_path: Path) -> None:
    ctx = AetherContext.for_test(root=tmp_path)
    runner = CliRunner()
    first = create_package_dir(tmp_path / "sources", "foo", executables=["foo"])
    second = create_package_dir(tmp_path / "sources", "bar", executables=["foo"])
    runner.invoke(cli, ["install", str(first)], obj=ctx)

    result = runner.invoke(cli, ["install", str(second)], obj=ctx)

    assert result.exit_code == 1
    assert "Error: " in result.output
    assert "conflicting executables: foo" in result.output
    assert not (tmp_path / "store" / "bar-1.0-1").exists()


def test_install_invalid_directory(tmp_path: Path) -> None:
    ctx = AetherContext.for_test(root=tmp_path)
    empty = tmp_path / "empty"
    empty.mkdir()
    runner = CliRunner()

    result = runner.invoke(cli, ["install", str(empty)], obj=ctx)

    assert result.exit_code == 1
    assert "empty package" in result.output


def test_remove_installed_package(tmp_path: Path) -> None:
    ctx = AetherContext.for_test(root=tmp_path)
    source = create_package_dir(tmp_path / "sources", "foo", executables=["foo"])
    runner = CliRunner()
    runner.invoke(cli, ["install", str(source)], obj=ctx)

    result = runner.invoke(cli, ["remove", "foo-1.0-1"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Removed foo-1.0-1" in result.output
    assert os.listdir(tmp_path / "bin") == []
    assert not (tmp_path / "store" / "foo-1.0-1").exists()


def test_remove_unknown_package(tmp_path: Path) -> None:
    ctx = AetherContext.for_test(root=tmp_path)
    runner = CliRunner()

    result = runner.invoke(cli, ["remove", "ghost-1.0-1"], obj=ctx)

    assert result.exit_code == 1
    assert "package not installed: ghost-1.0-1" in result.output


def test_remove_strict_refuses_partial_package(tmp_path: Path) -> None:
    ctx = AetherContext.for_test(root=tmp_path)
    source = create_package_dir(tmp_path / "sources", "foo", executables=["foo"])
    runner = CliRunner()
    runner.invoke(cli, ["install", str(source)], obj=ctx)
    (tmp_path / "bin" / "foo").unlink()

    strict = runner.invoke(cli, ["remove", "--strict", "foo-1.0-1"], obj=ctx)
    lenient = runner.invoke(cli, ["remove", "foo-1.0-1"], obj=ctx)

    assert strict.exit_code == 1
    assert "missing executables: foo" in strict.output
    assert lenient.exit_code == 0, lenient.output
    assert not (tmp_path / "store" / "foo-1.0-1").exists()
