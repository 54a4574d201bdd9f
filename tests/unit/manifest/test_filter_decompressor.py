"""Tests for the external-filter decompressor and its subprocess wrapper."""

import subprocess
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from aether.errors import DecompressionError
from aether.manifest import FilterDecompressor, Manifest, MtreeReader
from aether.manifest.fake import FakeDecompressor


def test_pipes_bytes_through_command() -> None:
    """Test that data goes to stdin and stdout is returned."""
    with patch("aether.subprocess_utils.subprocess.run") as mock_run:
        mock_result = Mock(spec=subprocess.CompletedProcess)
        mock_result.stdout = b"./a size=1\n"
        mock_run.return_value = mock_result

        output = FilterDecompressor(("gzip", "-dc")).decompress(b"compressed")

        assert output == b"./a size=1\n"
        mock_run.assert_called_once_with(
            ["gzip", "-dc"],
            input=b"compressed",
            capture_output=True,
            check=True,
        )


def test_nonzero_exit_includes_stderr_in_error() -> None:
    with patch("aether.subprocess_utils.subprocess.run") as mock_run:
        mock_run.side_effect = subprocess.CalledProcessError(
            returncode=1,
            cmd=["gzip", "-dc"],
            stderr=b"gzip: stdin: not in gzip format",
        )

        with pytest.raises(DecompressionError) as exc_info:
            FilterDecompressor().decompress(b"plain text")

        error = exc_info.value
        assert error.returncode == 1
        assert error.stderr == "gzip: stdin: not in gzip format"
        assert error.command == ("gzip", "-dc")
        message = str(error)
        assert "Failed to decompress package manifest" in message
        assert "Command: gzip -dc" in message
        assert "Exit code: 1" in message
        assert "stderr: gzip: stdin: not in gzip format" in message


def test_missing_command_is_reported() -> None:
    with patch("aether.subprocess_utils.subprocess.run") as mock_run:
        mock_run.side_effect = FileNotFoundError(2, "No such file or directory")

        with pytest.raises(DecompressionError, match="Command not found") as exc_info:
            FilterDecompressor(("zstd", "-dc")).decompress(b"")

        assert exc_info.value.returncode is None


def test_pipe_failure_is_reported() -> None:
    with patch("aether.subprocess_utils.subprocess.run") as mock_run:
        mock_run.side_effect = BrokenPipeError(32, "Broken pipe")

        with pytest.raises(DecompressionError, match="Broken pipe"):
            FilterDecompressor().decompress(b"data")


def test_empty_command_rejected() -> None:
    with pytest.raises(ValueError):
        FilterDecompressor(())


def test_manifest_load_decompresses_file(tmp_path: Path) -> None:
    manifest_path = tmp_path / ".MTREE"
    manifest_path.write_bytes(b"./a size=1\n")
    decompressor = FakeDecompressor()

    manifest = Manifest.load(manifest_path, decompressor, MtreeReader())

    assert decompressor.calls == [b"./a size=1\n"]
    assert manifest.data == b"./a size=1\n"
    assert [entry.path for entry in manifest.entries()] == ["./a"]
