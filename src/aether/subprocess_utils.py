"""Subprocess execution for external filters.

Wraps subprocess.run() so that every way an external filter can fail (binary
missing, abnormal exit, broken pipe) surfaces as a DecompressionError carrying
the command and its stderr.
"""

import subprocess
from collections.abc import Sequence

from aether.errors import DecompressionError


def run_filter_with_context(cmd: Sequence[str], data: bytes, operation_context: str) -> bytes:
    """Pipe bytes through an external command and return its stdout.

    Args:
        cmd: Command and arguments to execute
        data: Bytes written to the command's stdin
        operation_context: Human-readable description of the operation

    Returns:
        Everything the command wrote to stdout

    Raises:
        DecompressionError: If the command is missing, cannot be spawned, fails
            with a non-zero exit status, or its pipes fail
    """
    cmd_str = " ".join(str(arg) for arg in cmd)
    try:
        result = subprocess.run(
            list(cmd),
            input=data,
            capture_output=True,
            check=True,
        )
    except subprocess.CalledProcessError as e:
        stderr_text = e.stderr.decode("utf-8", errors="replace").strip() if e.stderr else ""
        error_msg = f"Failed to {operation_context}"
        error_msg += f"\nCommand: {cmd_str}"
        error_msg += f"\nExit code: {e.returncode}"
        if stderr_text:
            error_msg += f"\nstderr: {stderr_text}"
        raise DecompressionError(
            error_msg, command=cmd, returncode=e.returncode, stderr=stderr_text
        ) from e
    except FileNotFoundError as e:
        error_msg = f"Command not found while trying to {operation_context}: {cmd[0]}"
        error_msg += f"\nFull command: {cmd_str}"
        raise DecompressionError(error_msg, command=cmd) from e
    except OSError as e:
        error_msg = f"Failed to {operation_context}: {e}"
        error_msg += f"\nCommand: {cmd_str}"
        raise DecompressionError(error_msg, command=cmd) from e

    return result.stdout
