"""Fake Decompressor implementation for testing.

FakeDecompressor returns its input unchanged (or a configured failure) without
spawning a process, so tests can write plain-text .MTREE files.
"""

from aether.errors import DecompressionError
from aether.manifest.abc import Decompressor


class FakeDecompressor(Decompressor):
    """In-memory decompressor that tracks calls.

    This class has NO public setup methods. All state is provided via constructor
    or captured during execution.
    """

    def __init__(self, *, fail_with: str | None = None) -> None:
        """Create FakeDecompressor.

        Args:
            fail_with: If set, every decompress() call raises DecompressionError
                with this stderr text
        """
        self._fail_with = fail_with
        self._calls: list[bytes] = []

    @property
    def calls(self) -> list[bytes]:
        """Inputs passed to decompress(), for test assertions only."""
        return self._calls

    def decompress(self, data: bytes) -> bytes:
        self._calls.append(data)
        if self._fail_with is not None:
            raise DecompressionError(
                "Failed to decompress package manifest",
                command=("fake-decompress",),
                returncode=1,
                stderr=self._fail_with,
            )
        return data
