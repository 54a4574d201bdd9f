"""Restartable access to a package's decompressed manifest."""

from collections.abc import Iterator
from pathlib import Path

from aether.manifest.abc import Decompressor, ManifestReader
from aether.manifest.types import ManifestEntry

MANIFEST_FILENAME = ".MTREE"


class Manifest:
    """Decompressed manifest bytes plus the reader that decodes them.

    The bytes are stored, not a stream, so entries() can be called any number of
    times and always yields the same sequence.
    """

    def __init__(self, data: bytes, reader: ManifestReader) -> None:
        self._data = data
        self._reader = reader

    @classmethod
    def load(cls, path: Path, decompressor: Decompressor, reader: ManifestReader) -> "Manifest":
        """Read a compressed manifest file and decompress it.

        Raises:
            OSError: If the file cannot be read
            DecompressionError: If the decompression filter fails
        """
        return cls(decompressor.decompress(path.read_bytes()), reader)

    @property
    def data(self) -> bytes:
        return self._data

    def entries(self) -> Iterator[ManifestEntry]:
        """Return a fresh iterator over the manifest entries."""
        return self._reader.read_entries(self._data)

    def check_readable(self) -> int:
        """Decode every entry once and return the entry count.

        Raises:
            ManifestFormatError: If the manifest is not structurally readable
        """
        return sum(1 for _ in self.entries())

    def __repr__(self) -> str:
        return f"Manifest({len(self._data)} bytes)"
