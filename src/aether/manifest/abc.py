"""Abstract interfaces for reading package manifests.

The manifest of a package is stored compressed. Decompression is delegated to an
external filter and decoding to a manifest reader, so both can be swapped for
in-memory implementations in tests.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator

from aether.manifest.types import ManifestEntry


class Decompressor(ABC):
    """Turns compressed manifest bytes into plain bytes."""

    @abstractmethod
    def decompress(self, data: bytes) -> bytes:
        """Decompress data.

        Args:
            data: Compressed bytes as read from disk

        Returns:
            Decompressed bytes

        Raises:
            DecompressionError: If the filter could not run or failed
        """
        ...


class ManifestReader(ABC):
    """Decodes decompressed manifest bytes into entries."""

    @abstractmethod
    def read_entries(self, data: bytes) -> Iterator[ManifestEntry]:
        """Yield manifest entries in file order.

        Must not hold state between calls: every call over the same bytes yields
        the same sequence.

        Raises:
            ManifestFormatError: If the data is not a readable manifest
        """
        ...
