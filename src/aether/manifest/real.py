"""Production decompressor that pipes data through an external filter."""

import logging
from collections.abc import Sequence

from aether.manifest.abc import Decompressor
from aether.subprocess_utils import run_filter_with_context

logger = logging.getLogger(__name__)

DEFAULT_DECOMPRESS_COMMAND: tuple[str, ...] = ("gzip", "-dc")


class FilterDecompressor(Decompressor):
    """Decompress by running an external filter such as `gzip -dc`.

    Bytes are written to the filter's stdin and its stdout is captured. The call
    blocks until the process exits.
    """

    def __init__(self, command: Sequence[str] = DEFAULT_DECOMPRESS_COMMAND) -> None:
        if not command:
            raise ValueError("decompress command must not be empty")
        self.command = tuple(command)

    def decompress(self, data: bytes) -> bytes:
        logger.debug("Decompressing %d bytes with %s", len(data), " ".join(self.command))
        return run_filter_with_context(self.command, data, "decompress package manifest")
