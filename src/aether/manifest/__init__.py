from aether.manifest.abc import Decompressor, ManifestReader
from aether.manifest.manifest import MANIFEST_FILENAME, Manifest
from aether.manifest.mtree import MtreeReader
from aether.manifest.real import DEFAULT_DECOMPRESS_COMMAND, FilterDecompressor
from aether.manifest.types import ManifestEntry

__all__ = [
    "DEFAULT_DECOMPRESS_COMMAND",
    "MANIFEST_FILENAME",
    "Decompressor",
    "FilterDecompressor",
    "Manifest",
    "ManifestEntry",
    "ManifestReader",
    "MtreeReader",
]
