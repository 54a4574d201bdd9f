"""Application context with dependency injection.

AetherContext is created once at the CLI entry point and threaded through
commands via Click's context object. Tests build one with for_test() to swap in
fakes.
"""

from dataclasses import dataclass
from pathlib import Path

from aether.config import AetherConfig, ConfigStore, FilesystemConfigStore
from aether.manifest import Decompressor, FilterDecompressor, ManifestReader, MtreeReader
from aether.registry import Registry
from aether.validation import PackageValidator


@dataclass(frozen=True)
class AetherContext:
    """Immutable context holding all dependencies for aether operations."""

    config: AetherConfig
    config_store: ConfigStore
    decompressor: Decompressor
    reader: ManifestReader
    debug: bool

    @property
    def validator(self) -> PackageValidator:
        return PackageValidator(self.decompressor, self.reader)

    def load_registry(self) -> Registry:
        """Load the registry from the configured store and binary directories."""
        return Registry.load(self.config.store_dir, self.config.bin_dir, self.validator)

    @staticmethod
    def for_test(
        *,
        root: Path,
        decompressor: Decompressor | None = None,
        reader: ManifestReader | None = None,
        config_store: ConfigStore | None = None,
        debug: bool = False,
    ) -> "AetherContext":
        """Create a test context whose directories all live below root.

        Uses an in-memory config store and, unless given, the real mtree reader
        with a decompressor that returns its input unchanged.
        """
        from aether.config import InMemoryConfigStore
        from aether.manifest.fake import FakeDecompressor

        config = AetherConfig(
            bin_dir=root / "bin",
            cache_dir=root / "cache",
            config_dir=root / "config",
            store_dir=root / "store",
            decompress_command=("gzip", "-dc"),
        )
        resolved_store = (
            config_store if config_store is not None else InMemoryConfigStore(config)
        )
        return AetherContext(
            config=resolved_store.load(),
            config_store=resolved_store,
            decompressor=decompressor if decompressor is not None else FakeDecompressor(),
            reader=reader if reader is not None else MtreeReader(),
            debug=debug,
        )


def create_context(*, debug: bool, config_dir: Path | None = None) -> AetherContext:
    """Create the production context from the user's configuration.

    Raises:
        ValueError: If the config file is malformed
    """
    config_store = FilesystemConfigStore(config_dir)
    config = config_store.load()
    return AetherContext(
        config=config,
        config_store=config_store,
        decompressor=FilterDecompressor(config.decompress_command),
        reader=MtreeReader(),
        debug=debug,
    )
