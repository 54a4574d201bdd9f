"""Package directory validation.

A directory is a valid package when it is readable and non-empty, contains a
.MTREE manifest and a .PKGINFO metadata file, the manifest decompresses and
decodes, and the metadata parses. The checks run in that order and stop at the
first failure.

PackageValidator.inspect() is the single definition of validity: validate()
discards its results and Package.from_dir() keeps them, so the two can never
disagree.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from aether.errors import (
    DecompressionError,
    InvalidPackageError,
    ManifestFormatError,
    MetadataError,
)
from aether.manifest import (
    MANIFEST_FILENAME,
    Decompressor,
    FilterDecompressor,
    Manifest,
    ManifestReader,
    MtreeReader,
)
from aether.metadata import (
    BUILDINFO_FILENAME,
    PKGINFO_FILENAME,
    BuildRecord,
    PackageMetadata,
    load_buildinfo,
    load_pkginfo,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackageContents:
    """Everything gathered while validating a package directory."""

    directory: Path
    files: list[Path]
    metadata: PackageMetadata
    manifest: Manifest
    build_record: BuildRecord | None


def walk_files(directory: Path) -> list[Path]:
    """List every non-directory entry below directory, recursively and sorted.

    Symlinks are listed but never followed.
    """
    files: list[Path] = []
    for root, dirnames, filenames in os.walk(directory):
        root_path = Path(root)
        files.extend(root_path / name for name in filenames)
        files.extend(root_path / name for name in dirnames if (root_path / name).is_symlink())
    return sorted(files)


class PackageValidator:
    """Checks candidate directories and gathers their package data."""

    def __init__(
        self,
        decompressor: Decompressor | None = None,
        reader: ManifestReader | None = None,
    ) -> None:
        self.decompressor = decompressor if decompressor is not None else FilterDecompressor()
        self.reader = reader if reader is not None else MtreeReader()

    def validate(self, directory: Path) -> None:
        """Check that directory is a well-formed package.

        Raises:
            InvalidPackageError: On the first failed check
        """
        self.inspect(directory)

    def is_valid(self, directory: Path) -> bool:
        try:
            self.inspect(directory)
        except InvalidPackageError:
            return False
        return True

    def inspect(self, directory: Path) -> PackageContents:
        """Validate directory and return the data read along the way.

        Raises:
            InvalidPackageError: On the first failed check
        """
        directory = directory.absolute()

        try:
            has_entries = any(True for _ in directory.iterdir())
        except OSError as e:
            raise InvalidPackageError(
                directory, "unreadable", f"unable to read directory: {e.strerror or e}"
            ) from e
        if not has_entries:
            raise InvalidPackageError(
                directory, "empty", "empty package: directory contains no entries"
            )

        manifest_path = directory / MANIFEST_FILENAME
        metadata_path = directory / PKGINFO_FILENAME
        if not manifest_path.is_file():
            raise InvalidPackageError(
                directory, "missing-manifest", f"missing required file: {MANIFEST_FILENAME}"
            )
        if not metadata_path.is_file():
            raise InvalidPackageError(
                directory, "missing-metadata", f"missing required file: {PKGINFO_FILENAME}"
            )

        try:
            manifest = Manifest.load(manifest_path, self.decompressor, self.reader)
            entry_count = manifest.check_readable()
        except (OSError, DecompressionError, ManifestFormatError) as e:
            raise InvalidPackageError(
                directory, "invalid-manifest", f"invalid manifest: {e}"
            ) from e

        try:
            metadata = load_pkginfo(metadata_path)
        except (OSError, MetadataError) as e:
            raise InvalidPackageError(
                directory, "invalid-metadata", f"invalid metadata: {e}"
            ) from e

        build_record = self._load_build_record(directory / BUILDINFO_FILENAME)

        logger.debug(
            "Validated package %s-%s at %s (%d manifest entries)",
            metadata.name,
            metadata.version,
            directory,
            entry_count,
        )
        return PackageContents(
            directory=directory,
            files=walk_files(directory),
            metadata=metadata,
            manifest=manifest,
            build_record=build_record,
        )

    def _load_build_record(self, path: Path) -> BuildRecord | None:
        if not path.exists():
            return None
        try:
            return load_buildinfo(path)
        except (OSError, MetadataError) as e:
            logger.warning("Ignoring unreadable %s: %s", path, e)
            return None
