"""The Package entity and its derived filesystem views."""

import os
import stat
from dataclasses import dataclass, replace
from pathlib import Path

from aether.errors import MissingExecsError, MissingFilesError
from aether.manifest import Manifest
from aether.metadata import BuildRecord, PackageMetadata
from aether.validation import PackageValidator

# Searched in this order; a missing directory contributes no executables.
EXECUTABLE_DIRS: tuple[str, ...] = ("usr/bin", "bin")


@dataclass(frozen=True)
class Executable:
    """An executable shipped by a package.

    Attributes:
        name: Base name, which is also the symlink name in the binary directory
        path: Absolute path of the file inside the package directory
    """

    name: str
    path: Path


def is_executable_entry(path: Path) -> bool:
    """Return True if path is a non-directory with any execute bit set.

    Symlinks are judged by their target; dangling symlinks are not executables.
    """
    try:
        mode = path.stat().st_mode
    except OSError:
        return False
    if stat.S_ISDIR(mode):
        return False
    return bool(mode & (stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH))


def links_to(link: Path, target: Path) -> bool:
    """Return True if link is a symlink whose destination is target."""
    try:
        destination = Path(os.readlink(link))
    except OSError:
        return False
    if not destination.is_absolute():
        destination = link.parent / destination
    return os.path.normpath(destination) == os.path.normpath(target)


@dataclass(frozen=True)
class Package:
    """A validated package directory.

    Never build one directly: use Package.from_dir(), which runs validation,
    so every live Package has parseable metadata and a readable manifest.

    Attributes:
        path: Root directory of the package
        files: Absolute paths of every non-directory entry, sorted
        metadata: Parsed .PKGINFO
        manifest: Decompressed .MTREE
        build_record: Parsed .BUILDINFO, or None when absent or unparseable
    """

    path: Path
    files: list[Path]
    metadata: PackageMetadata
    manifest: Manifest
    build_record: BuildRecord | None

    @classmethod
    def from_dir(cls, path: Path, validator: PackageValidator | None = None) -> "Package":
        """Validate a directory and build a Package from its contents.

        Args:
            path: Candidate package directory
            validator: Validator to use (defaults to one using the gzip filter
                and the mtree reader)

        Raises:
            InvalidPackageError: If the directory is not a valid package
        """
        checker = validator if validator is not None else PackageValidator()
        contents = checker.inspect(path)
        return cls(
            path=contents.directory,
            files=contents.files,
            metadata=contents.metadata,
            manifest=contents.manifest,
            build_record=contents.build_record,
        )

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def version(self) -> str:
        return self.metadata.version

    def reference_string(self) -> str:
        """Return the identity key `{name}-{version}`."""
        return f"{self.metadata.name}-{self.metadata.version}"

    def relative_files(self) -> list[Path]:
        """Return files relative to the package root."""
        return [file.relative_to(self.path) for file in self.files]

    def relocated(self, new_path: Path) -> "Package":
        """Return this package rooted at new_path.

        Used once a package tree has been copied somewhere else; the copy must
        hold the same files.
        """
        new_root = new_path.absolute()
        return replace(
            self,
            path=new_root,
            files=[new_root / relative for relative in self.relative_files()],
        )

    def list_executables(self) -> list[Executable]:
        """Find executables in the package's usr/bin and bin directories.

        Entries from usr/bin come first. Within a directory, entries are in
        sorted order. Duplicate names across the two directories are kept.

        Raises:
            OSError: If an existing executable directory cannot be read
        """
        executables: list[Executable] = []
        for relative_dir in EXECUTABLE_DIRS:
            exec_dir = self.path / relative_dir
            try:
                names = sorted(os.listdir(exec_dir))
            except FileNotFoundError:
                continue
            for name in names:
                entry = exec_dir / name
                if is_executable_entry(entry):
                    executables.append(Executable(name=name, path=entry))
        return executables

    def check_files(self, target_dir: Path) -> list[Path]:
        """Check that every package file exists below target_dir.

        Args:
            target_dir: Directory holding this package's installed copy

        Returns:
            The installed paths, all present

        Raises:
            MissingFilesError: Listing every absent file
        """
        present: list[Path] = []
        missing: list[str] = []
        for relative in self.relative_files():
            installed = target_dir / relative
            if installed.is_symlink() or installed.exists():
                present.append(installed)
            else:
                missing.append(str(relative))
        if missing:
            raise MissingFilesError(self.reference_string(), missing)
        return present

    def executable_links(self, bin_dir: Path) -> tuple[list[Path], list[str]]:
        """Split executables into links in bin_dir owned by this package and absent ones.

        A link is owned only if it points at the executable inside this package's
        directory; a link to anything else counts as absent.

        Returns:
            (owned symlink paths, names of executables without an owned link)
        """
        owned: list[Path] = []
        missing: list[str] = []
        for executable in self.list_executables():
            link = bin_dir / executable.name
            if links_to(link, executable.path):
                owned.append(link)
            else:
                missing.append(executable.name)
        return owned, missing

    def check_execs(self, bin_dir: Path) -> list[Path]:
        """Check that bin_dir holds a symlink to every executable of this package.

        Returns:
            The symlink paths, all present

        Raises:
            MissingExecsError: Listing every executable without an owned link
        """
        owned, missing = self.executable_links(bin_dir)
        if missing:
            raise MissingExecsError(self.reference_string(), missing)
        return owned

    def describe(self) -> str:
        """Return a human-readable summary of the package."""
        metadata = self.metadata
        lines = [
            f"Name            : {metadata.name}",
            f"Version         : {metadata.version}",
            f"Description     : {metadata.description or 'None'}",
            f"Architecture    : {'  '.join(metadata.arch) or 'None'}",
            f"URL             : {metadata.url or 'None'}",
            f"Licenses        : {'  '.join(metadata.license) or 'None'}",
            f"Provides        : {'  '.join(metadata.provides) or 'None'}",
            f"Depends On      : {'  '.join(metadata.depends) or 'None'}",
            f"Conflicts With  : {'  '.join(metadata.conflicts) or 'None'}",
            f"Installed Size  : {metadata.size}",
            f"Packager        : {metadata.packager or 'None'}",
            f"Build Date      : {metadata.builddate}",
            f"Location        : {self.path}",
            f"Files           : {len(self.files)}",
        ]
        if self.build_record is not None:
            lines.append(
                f"Built With      : {self.build_record.buildtool} "
                f"{self.build_record.buildtoolver}".rstrip()
            )
        return "\n".join(lines)
