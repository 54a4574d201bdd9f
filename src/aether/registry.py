"""The registry of installed packages.

The Registry owns two directory trees: the package store, holding one copied
package directory per installed package (named by its reference string), and
the binary directory, holding a symlink for every installed executable. It is
the only component that changes either tree.

Install and remove run under the store lock and are staged so that a crash or
failure never leaves a half-copied or half-linked package behind:

- install copies into a hidden staging directory, validates the copy, checks
  every symlink destination is free, renames the copy into place and creates
  the symlinks. A symlink failure removes the links already made and moves the
  copy back into staging, which is then deleted.
- remove unlinks the symlinks the package owns, moves the package directory
  to a hidden directory and deletes it. A failure in either step restores the
  links already removed. Until the directory is moved the package still loads,
  so an interrupted remove is finished by a lenient remove.
"""

import logging
import os
import shutil
import tempfile
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from aether.errors import (
    CopyError,
    ExecutableConflictError,
    LinkError,
    MissingExecsError,
    MissingFilesError,
    MissingPackageError,
    PackageExistsError,
)
from aether.locking import store_lock
from aether.package import Package
from aether.validation import PackageValidator

logger = logging.getLogger(__name__)

RemovalPolicy = Literal["lenient", "strict"]

STAGING_PREFIX = ".staging-"
REMOVAL_PREFIX = ".removing-"


def validate_removal_policy(value: str) -> RemovalPolicy:
    """Validate and return a removal policy.

    Raises:
        ValueError: If value is not "lenient" or "strict"
    """
    if value == "lenient":
        return "lenient"
    if value == "strict":
        return "strict"
    raise ValueError(f"Invalid removal policy: {value}")


@dataclass(frozen=True)
class ExecConflict:
    """An executable name provided more than once.

    Attributes:
        name: The executable base name
        owner: Reference string of the first package providing it
        conflicting: Reference string of a later package providing it again
    """

    name: str
    owner: str
    conflicting: str


@dataclass(frozen=True)
class _PlannedLink:
    link: Path
    target: Path


def find_exec_conflicts(packages: Sequence[Package]) -> list[ExecConflict]:
    """Report every executable name that occurs more than once across packages.

    The first package to provide a name owns it; every later occurrence,
    including a second one within the same package, is a conflict.
    """
    owners: dict[str, str] = {}
    conflicts: list[ExecConflict] = []
    for package in packages:
        reference = package.reference_string()
        for executable in package.list_executables():
            owner = owners.get(executable.name)
            if owner is None:
                owners[executable.name] = reference
            else:
                conflicts.append(
                    ExecConflict(name=executable.name, owner=owner, conflicting=reference)
                )
    return conflicts


def _is_empty_dir(path: Path) -> bool:
    if path.is_symlink() or not path.is_dir():
        return False
    return not any(True for _ in path.iterdir())


def conflicting_names(conflicts: Sequence[ExecConflict]) -> list[str]:
    """Return the distinct conflicting names in first-seen order."""
    return list(dict.fromkeys(conflict.name for conflict in conflicts))


class Registry:
    """Installed packages plus the store and binary directories they live in."""

    def __init__(
        self,
        store_dir: Path,
        bin_dir: Path,
        packages: Sequence[Package] = (),
        validator: PackageValidator | None = None,
    ) -> None:
        self.store_dir = store_dir.absolute()
        self.bin_dir = bin_dir.absolute()
        self.validator = validator if validator is not None else PackageValidator()
        self._packages: list[Package] = []
        for package in packages:
            if package.reference_string() in self:
                raise PackageExistsError(package.reference_string())
            self._packages.append(package)

    @classmethod
    def load(
        cls,
        store_dir: Path,
        bin_dir: Path,
        validator: PackageValidator | None = None,
    ) -> "Registry":
        """Build a registry by loading every package directory in store_dir.

        Hidden entries (the lock file, staging and removal directories) and
        plain files are skipped. Loading is all-or-nothing: one invalid package
        directory fails the whole load.

        Raises:
            InvalidPackageError: If any package directory fails validation
            PackageExistsError: If two directories hold the same package
        """
        checker = validator if validator is not None else PackageValidator()
        packages: list[Package] = []
        if store_dir.exists():
            for entry in sorted(store_dir.iterdir()):
                if entry.name.startswith(".") or not entry.is_dir():
                    continue
                packages.append(Package.from_dir(entry, checker))
        logger.debug("Loaded %d package(s) from %s", len(packages), store_dir)
        return cls(store_dir, bin_dir, packages=packages, validator=checker)

    @property
    def packages(self) -> tuple[Package, ...]:
        return tuple(self._packages)

    def get(self, reference: str) -> Package | None:
        for package in self._packages:
            if package.reference_string() == reference:
                return package
        return None

    def __contains__(self, reference: object) -> bool:
        return isinstance(reference, str) and self.get(reference) is not None

    def __len__(self) -> int:
        return len(self._packages)

    def __iter__(self) -> Iterator[Package]:
        return iter(tuple(self._packages))

    def exec_conflicts(self) -> list[ExecConflict]:
        """Return executable name conflicts among the installed packages."""
        return find_exec_conflicts(self._packages)

    def install(self, package: Package) -> Package:
        """Install package into its reference-string directory in the store.

        Returns:
            The installed package, rooted in the store

        Raises:
            PackageExistsError: If the reference string is already installed
            ExecutableConflictError: If an executable name would be duplicated
            CopyError: If the package tree cannot be copied
            LinkError: If an executable symlink cannot be created
        """
        return self.install_to(package, self.store_dir / package.reference_string())

    def install_to(self, package: Package, target_dir: Path) -> Package:
        """Install package into target_dir and link its executables.

        Every check that can run before touching the filesystem does. After a
        failure the registry, the store and the binary directory are as they
        were before the call.

        Returns:
            The installed package, rooted at target_dir

        Raises:
            PackageExistsError: If the reference string is already installed or
                target_dir exists and is not an empty directory
            ExecutableConflictError: If an executable name would be duplicated
            CopyError: If the package tree cannot be copied
            LinkError: If an executable symlink cannot be created
        """
        reference = package.reference_string()
        target_dir = target_dir.absolute()

        with store_lock(self.store_dir):
            if reference in self:
                raise PackageExistsError(reference)

            conflicts = find_exec_conflicts([*self._packages, package])
            if conflicts:
                raise ExecutableConflictError(reference, conflicting_names(conflicts))

            if (target_dir.exists() or target_dir.is_symlink()) and not _is_empty_dir(target_dir):
                raise PackageExistsError(
                    reference,
                    f"cannot install {reference}: {target_dir} exists and is not an "
                    "empty directory",
                )

            installed = self._commit_install(package, target_dir)
            self._packages.append(installed)

        logger.debug("Installed %s to %s", reference, target_dir)
        return installed

    def remove(self, package: Package, policy: RemovalPolicy = "lenient") -> None:
        """Remove an installed package and its executable symlinks.

        With the "lenient" policy, files or symlinks that are already gone are
        skipped, so a previously interrupted removal can be finished. With
        "strict", any missing item is an error and nothing is changed.

        Args:
            package: Package to remove, matched by reference string
            policy: "lenient" or "strict"

        Raises:
            MissingPackageError: If no installed package has the reference string
            MissingFilesError: Files missing under the "strict" policy
            MissingExecsError: Symlinks missing under the "strict" policy
            LinkError: If a symlink cannot be removed
        """
        reference = package.reference_string()

        with store_lock(self.store_dir):
            installed = self.get(reference)
            if installed is None:
                raise MissingPackageError(reference)

            links = self._installed_links(installed, policy)
            self._check_installed_files(installed, policy)

            # The package stays loadable until its directory is moved.
            removed = self._unlink_all(links)

            removal_dir: Path | None = None
            if installed.path.exists():
                removal_dir = Path(
                    tempfile.mkdtemp(prefix=REMOVAL_PREFIX, dir=installed.path.parent)
                )
                try:
                    os.rename(installed.path, removal_dir / "tree")
                except OSError:
                    shutil.rmtree(removal_dir, ignore_errors=True)
                    self._restore_links(removed)
                    raise

            self._packages = [p for p in self._packages if p.reference_string() != reference]
            if removal_dir is not None:
                shutil.rmtree(removal_dir)

        logger.debug("Removed %s (%d symlink(s))", reference, len(links))

    def _commit_install(self, package: Package, target_dir: Path) -> Package:
        target_dir.parent.mkdir(parents=True, exist_ok=True)
        self.bin_dir.mkdir(parents=True, exist_ok=True)

        staging_dir = Path(tempfile.mkdtemp(prefix=STAGING_PREFIX, dir=target_dir.parent))
        staged_tree = staging_dir / "tree"
        try:
            logger.debug("Copying %s to staging %s", package.path, staged_tree)
            try:
                shutil.copytree(package.path, staged_tree, symlinks=True)
            except OSError as e:
                raise CopyError(package.path, target_dir, e) from e

            staged = Package.from_dir(staged_tree, self.validator)
            planned = self._plan_links(staged, target_dir)

            replaced_empty_dir = target_dir.is_dir()
            try:
                if replaced_empty_dir:
                    target_dir.rmdir()
                os.rename(staged_tree, target_dir)
            except OSError as e:
                if replaced_empty_dir and not target_dir.exists():
                    target_dir.mkdir()
                raise CopyError(package.path, target_dir, e) from e

            try:
                self._create_links(planned)
            except LinkError:
                os.rename(target_dir, staged_tree)
                if replaced_empty_dir:
                    target_dir.mkdir()
                raise

            return staged.relocated(target_dir)
        finally:
            shutil.rmtree(staging_dir, ignore_errors=True)

    def _plan_links(self, staged: Package, target_dir: Path) -> list[_PlannedLink]:
        """Map each staged executable to its final symlink; reject occupied names."""
        planned: list[_PlannedLink] = []
        for executable in staged.list_executables():
            link = self.bin_dir / executable.name
            target = target_dir / executable.path.relative_to(staged.path)
            if link.is_symlink() or link.exists():
                raise LinkError(target, link, "destination already exists")
            planned.append(_PlannedLink(link=link, target=target))
        return planned

    def _create_links(self, planned: Sequence[_PlannedLink]) -> None:
        created: list[Path] = []
        for item in planned:
            try:
                os.symlink(item.target, item.link)
            except OSError as e:
                for link in created:
                    link.unlink(missing_ok=True)
                raise LinkError(item.target, item.link, e) from e
            created.append(item.link)
            logger.debug("Linked %s -> %s", item.link, item.target)

    def _unlink_all(self, links: Sequence[Path]) -> list[_PlannedLink]:
        """Remove links, returning what was removed; on failure restore them all."""
        removed: list[_PlannedLink] = []
        for link in links:
            try:
                target = Path(os.readlink(link))
                link.unlink()
            except OSError as e:
                self._restore_links(removed)
                raise LinkError(link, link, e, action="remove") from e
            removed.append(_PlannedLink(link=link, target=target))
            logger.debug("Unlinked %s", link)
        return removed

    def _restore_links(self, removed: Sequence[_PlannedLink]) -> None:
        for item in reversed(removed):
            os.symlink(item.target, item.link)
            logger.debug("Restored %s -> %s", item.link, item.target)

    def _installed_links(self, installed: Package, policy: RemovalPolicy) -> list[Path]:
        """Return the symlinks owned by installed; links to anything else are left alone."""
        try:
            return installed.check_execs(self.bin_dir)
        except MissingExecsError as e:
            if policy == "strict":
                raise
            logger.warning("Skipping already removed executables: %s", ", ".join(e.missing))
        owned, _ = installed.executable_links(self.bin_dir)
        return owned

    def _check_installed_files(self, installed: Package, policy: RemovalPolicy) -> None:
        try:
            installed.check_files(installed.path)
        except MissingFilesError as e:
            if policy == "strict":
                raise
            logger.warning("Skipping %d already removed file(s) of %s", len(e.missing), e.reference)
