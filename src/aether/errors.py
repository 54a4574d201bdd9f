"""Error types raised by aether operations.

All domain errors derive from AetherError so the CLI error boundary can render
them without a stack trace. Parse errors additionally derive from ValueError.
"""

from collections.abc import Sequence
from pathlib import Path
from typing import Literal


class AetherError(Exception):
    """Base class for every error raised by aether."""


class MetadataError(AetherError, ValueError):
    """A metadata file (.PKGINFO or .BUILDINFO) could not be parsed.

    Attributes:
        record_kind: Name of the record being parsed ("PkgInfo" or "BuildInfo")
        source: Path of the file being parsed, if known
        line_number: 1-based line number of the offending line, if any
        line: Full text of the offending line, if any
    """

    def __init__(
        self,
        message: str,
        *,
        record_kind: str,
        source: Path | None = None,
        line_number: int | None = None,
        line: str | None = None,
    ) -> None:
        self.message = message
        self.record_kind = record_kind
        self.source = source
        self.line_number = line_number
        self.line = line
        super().__init__(self._render())

    def _render(self) -> str:
        location = str(self.source) if self.source is not None else f"<{self.record_kind}>"
        if self.line_number is not None:
            location += f":{self.line_number}"
        text = f"{location}: {self.message}"
        if self.line is not None:
            text += f"\n  {self.line}"
        return text


class InvalidEncodingError(MetadataError):
    """The metadata file is not valid UTF-8."""


class MalformedLineError(MetadataError):
    """A non-empty line does not contain the ' = ' delimiter."""


class UnrecognizedKeyError(MetadataError):
    """A line uses a key that the record kind does not declare."""

    def __init__(
        self,
        key: str,
        *,
        record_kind: str,
        source: Path | None = None,
        line_number: int | None = None,
        line: str | None = None,
    ) -> None:
        self.key = key
        super().__init__(
            f"{key}: unrecognized key name for {record_kind}",
            record_kind=record_kind,
            source=source,
            line_number=line_number,
            line=line,
        )


class InvalidValueError(MetadataError):
    """A numeric field holds something that is not a 32-bit integer."""


class ManifestFormatError(AetherError, ValueError):
    """A decompressed manifest is not structurally readable."""


class DecompressionError(AetherError):
    """The external decompression filter could not run or failed.

    Attributes:
        command: The filter command line
        returncode: Exit status, or None if the process never ran to completion
        stderr: Captured standard error of the filter
    """

    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str],
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        self.command = tuple(command)
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)


InvalidPackageReason = Literal[
    "empty",
    "unreadable",
    "missing-manifest",
    "missing-metadata",
    "invalid-manifest",
    "invalid-metadata",
]


class InvalidPackageError(AetherError):
    """A directory failed package validation.

    Attributes:
        directory: The candidate package directory
        reason: Machine-readable reason, one of InvalidPackageReason
        note: Human-readable description of the failure
    """

    def __init__(self, directory: Path, reason: InvalidPackageReason, note: str) -> None:
        self.directory = directory
        self.reason = reason
        self.note = note
        super().__init__(f"{directory}: {note}")


class PackageExistsError(AetherError):
    """A package with the same reference string is already installed."""

    def __init__(self, reference: str, message: str | None = None) -> None:
        self.reference = reference
        super().__init__(message or f"package already installed: {reference}")


class ExecutableConflictError(PackageExistsError):
    """Installing a package would give two packages the same executable name."""

    def __init__(self, reference: str, names: Sequence[str]) -> None:
        self.names = list(names)
        super().__init__(
            reference,
            f"cannot install {reference}: conflicting executables: {', '.join(self.names)}",
        )


class MissingPackageError(AetherError):
    """No installed package has the requested reference string."""

    def __init__(self, reference: str) -> None:
        self.reference = reference
        super().__init__(f"package not installed: {reference}")


class MissingItemsError(AetherError):
    """Some recorded items of a package are absent on disk."""

    kind = "items"

    def __init__(self, reference: str, missing: Sequence[str]) -> None:
        self.reference = reference
        self.missing = list(missing)
        super().__init__(f"{reference}: missing {self.kind}: {', '.join(self.missing)}")


class MissingFilesError(MissingItemsError):
    """Files of a package are absent from the package store."""

    kind = "files"


class MissingExecsError(MissingItemsError):
    """Executable symlinks of a package are absent from the binary directory."""

    kind = "executables"


class CopyError(AetherError):
    """Copying a package tree failed."""

    def __init__(self, source: Path, destination: Path, cause: OSError) -> None:
        self.source = source
        self.destination = destination
        super().__init__(f"unable to copy {source} to {destination}: {cause}")


class LinkError(AetherError):
    """Creating or removing an executable symlink failed.

    Attributes:
        source: File the symlink points (or would point) at
        destination: The symlink path in the binary directory
    """

    def __init__(
        self, source: Path, destination: Path, cause: OSError | str, action: str = "link"
    ) -> None:
        self.source = source
        self.destination = destination
        self.action = action
        if action == "link":
            message = f"unable to link {destination} -> {source}: {cause}"
        else:
            message = f"unable to {action} symlink {destination}: {cause}"
        super().__init__(message)
