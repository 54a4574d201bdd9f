""".BUILDINFO parsing."""

from dataclasses import dataclass, field
from pathlib import Path

from aether.metadata.parsing import FieldSpec, RecordSchema, format_fields, parse_fields

BUILDINFO_FILENAME = ".BUILDINFO"

# .BUILDINFO has no comment syntax: a leading `#` line is a parse error.
BUILDINFO_SCHEMA = RecordSchema(
    record_kind="BuildInfo",
    allow_comments=False,
    fields={
        "format": FieldSpec("format", "int"),
        "pkgname": FieldSpec("name", "str"),
        "pkgbase": FieldSpec("base", "str"),
        "pkgver": FieldSpec("version", "str"),
        "pkgbuild_sha256sum": FieldSpec("pkgbuild_sha256sum", "str"),
        "pkgbuild_md5sum": FieldSpec("pkgbuild_md5sum", "str"),
        "pkgbuild_sha1sum": FieldSpec("pkgbuild_sha1sum", "str"),
        "packager": FieldSpec("packager", "str"),
        "builddate": FieldSpec("builddate", "int"),
        "builddir": FieldSpec("builddir", "str"),
        "startdir": FieldSpec("startdir", "str"),
        "buildtool": FieldSpec("buildtool", "str"),
        "buildtoolver": FieldSpec("buildtoolver", "str"),
        "pkgarch": FieldSpec("arch", "list"),
        "buildenv": FieldSpec("buildenv", "list"),
        "options": FieldSpec("options", "list"),
        "installed": FieldSpec("installed", "list"),
    },
)


@dataclass(frozen=True)
class BuildRecord:
    """Build provenance recorded in a .BUILDINFO file.

    `installed` holds the reference strings of every package present in the
    build environment.
    """

    format: int = 0
    name: str = ""
    base: str = ""
    version: str = ""
    pkgbuild_sha256sum: str = ""
    pkgbuild_md5sum: str = ""
    pkgbuild_sha1sum: str = ""
    packager: str = ""
    builddate: int = 0
    builddir: str = ""
    startdir: str = ""
    buildtool: str = ""
    buildtoolver: str = ""
    arch: list[str] = field(default_factory=list)
    buildenv: list[str] = field(default_factory=list)
    options: list[str] = field(default_factory=list)
    installed: list[str] = field(default_factory=list)


def parse_buildinfo(data: bytes, source: Path | None = None) -> BuildRecord:
    """Parse .BUILDINFO bytes into a BuildRecord.

    Raises:
        MetadataError: On invalid encoding, malformed lines, unknown keys or
            non-numeric values
    """
    return BuildRecord(**parse_fields(data, BUILDINFO_SCHEMA, source))


def load_buildinfo(path: Path) -> BuildRecord:
    """Read and parse a .BUILDINFO file."""
    return parse_buildinfo(path.read_bytes(), source=path)


def format_buildinfo(record: BuildRecord) -> str:
    """Render a BuildRecord as .BUILDINFO text."""
    return format_fields(record, BUILDINFO_SCHEMA)
