""".PKGINFO parsing."""

from dataclasses import dataclass, field
from pathlib import Path

from aether.metadata.parsing import FieldSpec, RecordSchema, format_fields, parse_fields

PKGINFO_FILENAME = ".PKGINFO"

PKGINFO_SCHEMA = RecordSchema(
    record_kind="PkgInfo",
    allow_comments=True,
    fields={
        "pkgname": FieldSpec("name", "str"),
        "pkgbase": FieldSpec("base", "str"),
        "pkgver": FieldSpec("version", "str"),
        "pkgdesc": FieldSpec("description", "str"),
        "url": FieldSpec("url", "str"),
        "builddate": FieldSpec("builddate", "int"),
        "packager": FieldSpec("packager", "str"),
        "size": FieldSpec("size", "int"),
        "arch": FieldSpec("arch", "list"),
        "license": FieldSpec("license", "list"),
        "replaces": FieldSpec("replaces", "list"),
        "conflict": FieldSpec("conflicts", "list"),
        "provides": FieldSpec("provides", "list"),
        "depend": FieldSpec("depends", "list"),
        "optdepend": FieldSpec("optdepends", "list"),
        "makedepend": FieldSpec("makedepends", "list"),
        "checkdepend": FieldSpec("checkdepends", "list"),
        "backup": FieldSpec("backup", "list"),
        "group": FieldSpec("groups", "list"),
        "xdata": FieldSpec("xdata", "list"),
    },
)


@dataclass(frozen=True)
class PackageMetadata:
    """Contents of a .PKGINFO file.

    List fields keep file order. `size` is the installed size in bytes and
    `builddate` a Unix timestamp.
    """

    name: str = ""
    base: str = ""
    version: str = ""
    description: str = ""
    url: str = ""
    builddate: int = 0
    packager: str = ""
    size: int = 0
    arch: list[str] = field(default_factory=list)
    license: list[str] = field(default_factory=list)
    replaces: list[str] = field(default_factory=list)
    conflicts: list[str] = field(default_factory=list)
    provides: list[str] = field(default_factory=list)
    depends: list[str] = field(default_factory=list)
    optdepends: list[str] = field(default_factory=list)
    makedepends: list[str] = field(default_factory=list)
    checkdepends: list[str] = field(default_factory=list)
    backup: list[str] = field(default_factory=list)
    groups: list[str] = field(default_factory=list)
    xdata: list[str] = field(default_factory=list)


def parse_pkginfo(data: bytes, source: Path | None = None) -> PackageMetadata:
    """Parse .PKGINFO bytes into PackageMetadata.

    Lines starting with `#` are comments. Any error aborts the parse; no
    partially populated record is ever returned.

    Raises:
        MetadataError: On invalid encoding, malformed lines, unknown keys or
            non-numeric values
    """
    return PackageMetadata(**parse_fields(data, PKGINFO_SCHEMA, source))


def load_pkginfo(path: Path) -> PackageMetadata:
    """Read and parse a .PKGINFO file."""
    return parse_pkginfo(path.read_bytes(), source=path)


def format_pkginfo(metadata: PackageMetadata) -> str:
    """Render PackageMetadata as .PKGINFO text."""
    return format_fields(metadata, PKGINFO_SCHEMA)
