from aether.metadata.buildinfo import (
    BUILDINFO_FILENAME,
    BuildRecord,
    format_buildinfo,
    load_buildinfo,
    parse_buildinfo,
)
from aether.metadata.pkginfo import (
    PKGINFO_FILENAME,
    PackageMetadata,
    format_pkginfo,
    load_pkginfo,
    parse_pkginfo,
)

__all__ = [
    "BUILDINFO_FILENAME",
    "PKGINFO_FILENAME",
    "BuildRecord",
    "PackageMetadata",
    "format_buildinfo",
    "format_pkginfo",
    "load_buildinfo",
    "load_pkginfo",
    "parse_buildinfo",
    "parse_pkginfo",
]
