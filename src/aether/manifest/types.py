"""Manifest data types."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ManifestEntry:
    """One file record of a package manifest.

    Attributes:
        path: Path of the entry relative to the package root (e.g. "./usr/bin/foo")
        keywords: Keyword values for the entry, with `/set` defaults already applied.
            Flag keywords without a value map to an empty string.
    """

    path: str
    keywords: dict[str, str] = field(default_factory=dict)

    @property
    def type(self) -> str | None:
        return self.keywords.get("type")

    @property
    def mode(self) -> int | None:
        mode = self.keywords.get("mode")
        if mode is None:
            return None
        return int(mode, 8)

    @property
    def size(self) -> int | None:
        size = self.keywords.get("size")
        if size is None:
            return None
        return int(size)

    @property
    def sha256digest(self) -> str | None:
        return self.keywords.get("sha256digest")

    @property
    def link(self) -> str | None:
        return self.keywords.get("link")
