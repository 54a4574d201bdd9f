"""Reader for the mtree text format used by .MTREE files.

Only the subset emitted by makepkg/bsdtar is supported: comments, `/set` and
`/unset` directives, backslash line continuation, octal path escapes, and
`keyword=value` or bare flag keywords after the path.
"""

import re
from collections.abc import Iterator

from aether.errors import ManifestFormatError
from aether.manifest.abc import ManifestReader
from aether.manifest.types import ManifestEntry

_OCTAL_ESCAPE = re.compile(rb"\\([0-7]{3})")


def unescape_path(raw: str) -> str:
    """Decode mtree octal escapes (e.g. `\\040` for a space) in a path."""
    decoded = _OCTAL_ESCAPE.sub(lambda m: bytes([int(m.group(1), 8) & 0xFF]), raw.encode("utf-8"))
    return decoded.decode("utf-8", errors="surrogateescape")


def _parse_keywords(tokens: list[str], line_number: int) -> dict[str, str]:
    keywords: dict[str, str] = {}
    for token in tokens:
        key, _, value = token.partition("=")
        if not key:
            raise ManifestFormatError(f"line {line_number}: keyword without a name: {token!r}")
        keywords[key] = value
    return keywords


def _logical_lines(text: str) -> Iterator[tuple[int, str]]:
    """Join continuation lines, yielding (first line number, joined line)."""
    pending: list[str] = []
    start = 0
    for line_number, line in enumerate(text.splitlines(), start=1):
        if not pending:
            start = line_number
        if line.endswith("\\"):
            pending.append(line[:-1])
            continue
        pending.append(line)
        yield start, " ".join(pending)
        pending = []
    if pending:
        raise ManifestFormatError(f"line {start}: unterminated line continuation")


class MtreeReader(ManifestReader):
    """Decodes mtree text into ManifestEntry values."""

    def read_entries(self, data: bytes) -> Iterator[ManifestEntry]:
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ManifestFormatError(f"manifest is not valid utf-8: {e}") from e

        defaults: dict[str, str] = {}
        for line_number, line in _logical_lines(text):
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue

            tokens = stripped.split()
            head = tokens[0]
            if head == "/set":
                defaults.update(_parse_keywords(tokens[1:], line_number))
                continue
            if head == "/unset":
                for name in tokens[1:]:
                    if name == "all":
                        defaults.clear()
                    else:
                        defaults.pop(name, None)
                continue
            if head.startswith("/"):
                raise ManifestFormatError(f"line {line_number}: unknown directive {head!r}")

            keywords = {**defaults, **_parse_keywords(tokens[1:], line_number)}
            yield ManifestEntry(path=unescape_path(head), keywords=keywords)
