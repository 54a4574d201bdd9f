"""Shared line parser for the `key = value` metadata formats.

.PKGINFO and .BUILDINFO use the same line grammar and differ only in the keys
they accept and in whether `#` comment lines are allowed. Each record kind
declares a schema mapping keys to the record attribute they populate.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from aether.errors import (
    InvalidEncodingError,
    InvalidValueError,
    MalformedLineError,
    UnrecognizedKeyError,
)

DELIMITER = " = "

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
# Longest digit run (leading zeros aside) that can still fit in 32 bits.
INT32_MAX_DIGITS = 10

FieldKind = Literal["str", "int", "list"]


@dataclass(frozen=True)
class FieldSpec:
    """How one metadata key maps onto a record attribute."""

    attribute: str
    kind: FieldKind


@dataclass(frozen=True)
class RecordSchema:
    """Keys accepted by one metadata record kind.

    Attributes:
        record_kind: Name used in error messages ("PkgInfo", "BuildInfo")
        fields: Mapping from file key to FieldSpec, in canonical output order
        allow_comments: Whether lines starting with `#` are skipped
    """

    record_kind: str
    fields: dict[str, FieldSpec]
    allow_comments: bool


def decode_metadata(data: bytes, schema: RecordSchema, source: Path | None = None) -> str:
    """Decode raw file bytes as UTF-8.

    Raises:
        InvalidEncodingError: If the bytes are not valid UTF-8
    """
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidEncodingError(
            f"found invalid utf-8 while attempting to parse for a {schema.record_kind}",
            record_kind=schema.record_kind,
            source=source,
        ) from e


def parse_int32(
    value: str,
    key: str,
    schema: RecordSchema,
    *,
    source: Path | None,
    line_number: int,
    line: str,
) -> int:
    """Parse a base-10 signed 32-bit integer field value."""
    number: int | None = None
    if INTEGER_PATTERN.fullmatch(value):
        digits = value.lstrip("+-").lstrip("0")
        if len(digits) <= INT32_MAX_DIGITS:
            number = int(digits or "0")
            if value.startswith("-"):
                number = -number
    if number is None or not INT32_MIN <= number <= INT32_MAX:
        raise InvalidValueError(
            f"unable to parse {key}: {value!r} is not a 32-bit integer",
            record_kind=schema.record_kind,
            source=source,
            line_number=line_number,
            line=line,
        )
    return number


def parse_fields(data: bytes, schema: RecordSchema, source: Path | None = None) -> dict[str, Any]:
    """Parse metadata bytes into a dict of record attributes.

    Scalar keys are last-write-wins, list keys accumulate in file order.
    Attributes whose key never appears are absent from the result, so the caller's
    record defaults apply.

    Args:
        data: Raw file contents
        schema: Record schema to parse against
        source: File path, used only for error messages

    Returns:
        Mapping from record attribute name to parsed value

    Raises:
        InvalidEncodingError: Data is not UTF-8
        MalformedLineError: A non-empty line lacks the ' = ' delimiter
        UnrecognizedKeyError: A key is not declared by the schema
        InvalidValueError: A numeric field is not a 32-bit integer
    """
    text = decode_metadata(data, schema, source)

    values: dict[str, Any] = {}
    for line_number, raw_line in enumerate(text.split("\n"), start=1):
        line = raw_line.removesuffix("\r")
        if not line:
            continue
        if schema.allow_comments and line.startswith("#"):
            continue

        key, delimiter, value = line.partition(DELIMITER)
        if not delimiter:
            raise MalformedLineError(
                f"unable to parse file for {schema.record_kind}: no '{DELIMITER.strip()}' "
                "delimiter found",
                record_kind=schema.record_kind,
                source=source,
                line_number=line_number,
                line=line,
            )

        spec = schema.fields.get(key)
        if spec is None:
            raise UnrecognizedKeyError(
                key,
                record_kind=schema.record_kind,
                source=source,
                line_number=line_number,
                line=line,
            )

        if spec.kind == "list":
            values.setdefault(spec.attribute, []).append(value)
        elif spec.kind == "int":
            values[spec.attribute] = parse_int32(
                value, key, schema, source=source, line_number=line_number, line=line
            )
        else:
            values[spec.attribute] = value

    return values


def format_fields(record: object, schema: RecordSchema) -> str:
    """Render a record back into `key = value` lines.

    Scalars are written first in schema order, followed by every list entry.
    Empty strings and empty lists are omitted, so only representable values
    survive a format/parse round trip.
    """
    scalar_lines: list[str] = []
    list_lines: list[str] = []
    for key, spec in schema.fields.items():
        value = getattr(record, spec.attribute)
        if spec.kind == "list":
            list_lines.extend(f"{key}{DELIMITER}{item}" for item in value)
        elif spec.kind == "int":
            scalar_lines.append(f"{key}{DELIMITER}{value}")
        elif value:
            scalar_lines.append(f"{key}{DELIMITER}{value}")
    return "\n".join(scalar_lines + list_lines) + "\n"
