"""Tests for .PKGINFO parsing and formatting."""

from pathlib import Path

import pytest

from aether.errors import (
    InvalidEncodingError,
    InvalidValueError,
    MalformedLineError,
    MetadataError,
    UnrecognizedKeyError,
)
from aether.metadata import PackageMetadata, format_pkginfo, load_pkginfo, parse_pkginfo


def test_parses_name_version_and_repeated_arch() -> None:
    """Test that repeated list keys accumulate in file order."""
    data = b"pkgname = foo\npkgver = 1.0-1\narch = x86_64\narch = any\n"

    metadata = parse_pkginfo(data)

    assert metadata.name == "foo"
    assert metadata.version == "1.0-1"
    assert metadata.arch == ["x86_64", "any"]


def test_parses_every_field_kind() -> None:
    """Test scalar, numeric and list keys map onto their record attributes."""
    data = (
        b"pkgname = ripgrep\n"
        b"pkgbase = ripgrep\n"
        b"pkgver = 14.1.0-1\n"
        b"pkgdesc = A search tool that combines the usability of ag with the speed of grep\n"
        b"url = https://github.com/BurntSushi/ripgrep\n"
        b"builddate = 1704067200\n"
        b"packager = Jane Doe <jane@example.com>\n"
        b"size = 4461568\n"
        b"license = MIT\n"
        b"license = Unlicense\n"
        b"conflict = ripgrep-git\n"
        b"provides = rg\n"
        b"depend = gcc-libs\n"
        b"depend = pcre2\n"
        b"optdepend = bash-completion: completions\n"
        b"makedepend = cargo\n"
        b"checkdepend = python\n"
        b"backup = etc/ripgreprc\n"
        b"group = utils\n"
        b"replaces = ripgrep-bin\n"
        b"xdata = pkgtype=pkg\n"
    )

    metadata = parse_pkginfo(data)

    assert metadata.base == "ripgrep"
    assert metadata.description.startswith("A search tool")
    assert metadata.url == "https://github.com/BurntSushi/ripgrep"
    assert metadata.builddate == 1704067200
    assert metadata.packager == "Jane Doe <jane@example.com>"
    assert metadata.size == 4461568
    assert metadata.license == ["MIT", "Unlicense"]
    assert metadata.conflicts == ["ripgrep-git"]
    assert metadata.provides == ["rg"]
    assert metadata.depends == ["gcc-libs", "pcre2"]
    assert metadata.optdepends == ["bash-completion: completions"]
    assert metadata.makedepends == ["cargo"]
    assert metadata.checkdepends == ["python"]
    assert metadata.backup == ["etc/ripgreprc"]
    assert metadata.groups == ["utils"]
    assert metadata.replaces == ["ripgrep-bin"]
    assert metadata.xdata == ["pkgtype=pkg"]


def test_skips_comments_and_blank_lines() -> None:
    data = b"# Generated by makepkg\n\npkgname = foo\n# pkgver = nope\npkgver = 1\n"

    metadata = parse_pkginfo(data)

    assert metadata == PackageMetadata(name="foo", version="1")


def test_scalar_keys_are_last_write_wins() -> None:
    metadata = parse_pkginfo(b"pkgname = first\npkgname = second\n")

    assert metadata.name == "second"


def test_value_keeps_later_delimiters() -> None:
    """Test that only the first ' = ' splits key from value."""
    metadata = parse_pkginfo(b"pkgdesc = a = b\n")

    assert metadata.description == "a = b"


def test_accepts_crlf_line_endings() -> None:
    metadata = parse_pkginfo(b"pkgname = foo\r\npkgver = 2\r\n")

    assert metadata.name == "foo"
    assert metadata.version == "2"


def test_missing_delimiter_reports_line() -> None:
    """Test that a line without ' = ' fails and names the offending line."""
    with pytest.raises(MalformedLineError) as exc_info:
        parse_pkginfo(b"pkgname = foo\npkgver=1.0\n")

    assert exc_info.value.line_number == 2
    assert exc_info.value.line == "pkgver=1.0"
    assert "pkgver=1.0" in str(exc_info.value)


def test_unknown_key_names_key_and_record_kind() -> None:
    with pytest.raises(UnrecognizedKeyError) as exc_info:
        parse_pkginfo(b"pkgname = foo\nfrobnicate = yes\n")

    assert exc_info.value.key == "frobnicate"
    assert exc_info.value.record_kind == "PkgInfo"
    assert "frobnicate: unrecognized key name for PkgInfo" in str(exc_info.value)
    assert ":2:" in str(exc_info.value)


@pytest.mark.parametrize(
    "value",
    ["big", "12abc", "", "1.5", "2147483648", "-2147483649", "9" * 5000, "-" + "1" * 5000],
)
def test_invalid_numeric_value(value: str) -> None:
    with pytest.raises(InvalidValueError):
        parse_pkginfo(f"size = {value}\n".encode())


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2147483647", 2147483647),
        ("-2147483648", -2147483648),
        ("+7", 7),
        ("0", 0),
        ("-0", 0),
        ("0" * 5000 + "42", 42),
    ],
)
def test_numeric_value_within_int32(value: str, expected: int) -> None:
    metadata = parse_pkginfo(f"builddate = {value}\n".encode())

    assert metadata.builddate == expected


def test_invalid_utf8_fails_with_encoding_error() -> None:
    with pytest.raises(InvalidEncodingError):
        parse_pkginfo(b"pkgname = \xff\xfe\n")


def test_metadata_errors_are_value_errors() -> None:
    """Test that every parse error can be caught as ValueError."""
    with pytest.raises(ValueError):
        parse_pkginfo(b"nonsense\n")


def test_load_pkginfo_includes_path_in_errors(tmp_path: Path) -> None:
    pkginfo = tmp_path / ".PKGINFO"
    pkginfo.write_bytes(b"pkgname = foo\nbogus = 1\n")

    with pytest.raises(MetadataError) as exc_info:
        load_pkginfo(pkginfo)

    assert exc_info.value.source == pkginfo
    assert str(exc_info.value).startswith(f"{pkginfo}:2:")


def test_load_pkginfo_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_pkginfo(tmp_path / ".PKGINFO")


def test_format_then_parse_round_trips() -> None:
    """Test that formatted metadata reparses to an identical record."""
    original = parse_pkginfo(
        b"# comment\n"
        b"pkgname = foo\n"
        b"pkgver = 1.0-1\n"
        b"pkgdesc = Foo tool\n"
        b"size = 100\n"
        b"arch = x86_64\n"
        b"arch = any\n"
        b"depend = glibc\n"
        b"depend = zlib\n"
    )

    text = format_pkginfo(original)

    assert parse_pkginfo(text.encode()) == original
    assert "arch = x86_64\narch = any\n" in text
