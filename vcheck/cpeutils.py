"""CPE records, version comparison and CPE value unquoting."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, NamedTuple

__all__ = [
    "CPE",
    "CPEVulnerabilities",
    "VersionError",
    "process",
    "remove_duplicates_unordered",
    "compare_versions",
    "compare_versions_by_uint64",
    "get_uint64_from_version",
    "remove_cve_entry",
    "remove_cve_entries",
    "is_parseable_version",
    "unquote",
]

_MAX_FIELDS = 8
_UINT64_LIMIT = 1 << 64
_INT64_LIMIT = 1 << 63

_MAJOR_X = re.compile(r"[0-9]{1,3}\.x")
_DIGITS = re.compile(r"[0-9]+")
_SEMVERISH = re.compile(
    r"v?([0-9]+(?:\.[0-9]+)*?)"
    r"(-([0-9]+[0-9A-Za-z\-~]*(?:\.[0-9A-Za-z\-~]+)*)"
    r"|(-?([A-Za-z\-~]+[0-9A-Za-z\-~]*(?:\.[0-9A-Za-z\-~]+)*)))?"
    r"(\+([0-9A-Za-z\-~]+(?:\.[0-9A-Za-z\-~]+)*))?"
)


class VersionError(ValueError):
    """Raised when a version string cannot be interpreted."""


@dataclass
class CPE:
    """The eleven attributes of a CPE name."""

    part: str = ""
    vendor: str = ""
    product: str = ""
    version: str = ""
    update: str = ""
    edition: str = ""
    language: str = ""
    software_edition: str = ""
    target_software: str = ""
    target_hardware: str = ""
    other: str = ""


@dataclass
class CPEVulnerabilities(CPE):
    """A CPE together with its full 2.3 string and associated CVEs."""

    cpe23_uri: str = ""
    cves: list[str] = field(default_factory=list)


def process(cpe: CPE, entries: Iterable[CPEVulnerabilities]) -> list[str]:
    """Collect the distinct CVEs of entries matching the CPE's version.

    When the CPE's version cannot be parsed, every entry's CVEs are taken.
    """
    version = unquote(cpe.version)
    findings: list[str] = []
    if is_parseable_version(version):
        for entry in entries:
            try:
                if compare_versions(version, unquote(entry.version)) == 0:
                    findings.extend(entry.cves)
            except VersionError:
                continue
    else:
        for entry in entries:
            findings.extend(entry.cves)
    return remove_duplicates_unordered(findings)


def remove_duplicates_unordered(elements: Iterable[str]) -> list[str]:
    """Return the distinct elements; order is not significant."""
    return list(dict.fromkeys(elements))


def _sign(a: int, b: int) -> int:
    return (a > b) - (a < b)


def compare_versions(a: str, b: str) -> int:
    """Compare two versions, returning -1, 0 or 1.

    Handles ``N.x`` major-only patterns, dotted numeric versions and
    semantic-style versions with pre-release and build parts.
    """
    if _MAJOR_X.fullmatch(b):
        a_major = a.split(".")[0]
        b_major = b.split(".")[0]
        if _is_go_int(a_major) and _is_go_int(b_major):
            return _sign(int(a_major), int(b_major))

    try:
        return compare_versions_by_uint64(a, b)
    except VersionError:
        pass

    left = _parse_semverish(a)
    right = _parse_semverish(b)
    return _compare_semverish(left, right)


def _is_go_int(text: str) -> bool:
    return re.fullmatch(r"[+-]?[0-9]+", text) is not None and -_INT64_LIMIT <= int(text) < _INT64_LIMIT


def compare_versions_by_uint64(a: str, b: str) -> int:
    """Compare two dotted numeric versions through their packed integer form."""
    return _sign(get_uint64_from_version(a), get_uint64_from_version(b))


def get_uint64_from_version(version: str) -> int:
    """Pack up to eight dotted numeric fields into one 64-bit integer, one byte each."""
    fields = _version_fields(version)
    if not fields:
        raise VersionError("no fields detected in version slice")
    if len(fields) > _MAX_FIELDS:
        raise VersionError("too many fields detected in version slice")
    packed = 0
    mask = 0xFF00000000000000
    for position, value in enumerate(fields):
        packed |= (value << (56 - position * 8)) & mask
        mask >>= 8
    return packed


def _version_fields(version: str) -> list[int]:
    parts = version.split(".")
    if len(parts) > _MAX_FIELDS:
        raise VersionError(f"version {version} contains greater than 8 fields")
    fields = []
    for part in parts:
        if not _DIGITS.fullmatch(part) or int(part) >= _UINT64_LIMIT:
            raise VersionError(f"version {version} contains unsupported field: {part!r}")
        fields.append(int(part))
    return fields


class _SemVerish(NamedTuple):
    segments: tuple[int, ...]
    prerelease: str


def _parse_semverish(text: str) -> _SemVerish:
    match = _SEMVERISH.fullmatch(text)
    if match is None:
        raise VersionError(f"unable to parse version: {text}")
    segments = []
    for piece in match.group(1).split("."):
        value = int(piece)
        if value >= _INT64_LIMIT:
            raise VersionError(f"unable to parse version: {text}")
        segments.append(value)
    while len(segments) < 3:
        segments.append(0)
    prerelease = match.group(5) or match.group(3) or ""
    return _SemVerish(tuple(segments), prerelease)


def _compare_semverish(left: _SemVerish, right: _SemVerish) -> int:
    width = max(len(left.segments), len(right.segments))
    lhs = left.segments + (0,) * (width - len(left.segments))
    rhs = right.segments + (0,) * (width - len(right.segments))
    if lhs != rhs:
        return -1 if lhs < rhs else 1

    if not left.prerelease and not right.prerelease:
        return 0
    if not left.prerelease:
        return 1
    if not right.prerelease:
        return -1
    return _compare_prereleases(left.prerelease, right.prerelease)


def _compare_prereleases(left: str, right: str) -> int:
    if left == right:
        return 0
    left_parts = left.split(".")
    right_parts = right.split(".")
    for index in range(max(len(left_parts), len(right_parts))):
        lhs = left_parts[index] if index < len(left_parts) else ""
        rhs = right_parts[index] if index < len(right_parts) else ""
        result = _compare_prerelease_part(lhs, rhs)
        if result:
            return result
    return 0


def _compare_prerelease_part(left: str, right: str) -> int:
    if left == right:
        return 0
    left_numeric = _is_go_int(left)
    right_numeric = _is_go_int(right)
    if left == "":
        return -1 if right_numeric else 1
    if right == "":
        return 1 if left_numeric else -1
    if left_numeric and not right_numeric:
        return -1
    if not left_numeric and right_numeric:
        return 1
    if not left_numeric and not right_numeric:
        return 1 if left > right else -1
    return 1 if int(left) > int(right) else -1


def remove_cve_entry(entries: list[str], cve: str) -> list[str]:
    """Return the entries without the first occurrence of ``cve``."""
    if cve in entries:
        position = entries.index(cve)
        return entries[:position] + entries[position + 1 :]
    return list(entries)


def remove_cve_entries(entries: list[str], cves: Iterable[str]) -> list[str]:
    """Remove one occurrence of each of ``cves`` from the entries."""
    result = list(entries)
    for cve in cves:
        result = remove_cve_entry(result, cve)
    return result


def is_parseable_version(version: str) -> bool:
    """Tell whether the version is dotted numeric or semantic-style."""
    try:
        get_uint64_from_version(version)
        return True
    except VersionError:
        pass
    try:
        _parse_semverish(version)
        return True
    except VersionError:
        return False


def unquote(value: str) -> str:
    """Remove the escaping of ``.``, ``-`` and ``_`` from a CPE attribute value.

    ``*`` and ``-`` are kept, an empty value becomes ``*``.
    """
    if value in ("*", "-"):
        return value
    if value == "":
        return "*"

    result: list[str] = []
    chars = iter(value)
    for char in chars:
        if char != "\\":
            result.append(char)
            continue
        following = next(chars, None)
        if following is None:
            raise ValueError(f"dangling escape at end of {value!r}")
        if following in ".-_":
            result.append(following)
        else:
            result.append("\\" + following)
    return "".join(result)