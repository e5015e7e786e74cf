"""Parse CPE names bound as 2.3 formatted strings or 2.2 URIs."""

from __future__ import annotations

import dataclasses

from vcheck.cpeutils import CPE

__all__ = [
    "CPEParseError",
    "to_struct",
    "get_cpe_struct_from_string",
    "is_cpe_uri_string",
    "is_cpe_formatted_string",
    "convert_empty_to_any",
    "unbind_cpe_formatted_string",
    "unbind_cpe_uri_string",
]

_FS_ATTRIBUTES = (
    "part",
    "vendor",
    "product",
    "version",
    "update",
    "edition",
    "language",
    "software_edition",
    "target_software",
    "target_hardware",
    "other",
)

_URI_ATTRIBUTES = (
    "part",
    "vendor",
    "product",
    "version",
    "update",
    "edition",
    "language",
)

_PACKED_ATTRIBUTES = (
    "edition",
    "software_edition",
    "target_software",
    "target_hardware",
    "other",
)

_PERCENT_ENCODINGS = {
    "%21": "!", "%22": '"', "%23": "#", "%24": "$", "%25": "%", "%26": "&",
    "%27": "'", "%28": "(", "%29": ")", "%2a": "*", "%2b": "+", "%2c": ",",
    "%2f": "/", "%3a": ":", "%3b": ";", "%3c": "<", "%3d": "=", "%3e": ">",
    "%3f": "?", "%40": "@", "%5b": "[", "%5c": "\\", "%5d": "]", "%5e": "^",
    "%60": "`", "%7b": "{", "%7c": "|", "%7d": "}", "%7e": "~",
}

_URI_PREFIXES = ("cpe:/a", "cpe:/h", "cpe:/o")
_FS_PREFIXES = ("cpe:2.3:a:", "cpe:2.3:h:", "cpe:2.3:o:")


class CPEParseError(ValueError):
    """Raised when a string cannot be read as a CPE name."""


def to_struct(s: str) -> CPE:
    """Parse a CPE string, requiring at least a vendor or a product."""
    try:
        cpe = get_cpe_struct_from_string(s)
    except CPEParseError as exc:
        raise CPEParseError(f"invalid CPE string: {exc}") from exc
    if cpe.vendor == "*" and cpe.product == "*":
        raise CPEParseError("CPE Vendor and Product cannot be *")
    return cpe


def get_cpe_struct_from_string(s: str) -> CPE:
    """Parse either binding form, filling empty attributes with ``*``."""
    if is_cpe_formatted_string(s):
        return convert_empty_to_any(unbind_cpe_formatted_string(s))
    if is_cpe_uri_string(s):
        return convert_empty_to_any(unbind_cpe_uri_string(s))
    raise CPEParseError("unrecognized cpe binding form")


def is_cpe_uri_string(s: str) -> bool:
    """Tell whether the string looks like a CPE bound as a 2.2 URI."""
    return s.isascii() and s.startswith(_URI_PREFIXES) and s.count(":") >= 4


def is_cpe_formatted_string(s: str) -> bool:
    """Tell whether the string looks like a CPE bound as a 2.3 formatted string."""
    return s.isascii() and s.startswith(_FS_PREFIXES) and s.count(":") >= 5


def convert_empty_to_any(cpe: CPE) -> CPE:
    """Return a copy of the CPE with every empty attribute set to ``*``."""
    changes = {
        f.name: "*"
        for f in dataclasses.fields(cpe)
        if isinstance(getattr(cpe, f.name), str) and getattr(cpe, f.name) == ""
    }
    return dataclasses.replace(cpe, **changes)


def unbind_cpe_formatted_string(s: str) -> CPE:
    """Unbind a CPE 2.3 formatted string into a CPE."""
    s = s.lower()
    if not s.isascii():
        raise CPEParseError("cpe string contains non-ASCII chars")
    values = {
        name: _unbind_value_fs(_get_comp_fs(s, position))
        for position, name in enumerate(_FS_ATTRIBUTES, start=2)
    }
    return CPE(**values)


def _get_comp_fs(s: str, wanted: int) -> str:
    if wanted < 0 or wanted > 12:
        return ""
    count = 0
    start = 0
    for index, char in enumerate(s):
        if char == ":" and (index == 0 or s[index - 1] != "\\"):
            if count == wanted:
                return s[start:index]
            count += 1
            start = index + 1
    if count == wanted:
        return s[start:]
    return ""


def _unbind_value_fs(value: str) -> str:
    if value in ("*", ""):
        return "*"
    if value == "-":
        return "-"
    return _add_quoting(value)


def _is_word_char(char: str) -> bool:
    return char.isascii() and (char.isalnum() or char == "_")


def _add_quoting(value: str) -> str:
    result: list[str] = []
    last = len(value) - 1
    embedded = False
    index = 0
    while index < len(value):
        char = value[index]

        if _is_word_char(char):
            result.append(char)
            index += 1
            embedded = True
            continue

        if char == "\\":
            if len(value) - index > 1:
                result.append(char + value[index + 1])
                index += 2
                embedded = True
                continue
            raise CPEParseError("escaping character length failure")

        if char == "*":
            if index in (0, last):
                result.append(char)
                index += 1
                embedded = True
                continue
            raise CPEParseError("unquoted asterisk not at start or end of string")

        if char == "?":
            if (
                index in (0, last)
                or (not embedded and value[index - 1] == "?")
                or (embedded and value[index + 1] == "?")
            ):
                result.append(char)
                index += 1
                embedded = False
                continue
            raise CPEParseError("unquoted ? must be at start or end of string")

        result.append("\\" + char)
        index += 1
        embedded = True
    return "".join(result)


def unbind_cpe_uri_string(uri: str) -> CPE:
    """Unbind a CPE 2.2 URI into a CPE, following NISTIR 7695 6.1.3.2."""
    if not uri.isascii():
        raise CPEParseError("cpe string contains non-ASCII chars")

    values: dict[str, str] = {}
    for position, name in enumerate(_URI_ATTRIBUTES, start=1):
        component = _get_comp_uri(uri, position)
        if name == "edition" and component not in ("", "-") and component[0] == "~":
            values.update(_unpack_comp_uri(component))
        else:
            values[name] = _decode_comp_uri(component)
    return CPE(**values)


def _get_comp_uri(uri: str, position: int) -> str:
    if position < 1 or position > 7:
        return ""
    parts = uri.split(":", 7)
    if len(parts) <= position:
        return ""
    if position == 1:
        return parts[position].removeprefix("/")
    return parts[position]


def _decode_comp_uri(s: str) -> str:
    if s == "":
        return "*"
    if s == "-":
        return "-"

    s = s.lower()
    result: list[str] = []
    index = 0
    while index < len(s):
        char = s[index]
        if char == "%":
            if index + 2 >= len(s):
                raise CPEParseError("invalid percent-encoding")
            encoded = s[index : index + 3]
            if encoded == "%01":
                if (
                    index in (0, len(s) - 3)
                    or (index >= 3 and s[index - 3 : index] == "%01")
                    or (index + 6 <= len(s) and s[index + 3 : index + 6] == "%01")
                ):
                    result.append("?")
                else:
                    raise CPEParseError("invalid %01 encoding")
            elif encoded == "%02":
                if index in (0, len(s) - 3):
                    result.append("*")
                else:
                    raise CPEParseError("invalid %02 encoding")
            elif encoded in _PERCENT_ENCODINGS:
                result.append("\\" + _PERCENT_ENCODINGS[encoded])
            else:
                raise CPEParseError(f"unrecognized percent-encoding: {encoded}")
            index += 3
            continue
        if char in ".-~":
            result.append("\\" + char)
        else:
            result.append(char)
        index += 1
    return "".join(result)


def _unpack_comp_uri(s: str) -> dict[str, str]:
    if len(s) <= 1:
        raise CPEParseError("invalid packed URI: too short")
    components = s[1:].split("~")
    if len(components) < len(_PACKED_ATTRIBUTES):
        raise CPEParseError("invalid packed URI: not enough components")
    return {
        name: component or "*"
        for name, component in zip(_PACKED_ATTRIBUTES, components)
    }