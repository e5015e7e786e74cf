"""Build filter expressions for searching offline CPE indices."""

from __future__ import annotations

from vcheck.cpeutils import CPE, is_parseable_version, unquote

__all__ = ["QueryError", "query", "add_condition", "build_cpe_query"]

_SIMPLE_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}


class QueryError(ValueError):
    """Raised when a CPE is too unspecific to query."""


def _quote(value: str) -> str:
    pieces = []
    for char in value:
        if char in _SIMPLE_ESCAPES:
            pieces.append(_SIMPLE_ESCAPES[char])
        elif char.isprintable():
            pieces.append(char)
        elif ord(char) < 0x80:
            pieces.append(f"\\x{ord(char):02x}")
        elif ord(char) <= 0xFFFF:
            pieces.append(f"\\u{ord(char):04x}")
        else:
            pieces.append(f"\\U{ord(char):08x}")
    return '"' + "".join(pieces) + '"'


def query(cpe: CPE) -> str:
    """Build the filter for a CPE, matching the version only when it is not parseable."""
    if cpe.vendor == "*" and cpe.product == "*":
        raise QueryError("need at least vendor or product specified")
    return build_cpe_query(cpe, not is_parseable_version(unquote(cpe.version)))


def add_condition(field: str, value: str) -> str:
    """Return the condition for one attribute, or "" for a wildcard value."""
    if value == "*":
        return ""
    return f'(.{field} == {_quote(value)} or .{field} == "*")'


def build_cpe_query(cpe: CPE, query_version: bool) -> str:
    """Join the conditions for every specified attribute of the CPE."""
    if cpe.vendor == "*" and cpe.product == "*":
        raise QueryError("need at least vendor or product specified")

    fields = [
        ("vendor", cpe.vendor),
        ("product", cpe.product),
        ("update", cpe.update),
        ("edition", cpe.edition),
        ("language", cpe.language),
        ("sw_edition", cpe.software_edition),
        ("target_sw", cpe.target_software),
        ("target_hw", cpe.target_hardware),
        ("other", cpe.other),
    ]
    if query_version:
        fields.append(("version", unquote(cpe.version)))

    conditions = [c for c in (add_condition(name, value) for name, value in fields) if c]
    if not conditions:
        return "true"
    return " and ".join(conditions)