"""SBOM component references and CVSS score selection from NVD records."""

from __future__ import annotations

import json
import os
import struct
from dataclasses import dataclass
from typing import Any, Mapping

__all__ = [
    "InputSbomRef",
    "SbomError",
    "load_sbom_refs",
    "format_single_decimal",
    "base_score",
    "temporal_score",
]

NOT_AVAILABLE = "n/a"


class SbomError(Exception):
    """Raised when an SBOM file cannot be read."""


@dataclass(frozen=True)
class InputSbomRef:
    """The bom-ref and package URL of one SBOM component."""

    sbom_ref: str
    purl: str


def load_sbom_refs(input_file: str | os.PathLike[str]) -> list[InputSbomRef]:
    """Read a CycloneDX JSON SBOM and return the components having both bom-ref and purl."""
    name = os.fspath(input_file)
    try:
        with open(name, "rb") as handle:
            content = handle.read()
    except FileNotFoundError as exc:
        raise SbomError(f"unable to open SBOM file {name}: {exc}") from exc
    except OSError as exc:
        raise SbomError(f"unable to read SBOM file {name}: {exc}") from exc

    try:
        document = json.loads(content)
    except (ValueError, UnicodeDecodeError) as exc:
        raise SbomError(f"unable to parse SBOM JSON from file {name}: {exc}") from exc
    if not isinstance(document, dict):
        raise SbomError(f"unable to parse SBOM JSON from file {name}: not an object")

    components = document.get("components")
    if not isinstance(components, list):
        return []
    return [
        InputSbomRef(sbom_ref=component["bom-ref"], purl=component["purl"])
        for component in components
        if isinstance(component, dict)
        and isinstance(component.get("bom-ref"), str)
        and isinstance(component.get("purl"), str)
    ]


def format_single_decimal(value: float) -> str:
    """Format a single-precision score with one decimal place."""
    single = struct.unpack("f", struct.pack("f", value))[0]
    return f"{single:.1f}"


def _first(entries: Any) -> Mapping[str, Any] | None:
    if isinstance(entries, list) and entries and isinstance(entries[0], Mapping):
        return entries[0]
    return None


def _cvss_data_score(metrics: Mapping[str, Any], key: str, score_key: str) -> Any:
    entry = _first(metrics.get(key))
    if entry is None:
        return None
    data = entry.get("cvssData")
    return data.get(score_key) if isinstance(data, Mapping) else None


def _temporal_object_score(metrics: Mapping[str, Any], key: str) -> Any:
    entry = metrics.get(key)
    return entry.get("temporalScore") if isinstance(entry, Mapping) else None


def _temporal_list_score(metrics: Mapping[str, Any], key: str) -> Any:
    entry = _first(metrics.get(key))
    return entry.get("temporalScore") if entry is not None else None


def _pick(lookups) -> str:
    for lookup in lookups:
        score = lookup()
        if score is not None:
            return format_single_decimal(score)
    return NOT_AVAILABLE


def base_score(item: Mapping[str, Any]) -> str:
    """Return the CVSS base score, preferring v3.1, then v3.0, then v2."""
    metrics = item.get("metrics")
    if not isinstance(metrics, Mapping):
        return NOT_AVAILABLE
    return _pick(
        lambda key=key: _cvss_data_score(metrics, key, "baseScore")
        for key in ("cvssMetricV31", "cvssMetricV30", "cvssMetricV2")
    )


def temporal_score(item: Mapping[str, Any]) -> str:
    """Return the CVSS temporal score, searching the v3.1, v3.0 and v2 sources in turn."""
    metrics = item.get("metrics")
    if not isinstance(metrics, Mapping):
        return NOT_AVAILABLE
    return _pick(
        [
            lambda: _cvss_data_score(metrics, "cvssMetricV31", "temporalScore"),
            lambda: _temporal_object_score(metrics, "temporalCVSSV31"),
            lambda: _temporal_list_score(metrics, "temporalCVSSV31Secondary"),
            lambda: _cvss_data_score(metrics, "cvssMetricV30", "temporalScore"),
            lambda: _temporal_list_score(metrics, "temporalCVSSV30Secondary"),
            lambda: _temporal_object_score(metrics, "temporalCVSSV30"),
            lambda: _cvss_data_score(metrics, "cvssMetricV2", "temporalScore"),
            lambda: _temporal_object_score(metrics, "temporalCVSSV2"),
            lambda: _temporal_list_score(metrics, "temporalCVSSV2Secondary"),
        ]
    )