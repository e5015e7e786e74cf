"""Records of offline indices synced to the local cache."""

from __future__ import annotations

import re
import shutil
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any

import yaml

from vcheck.config import ConfigError, indices_dir

__all__ = [
    "IndexInfo",
    "InfoFile",
    "CacheError",
    "indices",
    "save_indices",
    "purge_indices",
]

SYNC_INFO = "sync_info.yaml"
_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)
_LONG_FRACTION = re.compile(r"(\.\d{6})\d+")


class CacheError(Exception):
    """Raised when the cache records cannot be read or written."""


def _parse_time(value: Any) -> datetime:
    if value is None or value == "":
        return _ZERO_TIME
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    text = str(value).strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _LONG_FRACTION.sub(r"\1", text)
    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise CacheError(f"failed to parse sync info: invalid time {value!r}") from exc


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


@dataclass
class IndexInfo:
    """One synced index: its name, sync time, size in bytes and server date."""

    name: str
    last_sync: datetime = field(default_factory=lambda: _ZERO_TIME)
    size: int = 0
    last_updated: str = ""

    @classmethod
    def _from_mapping(cls, data: Any) -> IndexInfo:
        if not isinstance(data, dict):
            raise CacheError("failed to parse sync info: index entry is not a mapping")
        try:
            size = int(data.get("size") or 0)
        except (TypeError, ValueError) as exc:
            raise CacheError(f"failed to parse sync info: {exc}") from exc
        return cls(
            name=_as_text(data.get("name")),
            last_sync=_parse_time(data.get("last_sync")),
            size=size,
            last_updated=_as_text(data.get("last_updated")),
        )

    def _to_mapping(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "last_sync": self.last_sync.isoformat(),
            "size": self.size,
            "last_updated": self.last_updated,
        }


@dataclass
class InfoFile:
    """The list of synced indices."""

    indices: list[IndexInfo] = field(default_factory=list)

    def index_exists(self, name: str) -> bool:
        """Tell whether an index of that name has been synced."""
        return any(index.name == name for index in self.indices)

    def get_index(self, name: str) -> IndexInfo | None:
        """Return the first index of that name, or None."""
        return next((index for index in self.indices if index.name == name), None)


def indices() -> InfoFile:
    """Read the sync records; no record file means nothing has been synced."""
    path = indices_dir() / SYNC_INFO
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return InfoFile()
    except OSError as exc:
        raise CacheError(f"failed to read sync info: {exc}") from exc

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise CacheError(f"failed to parse sync info: {exc}") from exc
    if data is None:
        return InfoFile()
    if not isinstance(data, dict):
        raise CacheError("failed to parse sync info: not a mapping")
    entries = data.get("indices") or []
    if not isinstance(entries, list):
        raise CacheError("failed to parse sync info: indices is not a list")
    return InfoFile([IndexInfo._from_mapping(entry) for entry in entries])


def save_indices(info: InfoFile) -> None:
    """Write the sync records."""
    path = indices_dir() / SYNC_INFO
    content = {"indices": [index._to_mapping() for index in info.indices]}
    try:
        path.write_text(yaml.safe_dump(content, sort_keys=False), encoding="utf-8")
    except OSError as exc:
        raise CacheError(f"failed to write sync info: {exc}") from exc


def purge_indices() -> None:
    """Remove every cached index and leave an empty indices directory."""
    try:
        directory = indices_dir()
    except ConfigError as exc:
        raise CacheError(f"failed to get indices directory: {exc}") from exc
    try:
        shutil.rmtree(directory, ignore_errors=False)
    except FileNotFoundError:
        pass
    except OSError as exc:
        raise CacheError(f"failed to remove indices directory: {exc}") from exc
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise CacheError(f"failed to recreate indices directory: {exc}") from exc