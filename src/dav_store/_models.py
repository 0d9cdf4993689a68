"""Immutable metadata and request models."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Optional


@dataclasses.dataclass(frozen=True)
class FileStat:
    """Immutable snapshot of file metadata.

    :param size: File size in bytes.
    :param modified: Last modification time (timezone-aware).
    """

    size: int
    modified: datetime

    @classmethod
    def from_backend(cls, raw: Mapping[str, Any]) -> FileStat:
        """Build from a backend stat payload with ``size`` and ``lastmod`` keys.

        Missing values fall back to ``0`` and the current time.
        """
        size = raw.get("size") or 0
        lastmod = raw.get("lastmod")
        modified = _parse_timestamp(lastmod) if lastmod else None
        if modified is None:
            modified = datetime.now(tz=timezone.utc)
        return cls(size=int(size), modified=modified)


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = parsedate_to_datetime(value)
        except (TypeError, ValueError):
            try:
                parsed = datetime.fromisoformat(value)
            except ValueError:
                return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclasses.dataclass(frozen=True)
class ByteRange:
    """Inclusive byte range for a partial read.

    :param start: First byte offset.
    :param end: Last byte offset, or ``None`` for "until the end".
    """

    start: int
    end: Optional[int] = None

    @property
    def header(self) -> str:
        """Value for the HTTP ``Range`` header."""
        end = "" if self.end is None else str(self.end)
        return f"bytes={self.start}-{end}"


@dataclasses.dataclass(frozen=True)
class ReadOptions:
    """Options accepted by ``read``.

    :param range: Optional byte range to fetch.
    """

    range: Optional[ByteRange] = None

    @classmethod
    def coerce(cls, options: ReadOptions | Mapping[str, Any] | None) -> ReadOptions:
        """Accept a ``ReadOptions``, a host-style mapping, or ``None``."""
        if options is None:
            return cls()
        if isinstance(options, ReadOptions):
            return options
        raw_range = options.get("range")
        if raw_range is None:
            return cls()
        if isinstance(raw_range, ByteRange):
            return cls(range=raw_range)
        return cls(range=ByteRange(start=int(raw_range["start"]), end=raw_range.get("end")))


@dataclasses.dataclass(frozen=True)
class DirectoryEntry:
    """A node reported by a deep directory listing.

    :param type: ``"file"`` or ``"directory"``.
    :param filename: Absolute remote path of the node.
    """

    type: str
    filename: str

    @property
    def is_file(self) -> bool:
        return self.type == "file"

    @classmethod
    def from_backend(cls, raw: Any) -> DirectoryEntry:
        """Build from a mapping or an object exposing ``type``/``filename``."""
        if isinstance(raw, Mapping):
            return cls(type=str(raw.get("type", "")), filename=raw.get("filename"))  # type: ignore[arg-type]
        filename = getattr(raw, "filename", None)
        return cls(type=str(getattr(raw, "type", "")), filename=filename)  # type: ignore[arg-type]
