"""Type aliases used throughout dav_store."""

from __future__ import annotations

from collections.abc import AsyncIterable, Iterable
from typing import Any, Union

BytesLike = Union[bytes, bytearray, memoryview]  # noqa: UP007
Chunk = Union[BytesLike, str]  # noqa: UP007
WritableContent = Union[BytesLike, str, AsyncIterable[Chunk], Iterable[Chunk]]  # noqa: UP007
ChunkedUploadContext = Any
