"""Byte payload normalization and stream draining."""

from __future__ import annotations

from collections.abc import AsyncIterable, AsyncIterator
from typing import TYPE_CHECKING, Any

from dav_store._errors import UnsupportedPayload

if TYPE_CHECKING:
    from dav_store._types import Chunk, WritableContent


def as_bytes(payload: Any, *, path: str | None = None) -> bytes:
    """Normalize a backend read payload to ``bytes``.

    Text is UTF-8 encoded; ``bytearray`` and ``memoryview`` are copied.

    :raises UnsupportedPayload: For any other payload type.
    """
    if isinstance(payload, bytes):
        return payload
    if isinstance(payload, str):
        return payload.encode("utf-8")
    if isinstance(payload, (bytearray, memoryview)):
        return bytes(payload)
    raise UnsupportedPayload(
        "Backend returned a payload that is neither text nor bytes",
        path=path,
        payload_type=type(payload).__name__,
    )


def _chunk_bytes(chunk: Chunk) -> bytes:
    if isinstance(chunk, str):
        return chunk.encode("utf-8")
    return bytes(chunk)


def is_single_payload(content: WritableContent) -> bool:
    """Return ``True`` if ``content`` is one buffer rather than a chunk stream."""
    return isinstance(content, (bytes, bytearray, memoryview, str))


async def iter_chunks(content: WritableContent) -> AsyncIterator[bytes]:
    """Yield ``content`` as ``bytes`` chunks in arrival order."""
    if is_single_payload(content):
        yield _chunk_bytes(content)  # type: ignore[arg-type]
        return
    if isinstance(content, AsyncIterable):
        async for chunk in content:
            yield _chunk_bytes(chunk)
        return
    for chunk in content:
        yield _chunk_bytes(chunk)


async def drain(content: WritableContent) -> bytes:
    """Consume ``content`` fully and return the concatenated bytes."""
    if is_single_payload(content):
        return _chunk_bytes(content)  # type: ignore[arg-type]
    parts = [chunk async for chunk in iter_chunks(content)]
    return b"".join(parts)
