"""ChunkedUploadEmulator — resumable uploads on top of whole-file writes.

The server has no append or partial-write primitive, so every chunk is a
read-modify-write of the entire backing object. The emulator keeps no state
of its own: the backing object is the upload.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections import Counter
from typing import TYPE_CHECKING

from dav_store._capabilities import ExtensionSet, TusExtension
from dav_store._streams import drain

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from dav_store._adapter import RemoteStoreAdapter
    from dav_store._types import ChunkedUploadContext, WritableContent

log = logging.getLogger(__name__)

_TUS_EXTENSIONS = ExtensionSet([TusExtension.CREATION, TusExtension.TERMINATION, TusExtension.EXPIRATION])


class KeyedLock:
    """One ``asyncio.Lock`` per key, discarded once nobody holds or awaits it."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: Counter[str] = Counter()

    @contextlib.asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] += 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


class ChunkedUploadEmulator:
    """Create / write-chunk / finish / delete over a :class:`RemoteStoreAdapter`.

    :param adapter: Adapter used for all reads and writes.
    :param serialize: If ``True``, chunk writes to the same path through this
        emulator run one at a time. Otherwise concurrent writers race and the
        last one wins.
    """

    def __init__(self, adapter: RemoteStoreAdapter, *, serialize: bool = False) -> None:
        self._adapter = adapter
        self._locks = KeyedLock() if serialize else None

    @property
    def extensions(self) -> ExtensionSet:
        return _TUS_EXTENSIONS

    @property
    def tus_extensions(self) -> list[str]:
        return _TUS_EXTENSIONS.names()

    async def create_chunked_upload(self, filepath: str, context: ChunkedUploadContext) -> ChunkedUploadContext:
        """Write an empty backing object and hand ``context`` back untouched."""
        log.debug("create chunked upload %s", filepath)
        await self._adapter.write(filepath, b"")
        return context

    async def write_chunk(
        self,
        filepath: str,
        content: WritableContent,
        offset: int,
        context: ChunkedUploadContext,
    ) -> int:
        """Overwrite the object from ``offset`` with ``content``.

        Bytes at or after ``offset`` in the current object are discarded, so
        a chunk written below the current size truncates the upload.

        :returns: The new total size of the object.
        """
        if self._locks is None:
            return await self._write_chunk(filepath, content, offset)
        async with self._locks.hold(self._adapter.scope.normalize(filepath)):
            return await self._write_chunk(filepath, content, offset)

    async def _write_chunk(self, filepath: str, content: WritableContent, offset: int) -> int:
        existing = await self._adapter.read_bytes(filepath)
        chunk = await drain(content)
        if offset > len(existing):
            log.warning(
                "Chunk offset %d is past the end of %s (%d bytes); writing at the end instead",
                offset,
                filepath,
                len(existing),
            )
        new_content = existing[:offset] + chunk
        await self._adapter.write(filepath, new_content)
        log.debug("wrote chunk to %s: offset=%d chunk=%d total=%d", filepath, offset, len(chunk), len(new_content))
        return len(new_content)

    async def finish_chunked_upload(self, filepath: str, context: ChunkedUploadContext) -> None:
        """Nothing to finalize: every chunk already committed the full object."""

    async def delete_chunked_upload(self, filepath: str, context: ChunkedUploadContext) -> None:
        """Abort the upload by deleting its backing object."""
        log.debug("delete chunked upload %s", filepath)
        await self._adapter.delete(filepath)
