"""RemoteStoreAdapter — uniform async surface over a WebDAV client."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from dav_store._envelope import unwrap
from dav_store._models import DirectoryEntry, FileStat, ReadOptions
from dav_store._streams import as_bytes

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from dav_store._client import WebDAVClient
    from dav_store._path import RootScope
    from dav_store._types import WritableContent

log = logging.getLogger(__name__)


class RemoteStoreAdapter:
    """Root-scoped wrapper around a :class:`~dav_store._client.WebDAVClient`.

    Every path argument is caller-relative and normalized under the scope's
    root before reaching the client. Backend errors propagate unchanged.

    :param client: The WebDAV client to delegate to.
    :param scope: Root scope used to map paths.
    """

    def __init__(self, client: WebDAVClient, scope: RootScope) -> None:
        self._client = client
        self._scope = scope

    def __repr__(self) -> str:
        return f"RemoteStoreAdapter(client={self._client!r}, root={self._scope.root!r})"

    @property
    def scope(self) -> RootScope:
        return self._scope

    async def read(self, path: str, options: ReadOptions | Mapping[str, Any] | None = None) -> AsyncIterator[bytes]:
        """Open a streamed read, optionally limited to a byte range."""
        remote = self._scope.normalize(path)
        opts = ReadOptions.coerce(options)
        if opts.range is not None:
            log.debug("read %s range=%s", remote, opts.range.header)
            return await self._client.create_read_stream(remote, headers={"Range": opts.range.header})
        log.debug("read %s", remote)
        return await self._client.create_read_stream(remote)

    async def read_bytes(self, path: str) -> bytes:
        """Read the whole object as bytes."""
        remote = self._scope.normalize(path)
        raw = await self._client.get_file_contents(remote, format="binary")
        return as_bytes(unwrap(raw), path=path)

    async def stat(self, path: str) -> FileStat:
        """Fetch size and modification time. Missing fields are defaulted."""
        raw = await self._client.stat(self._scope.normalize(path))
        payload = unwrap(raw)
        if not isinstance(payload, Mapping):
            payload = {"size": getattr(payload, "size", None), "lastmod": getattr(payload, "lastmod", None)}
        return FileStat.from_backend(payload)

    async def exists(self, path: str) -> bool:
        """Return ``True`` if stat succeeds; any stat failure counts as missing."""
        remote = self._scope.normalize(path)
        try:
            await self._client.stat(remote)
        except Exception as exc:  # noqa: BLE001
            log.debug("stat failed for %s, treating as missing: %r", remote, exc)
            return False
        return True

    async def move(self, src: str, dest: str) -> None:
        await self._client.move_file(self._scope.normalize(src), self._scope.normalize(dest))

    async def copy(self, src: str, dest: str) -> None:
        await self._client.copy_file(self._scope.normalize(src), self._scope.normalize(dest))

    async def write(self, path: str, content: WritableContent) -> None:
        """Replace the object's content with everything in ``content``."""
        remote = self._scope.normalize(path)
        log.debug("write %s", remote)
        await self._client.put_file_contents(remote, content)

    async def delete(self, path: str) -> None:
        await self._client.delete_file(self._scope.normalize(path))

    async def list(self, prefix: str = "") -> AsyncIterator[str]:
        """Yield root-relative paths of every file under ``prefix``.

        One deep listing is fetched per call; directories are skipped.
        """
        remote = self._scope.normalize(prefix)
        raw = await self._client.get_directory_contents(remote, deep=True)
        for item in unwrap(raw):
            entry = DirectoryEntry.from_backend(item)
            if entry.is_file and isinstance(entry.filename, str):
                yield self._scope.denormalize(entry.filename)
