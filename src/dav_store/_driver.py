"""DriverWebDAV — the storage driver exposed to host platforms."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from dav_store._adapter import RemoteStoreAdapter
from dav_store._chunked import ChunkedUploadEmulator
from dav_store._client import create_client
from dav_store._config import DriverConfig
from dav_store._contract import Driver, TusDriver
from dav_store._path import RootScope

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Mapping

    from dav_store._client import WebDAVClient
    from dav_store._models import FileStat, ReadOptions
    from dav_store._types import ChunkedUploadContext, WritableContent


class DriverWebDAV(Driver):
    """A WebDAV folder presented as a storage driver.

    Pass either a :class:`DriverConfig` or its fields as keyword arguments.
    All paths are relative to ``root``.

    :param config: Connection settings.
    :param client: Pre-built WebDAV client; by default one is created from
        ``config``.
    """

    def __init__(
        self,
        config: DriverConfig | None = None,
        *,
        client: WebDAVClient | None = None,
        **options: Any,
    ) -> None:
        if config is None:
            config = DriverConfig(**options)
        elif options:
            raise TypeError("Pass either a DriverConfig or keyword options, not both")
        self._config = config
        if client is None:
            client = create_client(config.base_url, config.username or None, config.password or None)
        self._client = client
        self._adapter = RemoteStoreAdapter(self._client, RootScope(config.root))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self._config.base_url!r}, root={self._config.root!r})"

    @property
    def name(self) -> str:
        return "webdav"

    @property
    def config(self) -> DriverConfig:
        return self._config

    async def read(self, filepath: str, options: ReadOptions | Mapping[str, Any] | None = None) -> AsyncIterator[bytes]:
        return await self._adapter.read(filepath, options)

    async def stat(self, filepath: str) -> FileStat:
        return await self._adapter.stat(filepath)

    async def exists(self, filepath: str) -> bool:
        return await self._adapter.exists(filepath)

    async def move(self, src: str, dest: str) -> None:
        await self._adapter.move(src, dest)

    async def copy(self, src: str, dest: str) -> None:
        await self._adapter.copy(src, dest)

    async def write(self, filepath: str, content: WritableContent) -> None:
        await self._adapter.write(filepath, content)

    async def delete(self, filepath: str) -> None:
        await self._adapter.delete(filepath)

    def list(self, prefix: str = "") -> AsyncIterator[str]:
        return self._adapter.list(prefix)

    async def close(self) -> None:
        await self._client.close()


class TusDriverWebDAV(DriverWebDAV, TusDriver):
    """:class:`DriverWebDAV` with emulated tus chunked uploads.

    :param serialize_chunks: Serialize concurrent ``write_chunk`` calls for the
        same path within this driver instance.
    """

    def __init__(
        self,
        config: DriverConfig | None = None,
        *,
        client: WebDAVClient | None = None,
        serialize_chunks: bool = False,
        **options: Any,
    ) -> None:
        super().__init__(config, client=client, **options)
        self._uploads = ChunkedUploadEmulator(self._adapter, serialize=serialize_chunks)

    @property
    def tus_extensions(self) -> list[str]:
        return self._uploads.tus_extensions

    async def create_chunked_upload(self, filepath: str, context: ChunkedUploadContext) -> ChunkedUploadContext:
        return await self._uploads.create_chunked_upload(filepath, context)

    async def write_chunk(
        self,
        filepath: str,
        content: WritableContent,
        offset: int,
        context: ChunkedUploadContext,
    ) -> int:
        return await self._uploads.write_chunk(filepath, content, offset, context)

    async def finish_chunked_upload(self, filepath: str, context: ChunkedUploadContext) -> None:
        await self._uploads.finish_chunked_upload(filepath, context)

    async def delete_chunked_upload(self, filepath: str, context: ChunkedUploadContext) -> None:
        await self._uploads.delete_chunked_upload(filepath, context)
