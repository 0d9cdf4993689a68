"""Driver abstract base classes — the contracts a host platform programs against."""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Mapping
    from types import TracebackType

    from dav_store._models import FileStat, ReadOptions
    from dav_store._types import ChunkedUploadContext, WritableContent


class Driver(abc.ABC):
    """Base storage-driver contract.

    All paths are relative to the driver's root. All operations are
    coroutines; errors from the storage service are not translated.
    """

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Unique identifier for this driver type (e.g. ``'webdav'``)."""

    @abc.abstractmethod
    async def read(self, filepath: str, options: ReadOptions | Mapping[str, Any] | None = None) -> AsyncIterator[bytes]:
        """Open a file for streamed reading, optionally limited to a byte range.

        The request is sent before this returns, so missing files and
        authorization failures raise here rather than on first iteration.
        Call ``aclose()`` on the returned iterator when stopping early to
        release the connection.
        """

    @abc.abstractmethod
    async def stat(self, filepath: str) -> FileStat:
        """Get size and modification time of a file."""

    @abc.abstractmethod
    async def exists(self, filepath: str) -> bool:
        """Check if a file exists. Never raises."""

    @abc.abstractmethod
    async def move(self, src: str, dest: str) -> None:
        """Move/rename a file."""

    @abc.abstractmethod
    async def copy(self, src: str, dest: str) -> None:
        """Copy a file."""

    @abc.abstractmethod
    async def write(self, filepath: str, content: WritableContent) -> None:
        """Replace a file's content."""

    @abc.abstractmethod
    async def delete(self, filepath: str) -> None:
        """Delete a file."""

    @abc.abstractmethod
    def list(self, prefix: str = "") -> AsyncIterator[str]:
        """Iterate over the paths of all files under ``prefix``."""

    async def close(self) -> None:  # noqa: B027
        """Release resources. Default is a no-op."""

    async def __aenter__(self) -> Driver:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()


class TusDriver(Driver):
    """Driver that additionally supports tus-style chunked uploads."""

    @property
    @abc.abstractmethod
    def tus_extensions(self) -> list[str]:
        """Names of the tus extensions this driver supports."""

    @abc.abstractmethod
    async def create_chunked_upload(self, filepath: str, context: ChunkedUploadContext) -> ChunkedUploadContext:
        """Start an upload at ``filepath`` and return the (possibly updated) context."""

    @abc.abstractmethod
    async def write_chunk(
        self,
        filepath: str,
        content: WritableContent,
        offset: int,
        context: ChunkedUploadContext,
    ) -> int:
        """Write a chunk at ``offset`` and return the upload's new size."""

    @abc.abstractmethod
    async def finish_chunked_upload(self, filepath: str, context: ChunkedUploadContext) -> None:
        """Finalize an upload."""

    @abc.abstractmethod
    async def delete_chunked_upload(self, filepath: str, context: ChunkedUploadContext) -> None:
        """Abort an upload and remove what was written."""
