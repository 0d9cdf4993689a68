"""Shared test fixtures: an in-memory WebDAV client and drivers built on it."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import pytest

from dav_store._adapter import RemoteStoreAdapter
from dav_store._driver import DriverWebDAV, TusDriverWebDAV
from dav_store._path import RootScope
from dav_store._streams import drain

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from dav_store._types import WritableContent


class FakeNotFound(Exception):
    """Stands in for the transport's 404 error."""


class FakeWebDAVClient:
    """In-memory WebDAV client keyed by absolute remote path.

    :param envelope: Wrap stat/listing/read results in ``{"data": ...}``.
    :param binary_as: Payload type returned by ``get_file_contents``:
        ``"bytes"``, ``"str"``, ``"bytearray"`` or ``"memoryview"``.
    :param stat_error: If set, every ``stat`` raises this exception.
    :param write_delay: Seconds to sleep inside each read and write, to
        let concurrent callers interleave.
    """

    def __init__(
        self,
        *,
        envelope: bool = False,
        binary_as: str = "bytes",
        stat_error: Exception | None = None,
        write_delay: float = 0.0,
    ) -> None:
        self.files: dict[str, bytes] = {}
        self.dirs: set[str] = set()
        self.calls: list[tuple[Any, ...]] = []
        self.listing: list[Any] | None = None
        self.envelope = envelope
        self.binary_as = binary_as
        self.stat_error = stat_error
        self.write_delay = write_delay
        self.closed = False

    def _wrap(self, payload: Any) -> Any:
        return {"data": payload} if self.envelope else payload

    def _require(self, path: str) -> bytes:
        if path not in self.files:
            raise FakeNotFound(path)
        return self.files[path]

    async def stat(self, path: str) -> Any:
        self.calls.append(("stat", path))
        if self.stat_error is not None:
            raise self.stat_error
        if path in self.dirs:
            return self._wrap({"size": None, "lastmod": None, "type": "directory"})
        data = self._require(path)
        return self._wrap({"size": len(data), "lastmod": "Tue, 05 Mar 2024 10:00:00 GMT", "type": "file"})

    async def create_read_stream(self, path: str, headers: dict[str, str] | None = None) -> AsyncIterator[bytes]:
        self.calls.append(("create_read_stream", path, headers))
        return self._stream(self._require(path), headers)

    @staticmethod
    async def _stream(data: bytes, headers: dict[str, str] | None) -> AsyncIterator[bytes]:
        if headers and "Range" in headers:
            start, _, end = headers["Range"].removeprefix("bytes=").partition("-")
            data = data[int(start) : int(end) + 1] if end else data[int(start) :]
        for i in range(0, len(data), 4):
            yield data[i : i + 4]

    async def get_file_contents(self, path: str, format: str = "binary") -> Any:  # noqa: A002
        self.calls.append(("get_file_contents", path, format))
        data = self._require(path)
        if self.write_delay:
            await asyncio.sleep(self.write_delay)
        payload: Any
        if self.binary_as == "str":
            payload = data.decode("utf-8")
        elif self.binary_as == "bytearray":
            payload = bytearray(data)
        elif self.binary_as == "memoryview":
            payload = memoryview(data)
        else:
            payload = data
        return self._wrap(payload)

    async def put_file_contents(self, path: str, content: WritableContent) -> None:
        self.calls.append(("put_file_contents", path))
        data = await drain(content)
        if self.write_delay:
            await asyncio.sleep(self.write_delay)
        self.files[path] = data

    async def move_file(self, src: str, dest: str) -> None:
        self.calls.append(("move_file", src, dest))
        self._require(src)
        self.files[dest] = self.files.pop(src)

    async def copy_file(self, src: str, dest: str) -> None:
        self.calls.append(("copy_file", src, dest))
        self.files[dest] = self._require(src)

    async def delete_file(self, path: str) -> None:
        self.calls.append(("delete_file", path))
        self._require(path)
        del self.files[path]

    async def get_directory_contents(self, path: str, deep: bool = True) -> Any:
        self.calls.append(("get_directory_contents", path, deep))
        if self.listing is not None:
            return self._wrap(list(self.listing))
        prefix = path.rstrip("/") + "/"
        entries: list[dict[str, str]] = [
            {"type": "directory", "filename": d} for d in sorted(self.dirs) if d.startswith(prefix)
        ]
        entries += [{"type": "file", "filename": f} for f in self.files if f.startswith(prefix)]
        return self._wrap(entries)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def make_client() -> type[FakeWebDAVClient]:
    """The fake client class, for tests that need non-default behavior."""
    return FakeWebDAVClient


@pytest.fixture
def fake_client() -> FakeWebDAVClient:
    return FakeWebDAVClient()


@pytest.fixture
def adapter(fake_client: FakeWebDAVClient) -> RemoteStoreAdapter:
    return RemoteStoreAdapter(fake_client, RootScope("/data"))


@pytest.fixture
def driver(fake_client: FakeWebDAVClient) -> DriverWebDAV:
    return DriverWebDAV(client=fake_client, base_url="https://dav.example.com", root="/data")


@pytest.fixture
def tus_driver(fake_client: FakeWebDAVClient) -> TusDriverWebDAV:
    return TusDriverWebDAV(client=fake_client, base_url="https://dav.example.com", root="/data")
