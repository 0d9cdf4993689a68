"""Tests for ChunkedUploadEmulator — read-modify-write chunk semantics."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import pytest

from dav_store._adapter import RemoteStoreAdapter
from dav_store._capabilities import TusExtension
from dav_store._chunked import ChunkedUploadEmulator, KeyedLock
from dav_store._path import RootScope

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


@pytest.fixture
def emulator(adapter: RemoteStoreAdapter) -> ChunkedUploadEmulator:
    return ChunkedUploadEmulator(adapter)


async def _stream(*parts: bytes) -> AsyncIterator[bytes]:
    for part in parts:
        yield part


class TestExtensions:
    def test_tus_extensions(self, emulator: ChunkedUploadEmulator) -> None:
        assert emulator.tus_extensions == ["creation", "termination", "expiration"]

    def test_extension_set(self, emulator: ChunkedUploadEmulator) -> None:
        assert emulator.extensions.supports(TusExtension.EXPIRATION)


class TestCreate:
    @pytest.mark.asyncio
    async def test_creates_empty_object(self, emulator: ChunkedUploadEmulator, adapter: RemoteStoreAdapter) -> None:
        await emulator.create_chunked_upload("up.bin", {"id": 1})
        st = await adapter.stat("up.bin")
        assert st.size == 0

    @pytest.mark.asyncio
    async def test_context_returned_unchanged(self, emulator: ChunkedUploadEmulator) -> None:
        context = {"id": "abc", "metadata": {"k": "v"}}
        result = await emulator.create_chunked_upload("up.bin", context)
        assert result is context
        assert result == {"id": "abc", "metadata": {"k": "v"}}

    @pytest.mark.asyncio
    async def test_create_resets_existing(self, emulator: ChunkedUploadEmulator, fake_client: Any) -> None:
        fake_client.files["/data/up.bin"] = b"stale"
        await emulator.create_chunked_upload("up.bin", None)
        assert fake_client.files["/data/up.bin"] == b""


class TestWriteChunk:
    @pytest.mark.asyncio
    async def test_sequential_appends(self, emulator: ChunkedUploadEmulator, fake_client: Any) -> None:
        await emulator.create_chunked_upload("up.bin", None)
        first = await emulator.write_chunk("up.bin", _stream(b"hello "), 0, None)
        second = await emulator.write_chunk("up.bin", _stream(b"wor", b"ld"), len(b"hello "), None)
        assert first == 6
        assert second == 11
        assert fake_client.files["/data/up.bin"] == b"hello world"

    @pytest.mark.asyncio
    async def test_offset_zero_truncates(self, emulator: ChunkedUploadEmulator, fake_client: Any) -> None:
        fake_client.files["/data/up.bin"] = b"existing content"
        size = await emulator.write_chunk("up.bin", _stream(b"new"), 0, None)
        assert size == 3
        assert fake_client.files["/data/up.bin"] == b"new"

    @pytest.mark.asyncio
    async def test_smaller_offset_drops_trailing_bytes(self, emulator: ChunkedUploadEmulator, fake_client: Any) -> None:
        fake_client.files["/data/up.bin"] = b"0123456789"
        size = await emulator.write_chunk("up.bin", _stream(b"ab"), 4, None)
        assert fake_client.files["/data/up.bin"] == b"0123ab"
        assert size == 6

    @pytest.mark.asyncio
    async def test_offset_past_end_appends_and_warns(
        self, emulator: ChunkedUploadEmulator, fake_client: Any, caplog: pytest.LogCaptureFixture
    ) -> None:
        fake_client.files["/data/up.bin"] = b"abc"
        with caplog.at_level(logging.WARNING, logger="dav_store._chunked"):
            size = await emulator.write_chunk("up.bin", _stream(b"d"), 10, None)
        assert size == 4
        assert fake_client.files["/data/up.bin"] == b"abcd"
        assert "past the end" in caplog.text

    @pytest.mark.asyncio
    async def test_empty_chunk(self, emulator: ChunkedUploadEmulator, fake_client: Any) -> None:
        fake_client.files["/data/up.bin"] = b"abc"
        assert await emulator.write_chunk("up.bin", _stream(), 3, None) == 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize("binary_as", ["str", "bytearray", "memoryview"])
    async def test_backend_payload_types(self, make_client: Any, binary_as: str) -> None:
        client = make_client(binary_as=binary_as, envelope=True)
        client.files["/up.txt"] = b"abc"
        emulator = ChunkedUploadEmulator(RemoteStoreAdapter(client, RootScope("/")))
        assert await emulator.write_chunk("up.txt", [b"def"], 3, None) == 6
        assert client.files["/up.txt"] == b"abcdef"

    @pytest.mark.asyncio
    async def test_reads_whole_object_then_writes_whole_object(
        self, emulator: ChunkedUploadEmulator, fake_client: Any
    ) -> None:
        fake_client.files["/data/up.bin"] = b"abc"
        await emulator.write_chunk("up.bin", b"d", 3, None)
        assert fake_client.calls == [
            ("get_file_contents", "/data/up.bin", "binary"),
            ("put_file_contents", "/data/up.bin"),
        ]

    @pytest.mark.asyncio
    async def test_missing_object_error_propagates(self, emulator: ChunkedUploadEmulator) -> None:
        with pytest.raises(Exception) as exc_info:
            await emulator.write_chunk("never-created.bin", b"x", 0, None)
        assert type(exc_info.value).__name__ == "FakeNotFound"


class TestConcurrency:
    @pytest.mark.asyncio
    async def test_unserialized_writers_race(self, make_client: Any) -> None:
        client = make_client(write_delay=0.01)
        client.files["/up.bin"] = b""
        emulator = ChunkedUploadEmulator(RemoteStoreAdapter(client, RootScope("/")))
        await asyncio.gather(
            emulator.write_chunk("up.bin", b"aaa", 0, None),
            emulator.write_chunk("up.bin", b"bbb", 0, None),
        )
        # Both read the empty object, so one chunk overwrote the other.
        assert client.files["/up.bin"] in (b"aaa", b"bbb")

    @pytest.mark.asyncio
    async def test_serialized_writers_are_lossless(self, make_client: Any) -> None:
        client = make_client(write_delay=0.01)
        client.files["/up.bin"] = b""
        emulator = ChunkedUploadEmulator(RemoteStoreAdapter(client, RootScope("/")), serialize=True)

        async def append(part: bytes) -> int:
            # Offset equals the current size, as a tus server would send it.
            return await emulator.write_chunk("up.bin", part, 10**9, None)

        await asyncio.gather(append(b"aaa"), append(b"bbb"), append(b"ccc"))
        assert sorted(client.files["/up.bin"][i : i + 3] for i in range(0, 9, 3)) == [b"aaa", b"bbb", b"ccc"]

    @pytest.mark.asyncio
    async def test_keyed_lock_released(self) -> None:
        locks = KeyedLock()
        async with locks.hold("a"):
            assert len(locks) == 1
        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_keyed_lock_independent_keys(self) -> None:
        locks = KeyedLock()
        async with locks.hold("a"):
            await asyncio.wait_for(_enter(locks, "b"), timeout=1)

    @pytest.mark.asyncio
    async def test_keyed_lock_released_on_error(self) -> None:
        locks = KeyedLock()
        with pytest.raises(RuntimeError):
            async with locks.hold("a"):
                raise RuntimeError("boom")
        assert len(locks) == 0


async def _enter(locks: KeyedLock, key: str) -> None:
    async with locks.hold(key):
        pass


class TestFinishAndDelete:
    @pytest.mark.asyncio
    async def test_finish_is_noop(self, emulator: ChunkedUploadEmulator, fake_client: Any) -> None:
        fake_client.files["/data/up.bin"] = b"done"
        fake_client.calls.clear()
        assert await emulator.finish_chunked_upload("up.bin", None) is None
        assert fake_client.calls == []
        assert fake_client.files["/data/up.bin"] == b"done"

    @pytest.mark.asyncio
    async def test_delete_removes_object(self, emulator: ChunkedUploadEmulator, adapter: RemoteStoreAdapter) -> None:
        await emulator.create_chunked_upload("up.bin", None)
        await emulator.write_chunk("up.bin", b"partial", 0, None)
        await emulator.delete_chunked_upload("up.bin", None)
        assert await adapter.exists("up.bin") is False
