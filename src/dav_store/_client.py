"""WebDAV client collaborator: the protocol the adapter consumes and its default implementation."""

from __future__ import annotations

import asyncio
import io
import logging
import tempfile
from typing import TYPE_CHECKING, Any, Protocol
from urllib.parse import quote

from dav_store._streams import is_single_payload, iter_chunks

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from dav_store._types import WritableContent

log = logging.getLogger(__name__)

# Uploads larger than this are spooled to disk before being sent.
_SPOOL_MAX_SIZE = 8 * 1024 * 1024


class WebDAVClient(Protocol):
    """Whole-file primitives offered by a WebDAV server.

    Results of ``stat``, ``get_file_contents`` and ``get_directory_contents``
    may be plain payloads or ``{"data": payload}`` envelopes.
    """

    async def stat(self, path: str) -> Any: ...

    async def create_read_stream(self, path: str, headers: dict[str, str] | None = None) -> AsyncIterator[bytes]: ...

    async def get_file_contents(self, path: str, format: str = "binary") -> Any: ...  # noqa: A002

    async def put_file_contents(self, path: str, content: WritableContent) -> None: ...

    async def move_file(self, src: str, dest: str) -> None: ...

    async def copy_file(self, src: str, dest: str) -> None: ...

    async def delete_file(self, path: str) -> None: ...

    async def get_directory_contents(self, path: str, deep: bool = True) -> Any: ...

    async def close(self) -> None: ...


class Webdav4Client:
    """WebDAV client built on ``webdav4`` and ``httpx``.

    Whole-file verbs go through ``webdav4.client.Client`` in a worker thread;
    streamed reads go through an ``httpx.AsyncClient`` so ranged downloads are
    never buffered. Both clients are created lazily and neither retries.

    :param base_url: WebDAV endpoint URL.
    :param username: Basic-auth user name.
    :param password: Basic-auth password.
    :param timeout: Request timeout in seconds.
    :param dav_client: Pre-built ``webdav4.client.Client`` to use instead.
    :param http_client: Pre-built ``httpx.AsyncClient`` to use instead.
    """

    def __init__(
        self,
        base_url: str,
        *,
        username: str | None = None,
        password: str | None = None,
        timeout: float = 30.0,
        dav_client: Any = None,
        http_client: Any = None,
    ) -> None:
        if not base_url or not base_url.strip():
            raise ValueError("base_url must be a non-empty string")
        self._base_url = base_url.rstrip("/")
        self._username = username
        self._password = password
        self._timeout = timeout
        self._dav_instance = dav_client
        self._http_instance = http_client

    def __repr__(self) -> str:
        return f"Webdav4Client(base_url={self._base_url!r}, username={self._username!r})"

    # region: lazy clients

    @property
    def _auth(self) -> tuple[str, str] | None:
        if self._username is None:
            return None
        return (self._username, self._password or "")

    @property
    def _dav(self) -> Any:
        # Only read on the event-loop thread; workers receive the bound client.
        if self._dav_instance is None:
            from webdav4.client import Client

            log.info("Creating WebDAV client for %s as %s", self._base_url, self._username)
            self._dav_instance = Client(self._base_url, auth=self._auth, retry=False, timeout=self._timeout)
        return self._dav_instance

    @property
    def _http(self) -> Any:
        if self._http_instance is None:
            import httpx

            self._http_instance = httpx.AsyncClient(auth=self._auth, timeout=self._timeout)
        return self._http_instance

    def _url(self, path: str) -> str:
        return f"{self._base_url}/{quote(path.lstrip('/'), safe='/')}"

    # endregion

    # region: metadata and listing

    async def stat(self, path: str) -> dict[str, Any]:
        info = await asyncio.to_thread(self._dav.info, path)
        return {
            "size": info.get("content_length"),
            "lastmod": info.get("modified"),
            "type": info.get("type"),
        }

    async def get_directory_contents(self, path: str, deep: bool = True) -> list[dict[str, str]]:
        return await asyncio.to_thread(self._walk, self._dav, path, deep)

    @staticmethod
    def _walk(dav: Any, path: str, deep: bool) -> list[dict[str, str]]:
        """Breadth-first listing of ``path``; descends into subdirectories when ``deep``."""
        entries: list[dict[str, str]] = []
        pending = [path]
        seen = {"/" + path.strip("/")}
        while pending:
            current = pending.pop(0)
            for item in dav.ls(current, detail=True):
                filename = "/" + str(item["name"]).strip("/")
                if filename in seen:
                    continue
                kind = item.get("type") or "file"
                entries.append({"type": kind, "filename": filename})
                if deep and kind == "directory":
                    seen.add(filename)
                    pending.append(filename)
        return entries

    # endregion

    # region: reads

    async def create_read_stream(self, path: str, headers: dict[str, str] | None = None) -> AsyncIterator[bytes]:
        """Send the ``GET`` and return an iterator over the response body.

        Status errors are raised here, before any body is read. The response
        is released once the iterator is exhausted or closed with ``aclose()``.
        """
        log.debug("GET %s headers=%s", path, headers)
        request = self._http.build_request("GET", self._url(path), headers=headers)
        response = await self._http.send(request, stream=True)
        try:
            response.raise_for_status()
        except Exception:
            await response.aclose()
            raise
        return self._iter_body(response)

    @staticmethod
    async def _iter_body(response: Any) -> AsyncIterator[bytes]:
        try:
            async for chunk in response.aiter_bytes():
                yield chunk
        finally:
            await response.aclose()

    async def get_file_contents(self, path: str, format: str = "binary") -> bytes | str:  # noqa: A002
        data = await asyncio.to_thread(self._download, self._dav, path)
        if format == "text":
            return data.decode("utf-8")
        return data

    @staticmethod
    def _download(dav: Any, path: str) -> bytes:
        buf = io.BytesIO()
        dav.download_fileobj(path, buf)
        return buf.getvalue()

    # endregion

    # region: writes

    async def put_file_contents(self, path: str, content: WritableContent) -> None:
        if is_single_payload(content):
            payload = content.encode("utf-8") if isinstance(content, str) else bytes(content)  # type: ignore[arg-type]
            await asyncio.to_thread(self._dav.upload_fileobj, io.BytesIO(payload), path, overwrite=True)
            return
        with tempfile.SpooledTemporaryFile(max_size=_SPOOL_MAX_SIZE) as spool:
            async for chunk in iter_chunks(content):
                spool.write(chunk)
            spool.seek(0)
            await asyncio.to_thread(self._dav.upload_fileobj, spool, path, overwrite=True)

    async def move_file(self, src: str, dest: str) -> None:
        await asyncio.to_thread(self._dav.move, src, dest, overwrite=True)

    async def copy_file(self, src: str, dest: str) -> None:
        await asyncio.to_thread(self._dav.copy, src, dest, overwrite=True)

    async def delete_file(self, path: str) -> None:
        await asyncio.to_thread(self._dav.remove, path)

    # endregion

    # region: lifecycle

    async def close(self) -> None:
        """Release both HTTP clients. A closed client re-creates them on next use."""
        if self._http_instance is not None:
            await self._http_instance.aclose()
            self._http_instance = None
        if self._dav_instance is not None:
            self._dav_instance.http.close()
            self._dav_instance = None

    # endregion


def create_client(
    base_url: str,
    username: str | None = None,
    password: str | None = None,
    **options: Any,
) -> Webdav4Client:
    """Create the default WebDAV client.

    :param options: Extra keyword arguments for :class:`Webdav4Client`.
    """
    return Webdav4Client(base_url, username=username, password=password, **options)
