"""Error hierarchy for dav_store.

Errors raised by the WebDAV transport are never wrapped in these types; they
reach the caller unchanged. The classes here cover failures detected by
``dav_store`` itself.
"""

from __future__ import annotations

from typing import Optional


class DavStoreError(Exception):
    """Base class for all dav_store errors.

    :param message: Human-readable error description.
    :param path: The caller-relative path involved, if any.
    """

    def __init__(self, message: str = "", *, path: Optional[str] = None) -> None:
        self.message = message
        self.path = path
        super().__init__(message)

    def _context(self) -> dict[str, str]:
        return {} if self.path is None else {"path": self.path}

    def __str__(self) -> str:
        context = " ".join(f"{key}={value!r}" for key, value in self._context().items())
        return f"{self.message} [{context}]" if context else self.message

    def __repr__(self) -> str:
        fields = [repr(self.message), *(f"{key}={value!r}" for key, value in self._context().items())]
        return f"{type(self).__name__}({', '.join(fields)})"


class UnsupportedPayload(DavStoreError):
    """Raised when a read returns something that is neither text nor bytes.

    :param payload_type: Name of the offending payload's type.
    """

    def __init__(self, message: str = "", *, path: Optional[str] = None, payload_type: str = "") -> None:
        self.payload_type = payload_type
        super().__init__(message, path=path)

    def _context(self) -> dict[str, str]:
        context = super()._context()
        if self.payload_type:
            context["payload_type"] = self.payload_type
        return context
