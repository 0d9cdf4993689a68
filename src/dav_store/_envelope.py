"""Response shapes returned by WebDAV clients.

Some clients wrap results as ``{"data": payload}`` (or an object with a
``data`` attribute), others return the payload directly. The shape is
decided once by :func:`classify` and the payload extracted by
:func:`resolve`; callers never inspect raw responses themselves.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


@dataclasses.dataclass(frozen=True)
class Envelope(Generic[T]):
    """A payload wrapped in a ``data`` field."""

    data: T


@dataclasses.dataclass(frozen=True)
class Plain(Generic[T]):
    """A payload returned as-is."""

    value: T


Response = Union[Envelope[T], Plain[T]]  # noqa: UP007


def classify(raw: Any) -> Response[Any]:
    """Decide whether ``raw`` is an envelope or a plain payload."""
    if isinstance(raw, Mapping):
        if "data" in raw:
            return Envelope(raw["data"])
        return Plain(raw)
    if isinstance(raw, (str, bytes, bytearray, memoryview, list, tuple)):
        return Plain(raw)
    if hasattr(raw, "data"):
        return Envelope(raw.data)
    return Plain(raw)


def resolve(response: Response[T]) -> T:
    """Return the payload carried by ``response``."""
    if isinstance(response, Envelope):
        return response.data
    return response.value


def unwrap(raw: Any) -> Any:
    """Classify and resolve ``raw`` in one step."""
    return resolve(classify(raw))
