"""TusExtension enum and ExtensionSet."""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


class TusExtension(enum.Enum):
    """Resumable-upload protocol extensions a driver may advertise."""

    CREATION = "creation"
    TERMINATION = "termination"
    EXPIRATION = "expiration"


class ExtensionSet:
    """Immutable, ordered set of advertised tus extensions.

    :param extensions: The supported extensions, in advertising order.
    """

    __slots__ = ("_exts",)
    _exts: tuple[TusExtension, ...]

    def __init__(self, extensions: Iterable[TusExtension]) -> None:
        object.__setattr__(self, "_exts", tuple(dict.fromkeys(extensions)))

    def supports(self, ext: TusExtension) -> bool:
        """Check whether an extension is advertised."""
        return ext in self._exts

    def names(self) -> list[str]:
        """Extension names as sent in the ``Tus-Extension`` header."""
        return [ext.value for ext in self._exts]

    def __contains__(self, ext: object) -> bool:
        return ext in self._exts

    def __iter__(self) -> Iterator[TusExtension]:
        return iter(self._exts)

    def __len__(self) -> int:
        return len(self._exts)

    def __repr__(self) -> str:
        return f"ExtensionSet({{{', '.join(e.name for e in self._exts)}}})"

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("ExtensionSet is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("ExtensionSet is immutable")
