"""RootScope — maps caller-relative paths into a configured WebDAV subtree."""

from __future__ import annotations

import posixpath


class RootScope:
    """Root-scoped path mapping.

    ``normalize`` turns a caller-relative path into an absolute remote path
    under ``root``; ``denormalize`` turns an absolute remote path reported by
    the server back into a root-relative one.

    ``..`` segments are passed through untouched, so confinement to ``root``
    is organizational rather than a security boundary.

    :param root: Directory prefix on the server (default: ``/``).
    """

    __slots__ = ("_root",)

    def __init__(self, root: str = "/") -> None:
        object.__setattr__(self, "_root", root or "/")

    @property
    def root(self) -> str:
        """The root as configured."""
        return self._root

    def normalize(self, path: str) -> str:
        """Return the absolute remote path for a caller-relative ``path``."""
        base = self._root[:-1] if self._root.endswith("/") else self._root
        rel = path[1:] if path.startswith("/") else path
        return f"{base}/{rel}"

    def denormalize(self, remote_path: str) -> str:
        """Return ``remote_path`` relative to the root, without a leading slash.

        Both sides are resolved as absolute paths first, so ``.`` and ``..``
        segments in either input are collapsed.
        """
        start = "/" + self._root.lstrip("/")
        target = "/" + remote_path.lstrip("/")
        rel = posixpath.relpath(target, start)
        if rel == ".":
            return ""
        return rel.lstrip("/")

    def __repr__(self) -> str:
        return f"RootScope({self._root!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, RootScope):
            return self._root == other._root
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._root)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"RootScope is immutable: cannot set '{name}'")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"RootScope is immutable: cannot delete '{name}'")
