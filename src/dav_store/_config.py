"""Configuration model — immutable connection settings for a WebDAV driver."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping

# Host platforms pass camelCase keys; both spellings are accepted.
_KEY_ALIASES = {"baseUrl": "base_url"}


@dataclasses.dataclass(frozen=True)
class DriverConfig:
    """Describes how to reach a WebDAV server and which subtree to use.

    :param base_url: WebDAV endpoint URL (required, non-empty).
    :param username: Basic-auth user name.
    :param password: Basic-auth password (hidden from ``repr``).
    :param root: Directory prefix on the server that all paths are scoped under.
    """

    base_url: str
    username: str = ""
    password: str = dataclasses.field(default="", repr=False)
    root: str = "/"

    def __post_init__(self) -> None:
        if not isinstance(self.base_url, str) or not self.base_url.strip():
            raise ValueError("base_url must be a non-empty string")
        if not self.root:
            object.__setattr__(self, "root", "/")

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> DriverConfig:
        """Construct from a plain mapping (e.g. parsed TOML/JSON or host options).

        :raises TypeError: If ``data`` is not a mapping or has unknown keys.
        :raises ValueError: If ``base_url`` is missing or empty.
        """
        if not isinstance(data, Mapping):
            msg = "Driver config must be a mapping"
            raise TypeError(msg)
        known = {f.name for f in dataclasses.fields(cls)}
        options: dict[str, str] = {}
        for key, value in data.items():
            name = _KEY_ALIASES.get(str(key), str(key))
            if name not in known:
                msg = f"Unknown driver config key '{key}'. Expected one of: {sorted(known)}"
                raise TypeError(msg)
            if value is not None:
                options[name] = str(value)
        if "base_url" not in options:
            raise ValueError("Driver config requires 'base_url'")
        return cls(**options)
