"""Driver registry — maps driver type names to driver classes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from dav_store._config import DriverConfig

if TYPE_CHECKING:
    from collections.abc import Mapping

    from dav_store._contract import Driver

# Global driver factory registry: maps type strings to driver classes.
_DRIVER_FACTORIES: dict[str, type[Driver]] = {}


def register_driver(type_name: str, cls: type[Driver]) -> None:
    """Register a driver class for a given type string.

    :param type_name: The type identifier (e.g. ``"webdav"``).
    :param cls: The driver class to instantiate.
    """
    _DRIVER_FACTORIES[type_name] = cls


def _register_builtin_drivers() -> None:
    """Register the built-in drivers."""
    from dav_store._driver import DriverWebDAV, TusDriverWebDAV

    _DRIVER_FACTORIES.setdefault("webdav", DriverWebDAV)
    _DRIVER_FACTORIES.setdefault("webdav-tus", TusDriverWebDAV)


def registered_drivers() -> list[str]:
    """Sorted names of all registered driver types."""
    _register_builtin_drivers()
    return sorted(_DRIVER_FACTORIES)


def create_driver(type_name: str, options: Mapping[str, object], **driver_kwargs: Any) -> Driver:
    """Instantiate a registered driver.

    :param type_name: Registered driver type.
    :param options: Connection settings, as accepted by :meth:`DriverConfig.from_dict`.
    :param driver_kwargs: Extra keyword arguments for the driver class.
    :raises ValueError: If the type is unknown or the options are invalid.
    """
    _register_builtin_drivers()
    if type_name not in _DRIVER_FACTORIES:
        raise ValueError(f"Unknown driver type '{type_name}'. Registered types: {sorted(_DRIVER_FACTORIES)}")
    factory = _DRIVER_FACTORIES[type_name]
    try:
        config = DriverConfig.from_dict(options)
        return factory(config, **driver_kwargs)  # type: ignore[call-arg]
    except TypeError as exc:
        raise ValueError(
            f"Invalid options for driver type {type_name!r}: {exc}. Provided options: {sorted(options)}"
        ) from exc
