"""WebDAV storage driver with ranged reads, root scoping and emulated chunked uploads."""

from dav_store._adapter import RemoteStoreAdapter
from dav_store._capabilities import ExtensionSet, TusExtension
from dav_store._chunked import ChunkedUploadEmulator
from dav_store._client import WebDAVClient, Webdav4Client, create_client
from dav_store._config import DriverConfig
from dav_store._contract import Driver, TusDriver
from dav_store._driver import DriverWebDAV, TusDriverWebDAV
from dav_store._envelope import Envelope, Plain
from dav_store._errors import DavStoreError, UnsupportedPayload
from dav_store._models import ByteRange, DirectoryEntry, FileStat, ReadOptions
from dav_store._path import RootScope
from dav_store._registry import create_driver, register_driver, registered_drivers

__version__ = "0.1.0"

__all__ = [
    # Drivers
    "DriverWebDAV",
    "TusDriverWebDAV",
    "Driver",
    "TusDriver",
    "create_driver",
    "register_driver",
    "registered_drivers",
    # Components
    "RootScope",
    "RemoteStoreAdapter",
    "ChunkedUploadEmulator",
    "WebDAVClient",
    "Webdav4Client",
    "create_client",
    # Models
    "FileStat",
    "ByteRange",
    "ReadOptions",
    "DirectoryEntry",
    "Envelope",
    "Plain",
    # Extensions
    "TusExtension",
    "ExtensionSet",
    # Config
    "DriverConfig",
    # Errors
    "DavStoreError",
    "UnsupportedPayload",
    # Version
    "__version__",
]
