"""diskmemcache.core

Core primitives.

If a module needs to exist, it should probably depend only on this package.
"""

from .cache import AsyncDiskMemCache, DiskMemCache, MemoryEntry
from .codec import Codec, JsonCodec
from .config import Config, LoggingConfig
from .exceptions import (
    CacheArgumentError,
    CacheDirectoryError,
    CacheTypeError,
    ConfigError,
    DeserializationError,
    DiskMemCacheError,
)
from .store import DiskEntry, DiskStore
from .time import from_ticks, to_ticks, utc_now

__all__ = [
    "AsyncDiskMemCache",
    "CacheArgumentError",
    "CacheDirectoryError",
    "CacheTypeError",
    "Codec",
    "Config",
    "ConfigError",
    "DeserializationError",
    "DiskEntry",
    "DiskMemCache",
    "DiskMemCacheError",
    "DiskStore",
    "JsonCodec",
    "LoggingConfig",
    "MemoryEntry",
    "from_ticks",
    "to_ticks",
    "utc_now",
]
