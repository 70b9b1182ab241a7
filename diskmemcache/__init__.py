"""diskmemcache: memoize expensive calls in memory and on disk.

Compute once, remember across restarts, forget on request.
"""

from __future__ import annotations

from diskmemcache.core import (
    AsyncDiskMemCache,
    CacheArgumentError,
    CacheDirectoryError,
    CacheTypeError,
    Codec,
    Config,
    ConfigError,
    DeserializationError,
    DiskMemCache,
    DiskMemCacheError,
    DiskStore,
    JsonCodec,
)

__all__ = [
    "__version__",
    "AsyncDiskMemCache",
    "CacheArgumentError",
    "CacheDirectoryError",
    "CacheTypeError",
    "Codec",
    "Config",
    "ConfigError",
    "DeserializationError",
    "DiskMemCache",
    "DiskMemCacheError",
    "DiskStore",
    "JsonCodec",
]

__version__ = "0.1.0"
