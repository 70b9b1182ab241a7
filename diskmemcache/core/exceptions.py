"""diskmemcache.core.exceptions

Errors are part of the interface.

Nothing here is retried. Everything here is surfaced.
"""

from __future__ import annotations


class DiskMemCacheError(Exception):
    """Base exception for diskmemcache."""


class ConfigError(DiskMemCacheError):
    """Configuration is missing, invalid, or inconsistent."""


class CacheDirectoryError(ConfigError):
    """The cache directory is missing or not a directory."""


class CacheArgumentError(DiskMemCacheError, ValueError):
    """A caller passed a key or compute function the cache cannot accept."""


class DeserializationError(DiskMemCacheError):
    """A disk entry could not be decoded into the expected value."""


class CacheTypeError(DeserializationError):
    """A cached value does not match the type the caller asked for."""
