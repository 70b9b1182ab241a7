from __future__ import annotations

import pytest

from diskmemcache.core.exceptions import (
    CacheArgumentError,
    CacheDirectoryError,
    CacheTypeError,
    ConfigError,
    DeserializationError,
    DiskMemCacheError,
)


def test_exception_hierarchy_is_structural() -> None:
    assert issubclass(ConfigError, DiskMemCacheError)
    assert issubclass(CacheArgumentError, DiskMemCacheError)
    assert issubclass(DeserializationError, DiskMemCacheError)


def test_directory_error_is_config_error() -> None:
    assert issubclass(CacheDirectoryError, ConfigError)


def test_type_error_is_deserialization_error() -> None:
    with pytest.raises(DeserializationError):
        raise CacheTypeError("expected Quote")
