"""diskmemcache.core.cache

Two tiers, one lock.

Lookup order is memory, then disk, then the compute function. Results are written
back to both tiers unless the caller says they are not worth keeping. Every
operation on an instance runs under a single lock covering all keys: at most one
computation in flight per instance, at the price of throughput.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import os
import threading
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, TypeVar

from diskmemcache.core.codec import Codec, JsonCodec
from diskmemcache.core.config import Config
from diskmemcache.core.exceptions import CacheArgumentError, DeserializationError
from diskmemcache.core.store import TMP_PREFIX, DiskStore
from diskmemcache.core.time import age, utc_now

T = TypeVar("T")

InvalidateIf = Callable[[timedelta], bool]
PurgePredicate = Callable[[str, timedelta], bool]

_MISS = object()
_FORBIDDEN_KEY_CHARS = frozenset({"/", "\\", "\x00", os.sep})


@dataclass(frozen=True, slots=True)
class MemoryEntry:
    inserted_at: datetime
    value: Any


class _CacheCore:
    """Lock-free steps shared by the sync and async caches.

    Every method here assumes the caller holds the instance lock.
    """

    def __init__(
        self,
        store: DiskStore | None = None,
        *,
        config: Config | None = None,
        codec: Codec | None = None,
        clock: Callable[[], datetime] = utc_now,
        logger: logging.Logger | None = None,
    ) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self.store = store or DiskStore.from_config(config or Config())
        self.codec: Codec = codec or JsonCodec()
        self._clock = clock
        self._memory: dict[str, MemoryEntry] = {}

    @property
    def cache_dir(self) -> Path:
        return self.store.root

    def __repr__(self) -> str:
        return f"{type(self).__name__}(cache_dir={str(self.cache_dir)!r}, entries={len(self._memory)})"

    def _check_args(self, key: Any, compute: Any) -> None:
        if not isinstance(key, str) or not key:
            raise CacheArgumentError("key must be a non-empty string")
        if self.store.delimiter in key:
            raise CacheArgumentError(f"key must not contain {self.store.delimiter!r}: {key!r}")
        if any(c in _FORBIDDEN_KEY_CHARS for c in key):
            raise CacheArgumentError(f"key must not contain path separators or NUL: {key!r}")
        if key.startswith(TMP_PREFIX):
            raise CacheArgumentError(f"key must not start with {TMP_PREFIX!r}: {key!r}")
        if compute is None or not callable(compute):
            raise CacheArgumentError("compute must be a zero-argument callable")

    def _lookup(
        self,
        key: str,
        now: datetime,
        invalidate_if: InvalidateIf | None,
        value_type: Any,
    ) -> Any:
        entry = self._memory.get(key)
        if entry is not None:
            if invalidate_if is not None and invalidate_if(age(entry.inserted_at, now=now)):
                self.logger.debug("cache_invalidated", extra={"key": key, "tier": "memory"})
                self._purge_locked(_key_equals(key), now)
            else:
                self.logger.debug("cache_hit_memory", extra={"key": key})
                if value_type is not None:
                    return self.codec.check(entry.value, value_type)
                return entry.value

        disk = self.store.find(key)
        if disk is not None:
            if invalidate_if is not None and invalidate_if(age(disk.inserted_at, now=now)):
                self.logger.debug("cache_invalidated", extra={"key": key, "tier": "disk"})
                self._purge_locked(_key_equals(key), now)
            else:
                value = self.codec.decode(self.store.read(disk), value_type)
                if value is None:
                    raise DeserializationError(f"Failed to deserialize data from file '{disk.path}'.")
                self._memory.setdefault(key, MemoryEntry(inserted_at=now, value=value))
                self.logger.debug("cache_hit_disk", extra={"key": key, "file": str(disk.path)})
                return value

        self.logger.debug("cache_miss", extra={"key": key})
        return _MISS

    def _remember(self, key: str, value: Any, now: datetime, cache_if: Callable[[Any], bool] | None) -> Any:
        if cache_if is not None and not cache_if(value):
            self.logger.debug("cache_skip", extra={"key": key})
            return value

        path = self.store.write(key, now, self.codec.encode(value))
        self._memory.setdefault(key, MemoryEntry(inserted_at=now, value=value))
        self.logger.debug("cache_write", extra={"key": key, "file": str(path)})
        return value

    def _purge_locked(self, predicate: PurgePredicate | None, now: datetime) -> int:
        if predicate is None:
            self._memory.clear()
            removed = self.store.clear()
            self.logger.info("cache_purge", extra={"removed": removed, "scope": "all"})
            return removed

        for key, entry in list(self._memory.items()):
            if predicate(key, age(entry.inserted_at, now=now)):
                del self._memory[key]

        removed = 0
        for disk in self.store.entries():
            if predicate(disk.key, age(disk.inserted_at, now=now)):
                removed += int(self.store.delete(disk.path))

        self.logger.debug("cache_purge", extra={"removed": removed, "scope": "predicate"})
        return removed


class DiskMemCache(_CacheCore):
    """Thread-safe memoizing cache over memory and a directory of JSON files.

    Example::

        cache = DiskMemCache(config=Config(cache_dir=Path("/tmp/cache")))
        rates = cache.get_or_compute(
            "fx-rates",
            fetch_rates,
            invalidate_if=lambda age: age > timedelta(hours=1),
        )
    """

    def __init__(self, store: DiskStore | None = None, **kwargs: Any) -> None:
        super().__init__(store, **kwargs)
        self._lock = threading.Lock()

    def get_or_compute(
        self,
        key: str,
        compute: Callable[[], T],
        invalidate_if: InvalidateIf | None = None,
        cache_if: Callable[[T], bool] | None = None,
        *,
        value_type: type[T] | Any = None,
    ) -> T:
        """Return the cached value for ``key`` or compute and cache it.

        Args:
            key: Opaque identifier. Must not contain the file name delimiter.
            compute: Called at most once, only on a miss. Errors propagate untouched.
            invalidate_if: Given the entry's age; ``True`` discards the entry.
            cache_if: Given a fresh value; ``False`` returns it without caching.
            value_type: Expected type. Disk reads are validated into it and memory
                hits are checked against it.

        Raises:
            CacheArgumentError: bad key or compute, before any I/O.
            CacheDirectoryError: the cache directory disappeared.
            DeserializationError: a disk entry could not be decoded.
        """

        self._check_args(key, compute)
        with self._lock:
            now = self._clock()
            value = self._lookup(key, now, invalidate_if, value_type)
            if value is not _MISS:
                return value
            return self._remember(key, compute(), now, cache_if)

    def purge(self, predicate: PurgePredicate | None = None) -> int:
        """Remove entries whose ``(key, age)`` match; ``None`` removes everything.

        Memory and disk are scanned independently, each with its own age.
        Returns the number of disk files deleted.
        """

        with self._lock:
            return self._purge_locked(predicate, self._clock())

    def purge_keys(self, key_predicate: Callable[[str], bool]) -> int:
        return self.purge(lambda key, _age: key_predicate(key))

    def purge_all(self) -> int:
        return self.purge(None)


class AsyncDiskMemCache(_CacheCore):
    """Coroutine flavour of :class:`DiskMemCache`.

    ``compute`` may return a value or an awaitable. The lock is held while it is
    awaited. Cancellation unwinds without writing anything.
    """

    def __init__(self, store: DiskStore | None = None, **kwargs: Any) -> None:
        super().__init__(store, **kwargs)
        self._lock = asyncio.Lock()

    async def get_or_compute(
        self,
        key: str,
        compute: Callable[[], T | Awaitable[T]],
        invalidate_if: InvalidateIf | None = None,
        cache_if: Callable[[T], bool] | None = None,
        *,
        value_type: type[T] | Any = None,
    ) -> T:
        self._check_args(key, compute)
        async with self._lock:
            now = self._clock()
            value = self._lookup(key, now, invalidate_if, value_type)
            if value is not _MISS:
                return value
            result = compute()
            if inspect.isawaitable(result):
                result = await result
            # No await past this point: write-back completes or fails as a unit.
            return self._remember(key, result, now, cache_if)

    async def purge(self, predicate: PurgePredicate | None = None) -> int:
        async with self._lock:
            return self._purge_locked(predicate, self._clock())

    async def purge_keys(self, key_predicate: Callable[[str], bool]) -> int:
        return await self.purge(lambda key, _age: key_predicate(key))

    async def purge_all(self) -> int:
        return await self.purge(None)


def _key_equals(target: str) -> PurgePredicate:
    return lambda key, _age: key == target
