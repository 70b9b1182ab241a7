from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

# uv/pytest may run without installing the project; ensure repo root is importable.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from diskmemcache.core.cache import AsyncDiskMemCache, DiskMemCache  # noqa: E402
from diskmemcache.core.config import Config  # noqa: E402
from tests.unit._clock import FakeClock  # noqa: E402


@pytest.fixture()
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "cache"


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def test_config(cache_dir: Path) -> Config:
    """Config fixture that points cache_dir to a temp directory."""

    return Config(cache_dir=cache_dir)


@pytest.fixture()
def make_cache(test_config: Config, clock: FakeClock) -> Callable[..., DiskMemCache]:
    """Each call is a fresh process as far as the memory tier is concerned."""

    def _make(**kwargs: Any) -> DiskMemCache:
        kwargs.setdefault("config", test_config)
        kwargs.setdefault("clock", clock)
        return DiskMemCache(**kwargs)

    return _make


@pytest.fixture()
def make_async_cache(test_config: Config, clock: FakeClock) -> Callable[..., AsyncDiskMemCache]:
    def _make(**kwargs: Any) -> AsyncDiskMemCache:
        kwargs.setdefault("config", test_config)
        kwargs.setdefault("clock", clock)
        return AsyncDiskMemCache(**kwargs)

    return _make


@pytest.fixture()
def anyio_backend() -> str:
    """The async tests use asyncio primitives directly; run them on asyncio only."""

    return "asyncio"
