"""diskmemcache.core.store

The disk tier: one flat directory, one file per key.

File name layout::

    <key><delimiter><ticks><extension>

The insertion time lives in the name. There is no manifest and no index; lookups
are a prefix scan over the directory listing, O(files) per call.
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from diskmemcache.core.config import Config
from diskmemcache.core.exceptions import CacheDirectoryError
from diskmemcache.core.time import from_ticks, to_ticks

TMP_PREFIX = ".tmp-"


@dataclass(frozen=True, slots=True)
class DiskEntry:
    key: str
    inserted_at: datetime
    path: Path


class DiskStore:
    """Key-addressed byte store over a directory."""

    def __init__(
        self,
        root: Path,
        *,
        delimiter: str = "___",
        extension: str = ".json",
        create: bool = True,
        logger: logging.Logger | None = None,
    ) -> None:
        self.root = Path(root)
        self.delimiter = delimiter
        self.extension = extension
        self.logger = logger or logging.getLogger(__name__)

        if create:
            self.root.mkdir(parents=True, exist_ok=True)

    @classmethod
    def from_config(cls, config: Config, *, logger: logging.Logger | None = None) -> DiskStore:
        return cls(
            config.cache_dir,
            delimiter=config.delimiter,
            extension=config.extension,
            create=config.create_dir,
            logger=logger,
        )

    # ------------------------------------------------------------------ #
    # Names
    # ------------------------------------------------------------------ #
    def encode_filename(self, key: str, inserted_at: datetime) -> str:
        return f"{key}{self.delimiter}{to_ticks(inserted_at)}{self.extension}"

    def decode_filename(self, name: str) -> tuple[str, datetime]:
        """Recover ``(key, inserted_at)`` from a file name.

        Raises:
            ValueError: if the name does not follow the layout.
        """

        if not name.endswith(self.extension):
            raise ValueError(f"missing extension {self.extension!r}: {name}")
        stem = name[: -len(self.extension)]
        # Ticks are digits only: the last delimiter separates key from ticks.
        key, sep, ticks = stem.rpartition(self.delimiter)
        if not sep or not key or self.delimiter in key:
            raise ValueError(f"expected <key>{self.delimiter}<ticks>: {name}")
        if not (ticks.isascii() and ticks.isdigit()):
            raise ValueError(f"ticks must be decimal digits: {name}")
        return key, from_ticks(int(ticks))

    # ------------------------------------------------------------------ #
    # Scans
    # ------------------------------------------------------------------ #
    def files(self) -> list[Path]:
        """Every regular file in the directory, in listing order."""

        try:
            with os.scandir(self.root) as it:
                return [Path(e.path) for e in it if e.is_file()]
        except (FileNotFoundError, NotADirectoryError) as e:
            raise CacheDirectoryError(f"Cache directory '{self.root}' not found.") from e

    def entries(self, prefix: str = "") -> Iterator[DiskEntry]:
        """Decoded entries whose file name starts with ``prefix``.

        Files that do not follow the layout are skipped.
        """

        for path in self.files():
            name = path.name
            if not name.startswith(prefix) or name.startswith(TMP_PREFIX):
                continue
            try:
                key, inserted_at = self.decode_filename(name)
            except ValueError:
                self.logger.warning("cache_file_skipped", extra={"file": str(path)})
                continue
            yield DiskEntry(key=key, inserted_at=inserted_at, path=path)

    def find(self, key: str) -> DiskEntry | None:
        """First entry for ``key``. With several files for one key the pick is arbitrary."""

        prefix = f"{key}{self.delimiter}"
        for entry in self.entries(prefix):
            if entry.key == key:
                return entry
        return None

    # ------------------------------------------------------------------ #
    # Bytes
    # ------------------------------------------------------------------ #
    def read(self, entry: DiskEntry) -> bytes:
        return entry.path.read_bytes()

    def write(self, key: str, inserted_at: datetime, data: bytes) -> Path:
        """Atomically write a new entry and return its path."""

        if not self.root.is_dir():
            raise CacheDirectoryError(f"Cache directory '{self.root}' not found.")

        path = self.root / self.encode_filename(key, inserted_at)
        tmp_fd, tmp_path = tempfile.mkstemp(dir=self.root, prefix=TMP_PREFIX, suffix=".tmp")
        try:
            with os.fdopen(tmp_fd, "wb") as fp:
                fp.write(data)
                fp.flush()
                os.fsync(fp.fileno())
            os.replace(tmp_path, path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
        return path

    def delete(self, path: Path) -> bool:
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        return True

    def clear(self) -> int:
        """Delete every file in the directory, whatever its name."""

        return sum(1 for path in self.files() if self.delete(path))
