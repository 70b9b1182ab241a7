"""diskmemcache.core.config

Two config surfaces only:
1) a YAML file (optional, see ``config/default.yaml``)
2) Environment variables (``DISKMEMCACHE_*``)

Everything else is derived.
"""

from __future__ import annotations

import os
import platform
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from diskmemcache.core.exceptions import ConfigError

CACHE_DIR_NAME = "DiskMemCache"


def default_cache_dir() -> Path:
    """Platform-appropriate shared application-data directory."""

    if platform.system() == "Windows":
        base = Path(os.environ.get("PROGRAMDATA", "C:\\ProgramData"))
    else:
        xdg = os.environ.get("XDG_DATA_HOME")
        base = Path(xdg) if xdg else Path.home() / ".local" / "share"
    return base / CACHE_DIR_NAME


class LoggingConfig(BaseModel):
    level: str = "INFO"
    json_output: bool = False


class Config(BaseSettings):
    """Root configuration. Single source of truth."""

    cache_dir: Path = Field(default_factory=default_cache_dir)
    create_dir: bool = True
    delimiter: str = "___"
    extension: str = ".json"

    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"env_prefix": "DISKMEMCACHE_", "env_nested_delimiter": "__"}

    @field_validator("cache_dir", mode="after")
    @classmethod
    def expand_user(cls, v: Path) -> Path:
        return v.expanduser()

    @field_validator("delimiter")
    @classmethod
    def delimiter_must_survive_filenames(cls, v: str) -> str:
        # Ticks are digits and the extension starts with a dot; neither may be confused with it.
        if not v:
            raise ValueError("delimiter must not be empty")
        if any(c.isdigit() for c in v):
            raise ValueError(f"delimiter must not contain digits, got {v!r}")
        if any(c in v for c in (".", "/", "\\", "\x00")):
            raise ValueError(f"delimiter must not contain '.', path separators or NUL, got {v!r}")
        return v

    @field_validator("extension")
    @classmethod
    def extension_must_start_with_dot(cls, v: str) -> str:
        if not v.startswith(".") or len(v) < 2:
            raise ValueError(f"extension must look like '.json', got {v!r}")
        if any(c in v for c in ("/", "\\", "\x00")):
            raise ValueError(f"extension must not contain path separators, got {v!r}")
        return v

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")

        try:
            raw: Any = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Config file is not valid YAML: {path}: {e}") from e

        if not isinstance(raw, dict):
            raise ConfigError(f"Config file must contain a mapping: {path}")

        return cls(**raw)
