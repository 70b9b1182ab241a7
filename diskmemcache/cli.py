"""diskmemcache.cli

Command line interface entry point for diskmemcache.

Design constraints:
- argparse-based.
- Lazy imports: do not import pydantic at parse time.
- Operates on the disk tier only. Memory tiers live in other processes.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from diskmemcache.core.config import Config


@dataclass(frozen=True)
class CliContext:
    config: Config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="diskmemcache",
        description="Inspect and purge a diskmemcache directory.",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit.",
    )
    parser.add_argument("--config", type=Path, default=None, help="YAML config file.")
    parser.add_argument("--cache-dir", type=Path, default=None, help="Override the cache directory.")

    sub = parser.add_subparsers(dest="command")

    sub.add_parser("status", help="Print cache directory status")
    sub.add_parser("list", help="List cached entries")

    p_purge = sub.add_parser("purge", help="Remove cached entries")
    p_purge.add_argument("--key", action="append", default=[], help="Purge this key (repeatable).")
    p_purge.add_argument(
        "--older-than",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Purge entries older than this many seconds.",
    )
    p_purge.add_argument("--all", action="store_true", help="Purge every file in the cache directory.")

    return parser


def _print_version() -> None:
    from diskmemcache import __version__

    print(f"diskmemcache v{__version__}")


def _load_config(args: argparse.Namespace) -> Config:
    from diskmemcache.core.config import Config

    config = Config.from_yaml(args.config) if args.config else Config()
    if args.cache_dir is not None:
        config = config.model_copy(update={"cache_dir": args.cache_dir.expanduser()})
    return config


def _open_store(ctx: CliContext):
    from diskmemcache.core.store import DiskStore

    return DiskStore.from_config(ctx.config)


def _cmd_status(ctx: CliContext, args: argparse.Namespace) -> int:
    store = _open_store(ctx)
    files = store.files()
    entries = list(store.entries())
    total_bytes = sum(p.stat().st_size for p in files)

    print("diskmemcache status")
    print(f"- cache_dir: {store.root}")
    print(f"- files: {len(files)}")
    print(f"- entries: {len(entries)}")
    print(f"- bytes: {total_bytes}")
    return 0


def _cmd_list(ctx: CliContext, args: argparse.Namespace) -> int:
    from diskmemcache.core.time import age, utc_now

    store = _open_store(ctx)
    now = utc_now()
    for entry in sorted(store.entries(), key=lambda e: (e.key, e.inserted_at)):
        age_s = age(entry.inserted_at, now=now).total_seconds()
        print(f"{entry.key}\t{entry.inserted_at.isoformat()}\t{age_s:.1f}s")
    return 0


def _cmd_purge(ctx: CliContext, args: argparse.Namespace) -> int:
    from diskmemcache.core.cache import DiskMemCache

    keys = set(args.key)
    older_than = timedelta(seconds=args.older_than) if args.older_than is not None else None

    if not args.all and not keys and older_than is None:
        print("error: purge needs --key, --older-than or --all", file=sys.stderr)
        return 2

    cache = DiskMemCache(_open_store(ctx))

    if args.all:
        removed = cache.purge_all()
    else:

        def matches(key: str, age: timedelta) -> bool:
            if keys and key not in keys:
                return False
            return older_than is None or age > older_than

        removed = cache.purge(matches)

    print(f"removed {removed} file(s) from {cache.cache_dir}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        _print_version()
        return 0

    if not args.command:
        parser.print_help()
        return 2

    from pydantic import ValidationError

    from diskmemcache.core.exceptions import ConfigError
    from diskmemcache.core.log import configure_logging

    try:
        ctx = CliContext(config=_load_config(args))
    except (ConfigError, ValidationError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    configure_logging(ctx.config.logging)

    dispatch: dict[str, Callable[[CliContext, argparse.Namespace], int]] = {
        "status": _cmd_status,
        "list": _cmd_list,
        "purge": _cmd_purge,
    }

    fn = dispatch.get(str(args.command))
    if fn is None:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 2

    try:
        return int(fn(ctx, args))
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
