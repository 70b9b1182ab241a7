"""diskmemcache.core.time

This module is the *only* time helper surface in the codebase.

Disk entries carry their insertion time in the file name as ticks: 100-nanosecond
intervals since 0001-01-01T00:00:00Z.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

TICKS_EPOCH = datetime(1, 1, 1, tzinfo=UTC)
TICKS_PER_MICROSECOND = 10


def utc_now() -> datetime:
    """Return an aware UTC datetime."""

    return datetime.now(tz=UTC)


def to_ticks(dt: datetime) -> int:
    """Convert a datetime to ticks. Naive datetimes are assumed UTC."""

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return ((dt.astimezone(UTC) - TICKS_EPOCH) // timedelta(microseconds=1)) * TICKS_PER_MICROSECOND


def from_ticks(ticks: int) -> datetime:
    """Inverse of :func:`to_ticks`, truncated to microsecond precision.

    Raises:
        ValueError: if ticks is negative or out of datetime range.
    """

    if ticks < 0:
        raise ValueError(f"ticks must be non-negative, got {ticks}")
    try:
        return TICKS_EPOCH + timedelta(microseconds=ticks // TICKS_PER_MICROSECOND)
    except OverflowError as e:
        raise ValueError(f"ticks out of range: {ticks}") from e


def age(inserted_at: datetime, *, now: datetime | None = None) -> timedelta:
    """Return elapsed time since ``inserted_at``.

    Args:
        inserted_at: When the entry was cached.
        now: Override clock for testing.
    """

    ref = now or utc_now()
    if inserted_at.tzinfo is None:
        inserted_at = inserted_at.replace(tzinfo=UTC)
    return ref - inserted_at.astimezone(UTC)
