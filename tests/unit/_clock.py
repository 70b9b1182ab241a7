from __future__ import annotations

from datetime import UTC, datetime, timedelta


class FakeClock:
    """Manually advanced clock. Call it to read the time."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 2, 17, 23, 33, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now
