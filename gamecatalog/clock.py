"""Time source shared by the sync policy and jobs."""
from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        ...


class SystemClock:
    """Wall clock returning naive UTC datetimes, matching the stored columns."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc).replace(tzinfo=None)


system_clock = SystemClock()


def utcnow() -> datetime:
    """Column default for created/updated timestamps."""
    return system_clock.now()
