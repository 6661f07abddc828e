"""Injectable source of the current instant.

Purchase rules and the upcoming-events listing compare event dates against
"now"; routing that through a Clock lets tests pin time.
"""

from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


system_clock = SystemClock()


def get_clock() -> Clock:
    """FastAPI dependency; override in tests."""
    return system_clock


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops the offset on read)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
