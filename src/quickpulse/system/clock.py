"""
Time source for transmission timestamps.

The transport stamps every request with the current UTC time expressed in
.NET ticks (100-nanosecond intervals since 0001-01-01T00:00:00Z), which is
what the collector expects in the transmission-time header.
"""

from datetime import datetime, timedelta, timezone

_TICKS_EPOCH = datetime(1, 1, 1, tzinfo=timezone.utc)
_TICKS_PER_MICROSECOND = 10


class Clock:
    """Wall clock in UTC. Tests substitute a fixed clock."""

    def utc_now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """A clock that always reports the same instant."""

    def __init__(self, instant: datetime):
        self.instant = ensure_utc(instant)

    def utc_now(self) -> datetime:
        return self.instant


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_ticks(value: datetime) -> int:
    """Convert a datetime to .NET ticks."""
    delta = ensure_utc(value) - _TICKS_EPOCH
    return (delta // timedelta(microseconds=1)) * _TICKS_PER_MICROSECOND
