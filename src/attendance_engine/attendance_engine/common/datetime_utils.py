from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Protocol


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_time_of_day(value: str) -> time:
    """Parse HH:MM or HH:MM:SS into a time."""
    value = (value or "").strip()
    fmt = "%H:%M:%S" if value.count(":") == 2 else "%H:%M"
    return datetime.strptime(value, fmt).time()


def add_minutes(value: time, minutes: int) -> time:
    """Shift a time-of-day, clamped to the same day."""
    base = datetime.combine(date(2000, 1, 1), value)
    shifted = base + timedelta(minutes=int(minutes))
    if shifted.date() != base.date():
        return time(23, 59, 59)
    return shifted.time()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


class Clock(Protocol):
    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock:
    def now(self) -> datetime:
        return now_local()
