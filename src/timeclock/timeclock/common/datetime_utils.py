from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Iterator


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """First and last instant of a calendar day."""
    return datetime.combine(day, time.min), datetime.combine(day, time.max)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Every date from start to end, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def to_hours(duration: timedelta) -> float:
    return duration.total_seconds() / 3600


def format_decimal_hours(hours: float) -> str:
    """Render decimal hours like ``8h 45m`` or ``-1h 05m``."""
    sign = "-" if hours < 0 else ""
    total_minutes = int(round(abs(hours) * 60))
    return f"{sign}{total_minutes // 60}h {total_minutes % 60:02d}m"


def format_timer(duration: timedelta) -> str:
    """HH:MM:SS for running counters."""
    seconds = max(int(duration.total_seconds()), 0)
    return f"{seconds // 3600:02d}:{(seconds % 3600) // 60:02d}:{seconds % 60:02d}"
