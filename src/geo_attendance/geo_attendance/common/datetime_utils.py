from __future__ import annotations

import math
from calendar import monthrange
from datetime import date, datetime, time, timedelta
from typing import Iterator


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str) -> time:
    """Parse HH:MM (24h) string into time."""
    return datetime.strptime(value.strip(), "%H:%M").time()


def format_hhmm(value: time) -> str:
    return value.strftime("%H:%M")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def combine_like(day: date, at: time, reference: datetime) -> datetime:
    """Build ``day at`` carrying the same tzinfo as ``reference``."""
    return datetime.combine(day, at).replace(tzinfo=reference.tzinfo)


def month_start(day: date) -> date:
    return day.replace(day=1)


def previous_month_range(today: date) -> tuple[date, date]:
    last_of_prev = today.replace(day=1) - timedelta(days=1)
    return last_of_prev.replace(day=1), last_of_prev


def month_range(year: int, month: int) -> tuple[date, date]:
    return date(year, month, 1), date(year, month, monthrange(year, month)[1])


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day in [start, end]."""
    cur = start
    while cur <= end:
        yield cur
        cur += timedelta(days=1)


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from ``start`` to ``end``, half-minutes rounded up."""
    return int(math.floor((end - start).total_seconds() / 60 + 0.5))
