"""Wall-clock helpers shared by the engine."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime, timedelta

Clock = Callable[[], datetime]


def local_now() -> datetime:
    """Return an aware datetime in the local timezone."""
    return datetime.now().astimezone()


def day_key(day: date) -> str:
    """History bucket key for a calendar date."""
    return day.isoformat()


def time_until_midnight(now: datetime) -> timedelta:
    tomorrow = (now + timedelta(days=1)).replace(hour=0, minute=0, second=0, microsecond=0)
    return tomorrow - now


def elapsed_days(now: datetime, since: datetime) -> int:
    """Whole days elapsed between two instants, floored."""
    return int((now - since).total_seconds() // 86400)
