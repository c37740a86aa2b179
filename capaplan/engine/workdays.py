"""Working-day calendar helpers for capaplan."""

from datetime import date, timedelta
from typing import Iterator, Optional

from capaplan.config import DEFAULT_SETTINGS, SchedulerSettings


DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def is_work_day(day: date, settings: Optional[SchedulerSettings] = None) -> bool:
    settings = settings or DEFAULT_SETTINGS
    return day.weekday() in settings.work_days


def next_work_day(day: date, settings: Optional[SchedulerSettings] = None) -> date:
    """First working day strictly after ``day``."""
    settings = settings or DEFAULT_SETTINGS
    current = day + timedelta(days=1)
    while not is_work_day(current, settings):
        current += timedelta(days=1)
    return current


def count_work_days(start: date, end: date, settings: Optional[SchedulerSettings] = None) -> int:
    """Number of working days in the inclusive range [start, end]."""
    return sum(1 for d in iter_days(start, end) if is_work_day(d, settings))


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar date from start to end inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def day_name(day: date) -> str:
    return DAY_NAMES[day.weekday()]
