"""Capacity analysis for capaplan.

Builds a per-day picture of committed and free time from the current task
list. Capacity is always recomputed from the tasks passed in; nothing is
cached between calls, so two calls with the same input give the same output.
"""

import logging
from datetime import date, timedelta
from typing import List, Optional, Sequence, Tuple

from capaplan.config import DEFAULT_SETTINGS, SchedulerSettings
from capaplan.engine.timeutil import time_to_minutes
from capaplan.engine.workdays import day_name, is_work_day, iter_days
from capaplan.errors import SchedulingInputError
from capaplan.models.capacity import CapacityDay, FreeWindow
from capaplan.models.plan import DayLoad, FeasibilityReport
from capaplan.models.task import Task

logger = logging.getLogger(__name__)

Interval = Tuple[int, int]


def analyze_capacity(
    tasks: Sequence[Task],
    start_date: date,
    end_date: Optional[date] = None,
    max_days: Optional[int] = None,
    settings: Optional[SchedulerSettings] = None,
) -> List[CapacityDay]:
    """Compute one CapacityDay per calendar day.

    The range starts at start_date and covers up to max_days days, or stops at
    end_date if that comes first.

    Args:
        tasks: Current task snapshot (read-only)
        start_date: First day to analyze
        end_date: Optional last day (inclusive)
        max_days: Maximum number of days (defaults to the capacity horizon)
        settings: Engine settings (work window, work days, window granularity)

    Returns:
        List of CapacityDay, in date order
    """
    settings = settings or DEFAULT_SETTINGS
    if max_days is None:
        max_days = settings.capacity_horizon_days
    if max_days <= 0:
        raise SchedulingInputError(f"max_days must be positive, got {max_days}", field="max_days")

    last_day = start_date + timedelta(days=max_days - 1)
    if end_date is not None and end_date < last_day:
        last_day = end_date

    days = [build_capacity_day(day, tasks, settings) for day in iter_days(start_date, last_day)]
    logger.debug(f"Analyzed capacity for {len(days)} days from {start_date}")
    return days


def build_capacity_day(
    day: date,
    tasks: Sequence[Task],
    settings: Optional[SchedulerSettings] = None,
) -> CapacityDay:
    """Build the capacity record for a single date."""
    settings = settings or DEFAULT_SETTINGS
    work_day = is_work_day(day, settings)
    work_start = settings.work_start_minutes
    work_end = settings.work_end_minutes if work_day else work_start
    total = work_end - work_start

    day_tasks = tasks_on_date(tasks, day)
    occupied = sum(t.duration for t in day_tasks)
    busy = occupied_intervals(day_tasks, work_start, work_end)
    windows = free_windows_between(busy, work_start, work_end, settings.min_window_minutes)

    return CapacityDay(
        date=day,
        day_name=day_name(day),
        is_work_day=work_day,
        work_start=work_start,
        work_end=work_end,
        total_minutes=total,
        tasks=day_tasks,
        occupied_minutes=occupied,
        free_minutes=max(0, total - occupied),
        free_windows=windows,
    )


def tasks_on_date(tasks: Sequence[Task], day: date) -> List[Task]:
    """Non-completed tasks whose fixed date is ``day``."""
    return [t for t in tasks if not t.is_completed and t.due_date == day]


def occupied_intervals(day_tasks: Sequence[Task], work_start: int, work_end: int) -> List[Interval]:
    """Busy intervals of a day, clipped to the work window and merged.

    Tasks without a clock time are stacked at the start of the work window so
    their minutes are never reported as free.
    """
    intervals: List[Interval] = []

    untimed = sum(t.duration for t in day_tasks if t.due_time is None)
    if untimed:
        intervals.append((work_start, work_start + untimed))

    for task in day_tasks:
        start = time_to_minutes(task.due_time)
        if start is None:
            continue
        intervals.append((start, start + task.duration))

    clipped = []
    for start, end in intervals:
        start, end = max(start, work_start), min(end, work_end)
        if start < end:
            clipped.append((start, end))
    return merge_intervals(clipped)


def merge_intervals(intervals: Sequence[Interval]) -> List[Interval]:
    """Merge overlapping or touching intervals (result sorted by start)."""
    merged: List[Interval] = []
    for start, end in sorted(intervals):
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged


def free_windows_between(
    busy: Sequence[Interval],
    work_start: int,
    work_end: int,
    min_window: int,
) -> List[FreeWindow]:
    """Complement of merged busy intervals within [work_start, work_end)."""
    windows: List[FreeWindow] = []
    cursor = work_start
    for start, end in busy:
        if start - cursor >= min_window:
            windows.append(FreeWindow(start=cursor, end=start, duration=start - cursor))
        cursor = max(cursor, end)
    if work_end - cursor >= min_window:
        windows.append(FreeWindow(start=cursor, end=work_end, duration=work_end - cursor))
    return windows


def get_available_minutes_for_day(
    day: date,
    tasks: Sequence[Task],
    settings: Optional[SchedulerSettings] = None,
) -> int:
    """Work minutes left on a day after every committed task, 0 on days off."""
    settings = settings or DEFAULT_SETTINGS
    if not is_work_day(day, settings):
        return 0
    committed = sum(t.duration for t in tasks_on_date(tasks, day))
    return max(0, settings.work_minutes_per_day - committed)


def calculate_total_free_time(
    start_date: date,
    end_date: date,
    tasks: Sequence[Task],
    settings: Optional[SchedulerSettings] = None,
) -> int:
    """Sum of free window minutes over working days in [start_date, end_date]."""
    settings = settings or DEFAULT_SETTINGS
    total = 0
    for day in iter_days(start_date, end_date):
        if not is_work_day(day, settings):
            continue
        capacity = build_capacity_day(day, tasks, settings)
        total += sum(w.duration for w in capacity.free_windows)
    return total


def check_schedule_feasibility(
    total_minutes: int,
    start_date: date,
    end_date: date,
    tasks: Sequence[Task],
    settings: Optional[SchedulerSettings] = None,
) -> FeasibilityReport:
    """Whether total_minutes of new work fits the free time in a date range."""
    total_free = calculate_total_free_time(start_date, end_date, tasks, settings)
    if total_free > 0:
        utilization = min(100, round(total_minutes * 100 / total_free))
    else:
        utilization = 100
    return FeasibilityReport(
        feasible=total_free >= total_minutes,
        total_free_minutes=total_free,
        required_minutes=total_minutes,
        utilization_percent=utilization,
    )


def check_day_load(
    tasks: Sequence[Task],
    day: date,
    settings: Optional[SchedulerSettings] = None,
) -> DayLoad:
    """Compare committed minutes on a day with the work window."""
    settings = settings or DEFAULT_SETTINGS
    day_tasks = tasks_on_date(tasks, day)
    total_scheduled = sum(t.duration for t in day_tasks)
    available = settings.work_minutes_per_day
    overbooked = total_scheduled > available
    return DayLoad(
        date=day,
        total_scheduled=total_scheduled,
        available=available,
        overbooked=overbooked,
        overbook_amount=total_scheduled - available if overbooked else 0,
        utilization_percent=round(total_scheduled * 100 / available),
        tasks=day_tasks,
    )
