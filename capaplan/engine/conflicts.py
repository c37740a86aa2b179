"""Overlap detection and free-slot search for capaplan.

Both checks work on clock-anchored tasks of a single date. Overlaps are
returned as data; the caller decides whether to override, move or cancel.
"""

from datetime import date
from typing import List, Optional, Sequence, Tuple, Union

from capaplan.config import DEFAULT_SETTINGS, SchedulerSettings
from capaplan.engine.timeutil import minutes_to_time, overlaps, time_to_minutes
from capaplan.errors import InvalidDuration
from capaplan.models.constants import WORK_END_HOUR, WORK_START_HOUR
from capaplan.models.plan import ConflictReport, SlotCandidate
from capaplan.models.task import Task


def _candidate_fields(candidate: Union[Task, SlotCandidate]) -> Tuple[Optional[str], Optional[date], Optional[str], int]:
    if isinstance(candidate, Task):
        return candidate.id, candidate.due_date, candidate.due_time, candidate.duration
    return candidate.id, candidate.date, candidate.time, candidate.duration


def find_overlapping_tasks(
    candidate: Union[Task, SlotCandidate],
    existing: Sequence[Task],
) -> List[Task]:
    """Existing tasks whose interval intersects the candidate's.

    Only non-completed tasks with a clock time on the candidate's date are
    considered, and a task with the candidate's id is skipped. A candidate
    without a date or time cannot conflict.

    Args:
        candidate: Task or SlotCandidate describing the proposed placement
        existing: Current task snapshot

    Returns:
        Overlapping tasks, in input order (empty when there is no conflict)
    """
    candidate_id, day, time, duration = _candidate_fields(candidate)
    start = time_to_minutes(time)
    if day is None or start is None:
        return []
    end = start + duration

    conflicts = []
    for task in existing:
        if candidate_id is not None and task.id == candidate_id:
            continue
        if task.is_completed or task.due_date != day:
            continue
        task_start = time_to_minutes(task.due_time)
        if task_start is None:
            continue
        if overlaps(start, end, task_start, task_start + task.duration):
            conflicts.append(task)
    return conflicts


def find_next_free_slot(
    day: date,
    duration: int,
    existing: Sequence[Task],
    work_start_hour: int = WORK_START_HOUR,
    work_end_hour: int = WORK_END_HOUR,
    not_before: Optional[str] = None,
) -> Optional[str]:
    """First start time on ``day`` where ``duration`` minutes fit.

    Walks the day's timed, non-completed tasks in start order and returns the
    first gap that is long enough: before the first task, between tasks, or
    after the last one up to the end of the work window. With ``not_before``
    the search starts no earlier than that clock time.

    Returns:
        Start time as HH:MM, or None when the day has no such gap

    Raises:
        InvalidDuration: If duration is not positive
    """
    if duration is None or duration <= 0:
        raise InvalidDuration(f"Duration must be positive, got {duration}", field="duration")

    busy = []
    for task in existing:
        if task.is_completed or task.due_date != day:
            continue
        start = time_to_minutes(task.due_time)
        if start is not None:
            busy.append((start, start + task.duration))
    busy.sort()

    cursor = work_start_hour * 60
    floor = time_to_minutes(not_before)
    if floor is not None:
        cursor = max(cursor, floor)
    day_end = work_end_hour * 60

    for busy_start, busy_end in busy:
        if cursor + duration <= busy_start:
            break
        cursor = max(cursor, busy_end)

    if cursor + duration <= day_end:
        return minutes_to_time(cursor)
    return None


def check_conflicts(
    candidate: Union[Task, SlotCandidate],
    existing: Sequence[Task],
    settings: Optional[SchedulerSettings] = None,
) -> ConflictReport:
    """Overlap check plus the next free slot from the requested time onward."""
    settings = settings or DEFAULT_SETTINGS
    _, day, time, duration = _candidate_fields(candidate)
    overlapping = find_overlapping_tasks(candidate, existing)

    next_slot = None
    if day is not None:
        # Exclude the task being moved so its current slot counts as free.
        others = [t for t in existing if candidate.id is None or t.id != candidate.id]
        next_slot = find_next_free_slot(
            day,
            duration,
            others,
            work_start_hour=settings.work_start_hour,
            work_end_hour=settings.work_end_hour,
            not_before=time,
        )

    return ConflictReport(has_conflict=bool(overlapping), overlapping=overlapping, next_free_slot=next_slot)
