"""Priority placement for capaplan.

Places pending tasks (and unplaced blocks) into the free windows of a
capacity snapshot. Items are ranked first (see ranking.py), then placed
day by day in chronological order. Already-anchored work is never moved;
only genuinely free time is filled.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from capaplan.config import DEFAULT_SETTINGS, SchedulerSettings
from capaplan.engine.ranking import Schedulable, rank_for_placement
from capaplan.engine.timeutil import minutes_to_time
from capaplan.models.block import Block
from capaplan.models.capacity import CapacityDay
from capaplan.models.constants import CATEGORY_PREFERRED_HOURS
from capaplan.models.learning import LearningRecord
from capaplan.models.plan import PlacementEntry, PlacementResult, UnscheduledItem
from capaplan.models.task import TaskCategory, category_key

logger = logging.getLogger(__name__)

# (date, start minute, end minute) of a span already held by the snapshot
_Reservation = Tuple[date, int, int]


@dataclass
class OpenWindow:
    """Working copy of a free window; start advances as time is consumed."""

    date: date
    start: int
    end: int

    @property
    def remaining(self) -> int:
        return self.end - self.start


def preferred_span(category) -> Tuple[int, int]:
    """Preferred hours of a category as a (start, end) minute range."""
    start_hour, end_hour = CATEGORY_PREFERRED_HOURS.get(
        category_key(category), CATEGORY_PREFERRED_HOURS[TaskCategory.OTHER.value]
    )
    return start_hour * 60, end_hour * 60


def take_slot(
    windows: List[OpenWindow],
    minutes: int,
    preferred: Optional[Tuple[int, int]] = None,
    break_minutes: int = 0,
) -> Optional[Tuple[date, int]]:
    """Claim ``minutes`` from the first window that holds them.

    A slot inside the preferred hours wins over an earlier one outside them.
    Time before a slot cut from the middle of a window stays open as its own
    window. ``break_minutes`` after the slot are consumed too, as far as the
    window reaches.

    Returns:
        (date, start minute) of the slot, or None when nothing fits
    """
    if preferred is not None:
        low, high = preferred
        for index, window in enumerate(windows):
            start = max(window.start, low)
            if min(window.end, high) - start >= minutes:
                return _consume(windows, index, start, minutes, break_minutes)

    for index, window in enumerate(windows):
        if window.remaining >= minutes:
            return _consume(windows, index, window.start, minutes, break_minutes)
    return None


def _consume(
    windows: List[OpenWindow], index: int, start: int, minutes: int, break_minutes: int
) -> Tuple[date, int]:
    window = windows[index]
    if start > window.start:
        windows.insert(index, OpenWindow(date=window.date, start=window.start, end=start))
    window.start = min(window.end, start + minutes + break_minutes)
    return window.date, start


def schedule_by_priority(
    unscheduled_tasks: Sequence[Schedulable],
    capacity_days: Sequence[CapacityDay],
    learning_data: Optional[Mapping[str, LearningRecord]] = None,
    settings: Optional[SchedulerSettings] = None,
) -> PlacementResult:
    """Place pending items into free windows by priority.

    Order: priority rank, then adjusted duration (shortest first), then
    input order. Days are scanned in date order; on each day the item goes
    into its category's preferred hours when a window there fits, otherwise
    into the first window whose residual length fits its adjusted duration.
    The window then shrinks so later items see what is left.

    A task with a date but no time is only placed on that date; a task with a
    deadline only on or before it. When the snapshot already holds such a
    dated task (capacity analysis stacks untimed tasks at the start of the
    work window), it is given that reserved span and consumes no free window.
    Completed tasks, anchored tasks and placed blocks are ignored.

    Items that fit nowhere are returned in ``unscheduled``; this is a normal
    outcome, not an error. The capacity snapshot is not modified.

    Args:
        unscheduled_tasks: Tasks or blocks waiting for a slot
        capacity_days: Capacity snapshot from analyze_capacity
        learning_data: Per-category learning records
        settings: Engine settings

    Returns:
        PlacementResult with scheduled entries and unscheduled items
    """
    settings = settings or DEFAULT_SETTINGS
    result = PlacementResult()
    windows_by_day = _open_windows(capacity_days)
    reserved = _reserved_spans(capacity_days)

    pending = [item for item in unscheduled_tasks if _is_pending(item)]
    ranked = rank_for_placement(pending, learning_data, settings)

    for item, minutes, was_adjusted in ranked:
        if not isinstance(item, Block) and item.id in reserved:
            _place_reserved(result, item, reserved[item.id], capacity_days)
            continue

        slot = None
        for day, windows in windows_by_day.items():
            if not _date_allowed(item, day):
                continue
            slot = take_slot(windows, minutes, preferred_span(item.category), settings.break_minutes)
            if slot is not None:
                break

        if slot is None:
            largest = max(
                (w.remaining for day, windows in windows_by_day.items() if _date_allowed(item, day) for w in windows),
                default=0,
            )
            result.unscheduled.append(
                UnscheduledItem(
                    item=item,
                    required_minutes=minutes,
                    largest_window_minutes=largest,
                    shortfall_minutes=minutes - largest,
                )
            )
            logger.debug(f"No window for {_label(item)} ({minutes} min, largest {largest})")
            continue

        day, start = slot
        result.scheduled.append(
            PlacementEntry(
                item=item,
                date=day,
                start_time=minutes_to_time(start),
                end_time=minutes_to_time(start + minutes),
                duration=minutes,
                was_adjusted=was_adjusted,
            )
        )
        logger.debug(f"Placed {_label(item)} on {day} at {minutes_to_time(start)}")

    return result


def _open_windows(capacity_days: Sequence[CapacityDay]) -> Dict[date, List[OpenWindow]]:
    windows: Dict[date, List[OpenWindow]] = {}
    for day in sorted(capacity_days, key=lambda d: d.date):
        if not day.is_work_day:
            continue
        windows[day.date] = [OpenWindow(date=day.date, start=w.start, end=w.end) for w in day.free_windows]
    return windows


def _reserved_spans(capacity_days: Sequence[CapacityDay]) -> Dict[str, _Reservation]:
    """Spans the snapshot holds for dated tasks without a time.

    Mirrors capacity analysis: untimed tasks of a day are stacked from the
    start of the work window, in snapshot order.
    """
    spans: Dict[str, _Reservation] = {}
    for day in capacity_days:
        cursor = day.work_start
        for task in day.tasks:
            if task.due_time is not None:
                continue
            spans[task.id] = (day.date, cursor, cursor + task.duration)
            cursor += task.duration
    return spans


def _place_reserved(result, task, span: _Reservation, capacity_days: Sequence[CapacityDay]) -> None:
    day, start, end = span
    work_end = next(d.work_end for d in capacity_days if d.date == day)
    if end > work_end:
        held = max(0, work_end - start)
        result.unscheduled.append(
            UnscheduledItem(
                item=task,
                required_minutes=end - start,
                largest_window_minutes=held,
                shortfall_minutes=end - start - held,
            )
        )
        logger.debug(f"Reserved span of {_label(task)} runs past the work window on {day}")
        return

    result.scheduled.append(
        PlacementEntry(
            item=task,
            date=day,
            start_time=minutes_to_time(start),
            end_time=minutes_to_time(end),
            duration=end - start,
            was_adjusted=False,
        )
    )
    logger.debug(f"Kept {_label(task)} in its reserved span on {day} at {minutes_to_time(start)}")


def _is_pending(item: Schedulable) -> bool:
    if isinstance(item, Block):
        return not item.is_placed
    return not item.is_completed and not item.is_anchored


def _date_allowed(item: Schedulable, day: date) -> bool:
    if isinstance(item, Block):
        return item.date is None or item.date == day
    if item.due_date is not None and item.due_date != day:
        return False
    if item.deadline is not None and day > item.deadline:
        return False
    return True


def _label(item: Schedulable) -> str:
    return item.title if isinstance(item, Block) else f"task {item.id}"
