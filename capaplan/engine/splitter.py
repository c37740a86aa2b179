"""Block decomposition for capaplan.

Splits a long job into bounded sessions and places them greedily across the
free windows of a capacity snapshot, earliest day first.
"""

import logging
import math
from collections import deque
from datetime import date
from typing import List, Mapping, Optional, Sequence, Tuple

from capaplan.config import DEFAULT_SETTINGS, SchedulerSettings
from capaplan.engine.duration import adjusted_duration_for
from capaplan.engine.scheduler import OpenWindow, preferred_span, take_slot
from capaplan.engine.timeutil import minutes_to_time
from capaplan.engine.workdays import count_work_days
from capaplan.errors import InvalidDuration, SchedulingInputError
from capaplan.models.block import Block, JobSpec
from capaplan.models.capacity import CapacityDay
from capaplan.models.constants import CATEGORY_MAX_BLOCK_MINUTES, SPLIT_PARTS_PER_DAY_ESTIMATE
from capaplan.models.learning import LearningRecord
from capaplan.models.plan import SplitAnalysis, SplitRecommendation, SplitResult
from capaplan.models.task import Task, TaskCategory, category_key
from capaplan.models.task_factory import create_task

logger = logging.getLogger(__name__)

# (duration, date, start minute); date/start are None for unplaced parts
_Fragment = Tuple[int, Optional[date], Optional[int]]


def max_block_for_category(category) -> int:
    """Longest session a category allows."""
    return CATEGORY_MAX_BLOCK_MINUTES.get(
        category_key(category), CATEGORY_MAX_BLOCK_MINUTES[TaskCategory.OTHER.value]
    )


def effective_block_cap(category, preferred_block_size: int) -> int:
    return min(preferred_block_size, max_block_for_category(category))


def partition_duration(total_minutes: int, cap: int) -> List[int]:
    """Split total_minutes into ceil(total/cap) near-equal parts.

    The remainder goes one minute at a time to the earliest parts, so the
    parts sum to total_minutes exactly and none exceeds cap.
    """
    if total_minutes <= 0:
        raise InvalidDuration(f"Duration must be positive, got {total_minutes}", field="total_minutes")
    if cap <= 0:
        raise InvalidDuration(f"Block size must be positive, got {cap}", field="preferred_block_size")

    count = math.ceil(total_minutes / cap)
    base, remainder = divmod(total_minutes, count)
    return [base + 1 if i < remainder else base for i in range(count)]


def split_and_schedule(
    job: JobSpec,
    capacity_days: Sequence[CapacityDay],
    learning_data: Optional[Mapping[str, LearningRecord]] = None,
    settings: Optional[SchedulerSettings] = None,
    max_blocks_per_day: Optional[int] = None,
) -> SplitResult:
    """Decompose a job into blocks and place them in free windows.

    The job's estimate is first adjusted from learning data; the adjusted
    total is partitioned into parts no longer than the effective block cap.
    Parts are placed day by day from ``job.start_date`` (and not after
    ``job.deadline``), at most ``max_blocks_per_day`` per day, inside the
    category's preferred hours when a window there fits and first-fit
    otherwise.

    When a deadline is set, a part that fits no whole window may be fractured
    over windows of at least the minimum block size, but only once no later
    day could hold it whole. No fragment, queued remainder included, drops
    below the minimum block size. Blocks are renumbered afterwards so indices
    stay 1..n.

    Parts that cannot be placed are still returned, without a date, and
    counted in ``analysis.remaining_minutes``. Infeasibility is never raised.

    Args:
        job: The job to decompose
        capacity_days: Capacity snapshot from analyze_capacity
        learning_data: Per-category learning records
        settings: Engine settings
        max_blocks_per_day: Per-call override of the per-day block limit

    Returns:
        SplitResult with all blocks (placed first) and the feasibility analysis

    Raises:
        InvalidDuration: If the job's total duration is not positive
        SchedulingInputError: If max_blocks_per_day is not positive
    """
    settings = settings or DEFAULT_SETTINGS
    per_day_limit = settings.max_blocks_per_day if max_blocks_per_day is None else max_blocks_per_day
    if per_day_limit <= 0:
        raise SchedulingInputError(
            f"max_blocks_per_day must be positive, got {per_day_limit}", field="max_blocks_per_day"
        )

    if job.total_minutes <= 0:
        raise InvalidDuration(f"Duration must be positive, got {job.total_minutes}", field="total_minutes")

    required, was_adjusted = adjusted_duration_for(job.total_minutes, job.category, learning_data, settings)
    cap = effective_block_cap(job.category, job.preferred_block_size)
    parts = partition_duration(required, cap)

    days = [
        d for d in sorted(capacity_days, key=lambda d: d.date)
        if d.is_work_day and d.date >= job.start_date and (job.deadline is None or d.date <= job.deadline)
    ]
    total_free = sum(w.duration for d in days for w in d.free_windows)

    fragments = _place_parts(
        parts,
        days,
        per_day_limit,
        settings.min_block_minutes,
        job.deadline is not None,
        preferred_span(job.category),
        settings.break_minutes,
    )

    blocks = [
        Block(
            parent_task_id=job.id,
            parent_title=job.title,
            category=job.category,
            priority=job.priority,
            quadrant=job.quadrant,
            block_index=index,
            total_blocks=len(fragments),
            duration=duration,
            date=day,
            start_time=minutes_to_time(start) if start is not None else None,
            end_time=minutes_to_time(start + duration) if start is not None else None,
        )
        for index, (duration, day, start) in enumerate(fragments, start=1)
    ]

    scheduled = sum(b.duration for b in blocks if b.is_placed)
    analysis = SplitAnalysis(
        raw_minutes=job.total_minutes,
        required_minutes=required,
        total_free_time=total_free,
        scheduled_minutes=scheduled,
        remaining_minutes=required - scheduled,
        has_enough_time=scheduled == required,
        was_adjusted=was_adjusted,
        block_cap=cap,
        days_used=sorted({b.date for b in blocks if b.date is not None}),
    )
    logger.debug(
        f"Split '{job.title}' into {len(blocks)} blocks, {scheduled}/{required} min placed"
    )
    return SplitResult(blocks=blocks, analysis=analysis)


def _place_parts(
    parts: List[int],
    days: Sequence[CapacityDay],
    per_day_limit: int,
    min_block: int,
    may_fracture: bool,
    preferred: Tuple[int, int],
    break_minutes: int = 0,
) -> List[_Fragment]:
    queue = deque(parts)
    fragments: List[_Fragment] = []

    for position, day in enumerate(days):
        windows = [OpenWindow(date=day.date, start=w.start, end=w.end) for w in day.free_windows]
        later_days = days[position + 1:]
        placed_today = 0

        while queue and placed_today < per_day_limit:
            part = queue[0]
            slot = take_slot(windows, part, preferred, break_minutes)
            if slot is not None:
                fragments.append((part, day.date, slot[1]))
                queue.popleft()
                placed_today += 1
                continue

            if not may_fracture or _fits_later(later_days, part):
                break
            piece = _fracture(windows, part, min_block, break_minutes)
            if piece is None:
                break
            # Deadline pressure: take what this window holds, keep the rest queued.
            taken, start = piece
            fragments.append((taken, day.date, start))
            queue[0] = part - taken
            placed_today += 1

        if not queue:
            break

    fragments.extend((part, None, None) for part in queue)
    return fragments


def _fits_later(days: Sequence[CapacityDay], part: int) -> bool:
    return any(w.duration >= part for d in days for w in d.free_windows)


def _fracture(
    windows: List[OpenWindow], part: int, min_block: int, break_minutes: int
) -> Optional[Tuple[int, int]]:
    """Largest piece of ``part`` a window can hold, leaving at least min_block queued."""
    for window in windows:
        taken = min(window.remaining, part - min_block)
        if taken >= min_block:
            start = window.start
            window.start = min(window.end, start + taken + break_minutes)
            return taken, start
    return None


def get_split_recommendation(
    total_minutes: int,
    category=TaskCategory.OTHER,
    start_date: Optional[date] = None,
    deadline: Optional[date] = None,
    settings: Optional[SchedulerSettings] = None,
) -> SplitRecommendation:
    """Quick advice on whether and how to split a job, without placing it.

    Assumes two parts can be done per working day. Without a deadline the
    capacity horizon is used as the number of available days.
    """
    settings = settings or DEFAULT_SETTINGS
    if total_minutes <= 0:
        raise InvalidDuration(f"Duration must be positive, got {total_minutes}", field="total_minutes")

    max_block = max_block_for_category(category)
    if total_minutes <= max_block:
        return SplitRecommendation(should_split=False, reason="Short enough to do in one session")

    num_parts = math.ceil(total_minutes / max_block)
    days_needed = math.ceil(num_parts / SPLIT_PARTS_PER_DAY_ESTIMATE)
    if deadline is not None:
        available = count_work_days(start_date or date.today(), deadline, settings)
    else:
        available = settings.capacity_horizon_days
    has_enough_time = available >= days_needed

    warning = None
    if not has_enough_time:
        warning = f"Only {available} working days available, {days_needed} needed"

    return SplitRecommendation(
        should_split=True,
        reason=f"{total_minutes} min is longer than the {max_block} min session limit for {category_key(category)}",
        num_parts=num_parts,
        avg_part_minutes=round(total_minutes / num_parts),
        days_needed=days_needed,
        available_work_days=available,
        has_enough_time=has_enough_time,
        warning=warning,
    )


def blocks_to_tasks(blocks: Sequence[Block], job: JobSpec) -> List[Task]:
    """Turn accepted blocks into Task records linked to the parent job."""
    return [
        create_task(
            title=block.title,
            description=job.description,
            category=block.category,
            estimated_duration_min=block.duration,
            priority=block.priority,
            quadrant=block.quadrant,
            due_date=block.date,
            due_time=block.start_time,
            deadline=job.deadline,
            parent_task_id=block.parent_task_id,
            block_index=block.block_index,
            total_blocks=block.total_blocks,
        )
        for block in blocks
    ]
