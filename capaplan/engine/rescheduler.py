"""Urgent insertion and roll-forward planning for capaplan.

Everything here returns a proposal. Nothing is persisted: the caller shows
the plan and, once the user confirms, writes the changes to the task store.
"""

import logging
from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence

from capaplan.config import DEFAULT_SETTINGS, SchedulerSettings
from capaplan.engine.capacity import check_day_load, get_available_minutes_for_day
from capaplan.engine.conflicts import find_next_free_slot
from capaplan.engine.movability import calculate_movability, find_movable_tasks, is_deferrable
from capaplan.engine.scheduler import OpenWindow
from capaplan.engine.timeutil import minutes_to_time
from capaplan.engine.workdays import day_name, is_work_day, next_work_day
from capaplan.errors import SchedulingInputError
from capaplan.models.capacity import CapacityDay
from capaplan.models.constants import UNDERUTILIZED_PERCENT
from capaplan.models.plan import (
    BalanceSuggestion,
    DailyRescheduleItem,
    DailyRescheduleSummary,
    ProposedMove,
    RescheduleChange,
    ReschedulePlan,
    UrgentPlacement,
    WeeklyBalance,
)
from capaplan.models.task import Task

logger = logging.getLogger(__name__)


def _lookahead(settings: SchedulerSettings, lookahead_days: Optional[int]) -> int:
    lookahead = settings.reschedule_lookahead_days if lookahead_days is None else lookahead_days
    if lookahead <= 0:
        raise SchedulingInputError(f"lookahead_days must be positive, got {lookahead}", field="lookahead_days")
    return lookahead


def calculate_new_date(
    task: Task,
    tasks: Sequence[Task],
    from_date: Optional[date] = None,
    settings: Optional[SchedulerSettings] = None,
    lookahead_days: Optional[int] = None,
) -> date:
    """Next working day with room for the task.

    Scans working days after ``from_date`` (the task's date by default) up to
    the lookahead bound. When none has enough free minutes, falls back to the
    very next working day regardless of capacity.
    """
    settings = settings or DEFAULT_SETTINGS
    lookahead = _lookahead(settings, lookahead_days)
    origin = from_date or task.due_date or date.today()
    others = [t for t in tasks if t.id != task.id]

    candidate = next_work_day(origin, settings)
    for _ in range(lookahead):
        if get_available_minutes_for_day(candidate, others, settings) >= task.duration:
            return candidate
        candidate = next_work_day(candidate, settings)

    return next_work_day(origin, settings)


def reschedule_for_urgent_task(
    urgent_task: Task,
    existing: Sequence[Task],
    target_date: Optional[date] = None,
    allow_partial: bool = True,
    today: Optional[date] = None,
    settings: Optional[SchedulerSettings] = None,
    lookahead_days: Optional[int] = None,
) -> ReschedulePlan:
    """Plan room for an urgent task on ``target_date``.

    If the day already has enough free minutes the plan is a no-op. Otherwise
    the shortfall is freed by deferring the most movable tasks of that day,
    each to the next working day with room (see calculate_new_date). Earlier
    deferrals in the same plan count against later ones.

    With ``allow_partial=False`` an insufficient deferral yields
    ``success=False`` and no changes; otherwise the plan goes ahead and
    carries a warning.

    Args:
        urgent_task: The task that must fit on target_date
        existing: Current task snapshot (the urgent task itself is ignored)
        target_date: Day the urgent task needs (defaults to today)
        allow_partial: Accept a plan that frees less than needed
        today: Reference date for movability (defaults to today)
        settings: Engine settings
        lookahead_days: Per-call override of the lookahead bound

    Returns:
        ReschedulePlan

    Raises:
        SchedulingInputError: If lookahead_days is not positive
    """
    settings = settings or DEFAULT_SETTINGS
    _lookahead(settings, lookahead_days)
    target_date = target_date or today or date.today()
    duration = urgent_task.duration
    others = [t for t in existing if t.id != urgent_task.id]

    available = get_available_minutes_for_day(target_date, others, settings)
    if available >= duration:
        return ReschedulePlan(
            success=True,
            needs_reschedule=False,
            message=f"{target_date} has room for {duration} min",
            urgent_placement=_urgent_placement(urgent_task, target_date, others, settings),
        )

    required = duration - available
    deferral = find_movable_tasks(others, target_date, required, today=today)

    if not deferral.sufficient and not allow_partial:
        logger.debug(f"Urgent insert on {target_date} refused: {deferral.freed_minutes}/{required} min")
        return ReschedulePlan(
            success=False,
            needs_reschedule=True,
            message=f"Cannot free enough time: need {required} min, only {deferral.freed_minutes} min movable",
            freed_minutes=deferral.freed_minutes,
            required_minutes=required,
        )

    working = list(others)
    changes = []
    for candidate in deferral.tasks_to_move:
        task = candidate.task
        new_date = calculate_new_date(task, working, target_date, settings, lookahead_days)
        working = [t for t in working if t.id != task.id]
        working.append(task.model_copy(update={"due_date": new_date}))
        changes.append(
            RescheduleChange(
                task_id=task.id,
                task_title=task.title,
                from_date=task.due_date,
                to_date=new_date,
                duration=task.duration,
                reason=f"Moved for urgent task '{urgent_task.title}'",
            )
        )

    warnings = []
    if not deferral.sufficient:
        warnings.append(f"Only {deferral.freed_minutes} of {required} min could be freed")

    return ReschedulePlan(
        success=True,
        needs_reschedule=True,
        message=f"{len(changes)} tasks will move to make room",
        changes=changes,
        freed_minutes=deferral.freed_minutes,
        required_minutes=required,
        urgent_placement=_urgent_placement(urgent_task, target_date, working, settings),
        warnings=warnings,
    )


def _urgent_placement(
    urgent_task: Task,
    target_date: date,
    tasks: Sequence[Task],
    settings: SchedulerSettings,
) -> UrgentPlacement:
    start = find_next_free_slot(
        target_date,
        urgent_task.duration,
        tasks,
        work_start_hour=settings.work_start_hour,
        work_end_hour=settings.work_end_hour,
    )
    return UrgentPlacement(task=urgent_task, date=target_date, start_time=start)


def propose_task_moves(
    tasks_to_move: Sequence[Task],
    capacity_days: Sequence[CapacityDay],
    after_date: date,
    settings: Optional[SchedulerSettings] = None,
) -> List[ProposedMove]:
    """Concrete new slots for deferred tasks, in free windows after ``after_date``.

    Windows are consumed as tasks are assigned. A task that fits nowhere is
    proposed for the next working day without a time.
    """
    settings = settings or DEFAULT_SETTINGS
    windows = [
        OpenWindow(date=day.date, start=w.start, end=w.end)
        for day in sorted(capacity_days, key=lambda d: d.date)
        if day.is_work_day and day.date > after_date
        for w in day.free_windows
    ]

    moves = []
    for task in tasks_to_move:
        window = next((w for w in windows if w.remaining >= task.duration), None)
        if window is None:
            moves.append(
                ProposedMove(task=task, from_date=task.due_date, new_date=next_work_day(after_date, settings))
            )
            continue
        moves.append(
            ProposedMove(
                task=task,
                from_date=task.due_date,
                new_date=window.date,
                new_time=minutes_to_time(window.start),
            )
        )
        window.start += task.duration
    return moves


def suggest_daily_reschedule(
    tasks: Sequence[Task],
    today: Optional[date] = None,
    settings: Optional[SchedulerSettings] = None,
) -> DailyRescheduleSummary:
    """End-of-day roll-forward for today's unfinished tasks.

    Quadrant 1 tasks stay on today; everything else is suggested for the
    next working day. Suggestions are ordered by quadrant, then duration.
    """
    today = today or date.today()
    unfinished = [t for t in tasks if not t.is_completed and t.due_date == today]
    if not unfinished:
        return DailyRescheduleSummary(has_unfinished=False)

    tomorrow = next_work_day(today, settings)
    unfinished.sort(key=lambda t: (t.quadrant, t.duration))

    suggestions = [
        DailyRescheduleItem(
            task=t,
            suggested_date=today if t.quadrant == 1 else tomorrow,
            keep_today=t.quadrant == 1,
        )
        for t in unfinished
    ]
    urgent_count = sum(1 for s in suggestions if s.keep_today)

    return DailyRescheduleSummary(
        has_unfinished=True,
        count=len(unfinished),
        urgent_count=urgent_count,
        can_move_count=len(suggestions) - urgent_count,
        total_minutes=sum(t.duration for t in unfinished),
        suggestions=suggestions,
    )


def suggest_weekly_balance(
    tasks: Sequence[Task],
    week_start: Optional[date] = None,
    today: Optional[date] = None,
    settings: Optional[SchedulerSettings] = None,
) -> WeeklyBalance:
    """Load overview of the working days in the 7 days from ``week_start``.

    Overbooked days are balanced against under-used ones (below 60%
    utilization): each under-used day is offered the most movable task of the
    overloaded day that fits its spare minutes. A task is suggested at most once.
    """
    settings = settings or DEFAULT_SETTINGS
    week_start = week_start or today or date.today()

    loads = []
    for offset in range(7):
        day = week_start + timedelta(days=offset)
        if is_work_day(day, settings):
            loads.append(check_day_load(tasks, day, settings))

    overloaded = [load for load in loads if load.overbooked]
    underutilized = [load for load in loads if load.utilization_percent < UNDERUTILIZED_PERCENT]
    spare: Dict[date, int] = {load.date: load.available - load.total_scheduled for load in underutilized}

    suggestions = []
    suggested_ids = set()
    for over in overloaded:
        movable = sorted(
            (t for t in over.tasks if is_deferrable(t)),
            key=lambda t: -calculate_movability(t, today),
        )
        for under in underutilized:
            for task in movable:
                if task.id in suggested_ids or task.duration > spare[under.date]:
                    continue
                suggestions.append(
                    BalanceSuggestion(
                        task=task,
                        from_date=over.date,
                        to_date=under.date,
                        reason=f"Relieve {day_name(over.date)}",
                    )
                )
                suggested_ids.add(task.id)
                spare[under.date] -= task.duration
                break

    return WeeklyBalance(
        days=loads,
        overloaded_days=len(overloaded),
        underutilized_days=len(underutilized),
        suggestions=suggestions,
        is_balanced=not overloaded,
    )
