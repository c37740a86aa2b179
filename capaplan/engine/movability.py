"""Movability scoring and deferral selection for capaplan.

Movability estimates how acceptable it is to push a task to a later day.
The score is a base value per Eisenhower quadrant minus a fixed set of
deductions, clamped to [1, 5]. Higher means easier to defer.
"""

import logging
from datetime import date, timedelta
from typing import List, NamedTuple, Optional, Sequence

from capaplan.models.constants import (
    MAX_MOVABILITY,
    MIN_MOVABILITY,
    MOVABILITY_CLIENT_COMMUNICATION,
    MOVABILITY_DEADLINE_TODAY,
    MOVABILITY_DEADLINE_TOMORROW,
    MOVABILITY_REMINDER_SENT,
    MOVABILITY_STARTED,
    QUADRANT_BASE_MOVABILITY,
    UNKNOWN_QUADRANT_MOVABILITY,
)
from capaplan.models.plan import DeferralPlan, MovableTask
from capaplan.models.task import Task, TaskCategory, category_key

logger = logging.getLogger(__name__)


class MovabilitySignal(NamedTuple):
    """One named contribution to a movability score."""

    name: str
    delta: float


def movability_signals(task: Task, today: Optional[date] = None) -> List[MovabilitySignal]:
    """All signals that apply to a task, base value first.

    Deductions:
    - deadline is today: -1
    - deadline is tomorrow: -0.5
    - time already logged: -0.5
    - reminder already sent: -0.5
    - client communication: -0.5
    """
    today = today or date.today()
    signals = [
        MovabilitySignal(
            "quadrant", QUADRANT_BASE_MOVABILITY.get(task.quadrant, UNKNOWN_QUADRANT_MOVABILITY)
        )
    ]

    if task.deadline is not None:
        if task.deadline == today:
            signals.append(MovabilitySignal("deadline_today", -MOVABILITY_DEADLINE_TODAY))
        elif task.deadline == today + timedelta(days=1):
            signals.append(MovabilitySignal("deadline_tomorrow", -MOVABILITY_DEADLINE_TOMORROW))

    if task.time_spent_min > 0:
        signals.append(MovabilitySignal("started", -MOVABILITY_STARTED))
    if task.reminder_sent:
        signals.append(MovabilitySignal("reminder_sent", -MOVABILITY_REMINDER_SENT))
    if category_key(task.category) == TaskCategory.CLIENT_COMMUNICATION.value:
        signals.append(MovabilitySignal("client_communication", -MOVABILITY_CLIENT_COMMUNICATION))

    return signals


def calculate_movability(task: Task, today: Optional[date] = None) -> float:
    """Movability score in [1, 5]; higher is easier to defer."""
    score = sum(signal.delta for signal in movability_signals(task, today))
    return max(MIN_MOVABILITY, min(MAX_MOVABILITY, score))


def is_deferrable(task: Task) -> bool:
    """Quadrant 1 (urgent and important) work is never a deferral candidate."""
    return not task.is_completed and task.quadrant != 1


def find_movable_tasks(
    tasks: Sequence[Task],
    day: date,
    required_minutes: int,
    today: Optional[date] = None,
) -> DeferralPlan:
    """Pick tasks on ``day`` to defer until ``required_minutes`` are freed.

    Candidates are the day's non-completed, non-quadrant-1 tasks, sorted by
    movability (most movable first, input order on ties). They are taken
    greedily until their durations cover the requirement. ``sufficient``
    reports whether it was reached; the plan is a proposal, not a guarantee.

    Args:
        tasks: Current task snapshot
        day: Date that needs room
        required_minutes: Minutes to free
        today: Reference date for deadline proximity (defaults to today)

    Returns:
        DeferralPlan with the selected candidates in selection order
    """
    candidates = [
        MovableTask(task=t, movability=calculate_movability(t, today), freed_minutes=t.duration)
        for t in tasks
        if t.due_date == day and is_deferrable(t)
    ]
    candidates.sort(key=lambda c: -c.movability)

    selected = []
    freed = 0
    for candidate in candidates:
        if freed >= required_minutes:
            break
        selected.append(candidate)
        freed += candidate.freed_minutes

    logger.debug(f"Deferral on {day}: {len(selected)} tasks free {freed}/{required_minutes} min")
    return DeferralPlan(
        tasks_to_move=selected,
        freed_minutes=freed,
        required_minutes=required_minutes,
        sufficient=freed >= required_minutes,
    )
