"""Placement ranking for capaplan.

Sorts pending items by explicit priority, then by (adjusted) duration.
This produces a deterministic, explainable ordering for greedy placement.
"""

from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from capaplan.config import SchedulerSettings
from capaplan.engine.duration import adjusted_duration_for
from capaplan.models.block import Block
from capaplan.models.constants import PRIORITY_ORDER, UNKNOWN_PRIORITY_RANK
from capaplan.models.learning import LearningRecord
from capaplan.models.task import Task

Schedulable = Union[Task, Block]

# (item, adjusted_minutes, was_adjusted)
RankedItem = Tuple[Schedulable, int, bool]


def priority_rank(priority: Any) -> int:
    """Rank for a priority level (urgent=1 ... low=4, unknown=normal)."""
    key = getattr(priority, "value", priority)
    return PRIORITY_ORDER.get(key, UNKNOWN_PRIORITY_RANK)


def item_duration(item: Schedulable) -> int:
    """Raw duration of a task or block in minutes."""
    if isinstance(item, Block):
        return item.duration
    return item.estimated_duration_min or item.duration


def rank_for_placement(
    items: Sequence[Schedulable],
    learning_data: Optional[Mapping[str, LearningRecord]] = None,
    settings: Optional[SchedulerSettings] = None,
) -> List[RankedItem]:
    """Rank items for greedy placement.

    Items are sorted:
    1. By priority rank (urgent first)
    2. Within a rank, by adjusted duration (shortest first)
    3. Ties keep their input order (the sort is stable)

    Shorter-first is a packing heuristic, not an optimal bin packer.

    Args:
        items: Tasks or blocks to rank
        learning_data: Per-category learning records for duration adjustment
        settings: Engine settings

    Returns:
        List of (item, adjusted_minutes, was_adjusted), highest priority first
    """
    with_durations = []
    for item in items:
        adjusted, was_adjusted = adjusted_duration_for(
            item_duration(item), item.category, learning_data, settings
        )
        with_durations.append((item, adjusted, was_adjusted))

    return sorted(
        with_durations,
        key=lambda x: (_priority_sort_key(x[0]), _duration_sort_key(x[1])),
    )


def _priority_sort_key(item: Schedulable) -> int:
    return priority_rank(item.priority)


def _duration_sort_key(adjusted_minutes: int) -> int:
    return adjusted_minutes
