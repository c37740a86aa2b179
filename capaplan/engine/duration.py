"""Duration adjustment from historical accuracy data.

The learning service reports, per category, how long tasks really took
compared to their estimates. Once enough tasks have been observed, raw
estimates are scaled by that ratio before any placement math.
"""

import logging
from typing import Any, Mapping, Optional, Tuple

from capaplan.config import DEFAULT_SETTINGS, SchedulerSettings
from capaplan.errors import InvalidDuration
from capaplan.models.learning import LearningRecord
from capaplan.models.task import category_key

logger = logging.getLogger(__name__)


def get_adjusted_duration(
    raw_minutes: int,
    record: Optional[LearningRecord],
    settings: Optional[SchedulerSettings] = None,
) -> int:
    """Apply a learning record's average ratio to a raw estimate.

    Args:
        raw_minutes: Estimate as entered (must be positive)
        record: Learning record for the task's category, or None
        settings: Engine settings (minimum sample size)

    Returns:
        Adjusted estimate in whole minutes (at least 1), or the raw estimate
        when there is no record or too few observations

    Raises:
        InvalidDuration: If raw_minutes is not positive
    """
    if raw_minutes is None or raw_minutes <= 0:
        raise InvalidDuration(f"Duration must be positive, got {raw_minutes}", field="duration")

    settings = settings or DEFAULT_SETTINGS
    if record is None or record.total_tasks_observed < settings.min_learning_samples:
        return raw_minutes

    return max(1, round(raw_minutes * record.average_ratio))


def adjusted_duration_for(
    raw_minutes: int,
    category: Any,
    learning_data: Optional[Mapping[str, LearningRecord]],
    settings: Optional[SchedulerSettings] = None,
) -> Tuple[int, bool]:
    """Look up the category's record and adjust.

    Returns:
        Tuple of (adjusted_minutes, was_adjusted)
    """
    record = (learning_data or {}).get(category_key(category))
    adjusted = get_adjusted_duration(raw_minutes, record, settings)
    if adjusted != raw_minutes:
        logger.debug(f"Adjusted {category_key(category)} estimate {raw_minutes} -> {adjusted} min")
    return adjusted, adjusted != raw_minutes
