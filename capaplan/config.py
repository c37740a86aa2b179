"""Engine configuration for capaplan.

Values come from the environment (optionally a local `.env`), falling back to
the defaults in `capaplan.models.constants`. Settings are immutable once loaded.
"""

import os
from dataclasses import dataclass, replace
from typing import Tuple

from dotenv import load_dotenv

from capaplan.models import constants

load_dotenv()


_WEEKDAY_NAMES = {
    "mon": 0,
    "tue": 1,
    "wed": 2,
    "thu": 3,
    "fri": 4,
    "sat": 5,
    "sun": 6,
}


@dataclass(frozen=True)
class SchedulerSettings:
    work_start_hour: int = constants.WORK_START_HOUR
    work_end_hour: int = constants.WORK_END_HOUR
    work_days: Tuple[int, ...] = constants.WORK_DAYS
    min_window_minutes: int = constants.MIN_WINDOW_MINUTES
    min_block_minutes: int = constants.MIN_BLOCK_MINUTES
    break_minutes: int = constants.BREAK_MINUTES
    max_blocks_per_day: int = constants.MAX_BLOCKS_PER_DAY
    reschedule_lookahead_days: int = constants.RESCHEDULE_LOOKAHEAD_DAYS
    min_learning_samples: int = constants.MIN_LEARNING_SAMPLES
    capacity_horizon_days: int = constants.CAPACITY_HORIZON_DAYS
    default_task_minutes: int = constants.DEFAULT_DURATION_MINUTES

    def __post_init__(self):
        if not 0 <= self.work_start_hour < self.work_end_hour <= 24:
            raise ValueError(
                f"Invalid work window {self.work_start_hour}-{self.work_end_hour}"
            )
        if not self.work_days:
            raise ValueError("At least one work day is required")
        if any(day not in range(7) for day in self.work_days):
            raise ValueError(f"Work days must be weekday numbers 0-6, got {self.work_days}")
        # Same shape as parse_work_days: sorted, no duplicates
        object.__setattr__(self, "work_days", tuple(sorted(set(self.work_days))))
        if self.break_minutes < 0:
            raise ValueError("break_minutes must not be negative")
        for name in (
            "min_window_minutes",
            "min_block_minutes",
            "max_blocks_per_day",
            "reschedule_lookahead_days",
            "capacity_horizon_days",
            "default_task_minutes",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")

    @property
    def work_start_minutes(self) -> int:
        return self.work_start_hour * 60

    @property
    def work_end_minutes(self) -> int:
        return self.work_end_hour * 60

    @property
    def work_minutes_per_day(self) -> int:
        return self.work_end_minutes - self.work_start_minutes

    def with_work_hours(self, start_hour: int, end_hour: int) -> "SchedulerSettings":
        return replace(self, work_start_hour=start_hour, work_end_hour=end_hour)


def parse_work_days(value: str) -> Tuple[int, ...]:
    """Parse a comma-separated weekday list (``sun,mon,tue``) into weekday numbers.

    Order and duplicates are normalized: the result is sorted Monday-first.
    """
    days = set()
    for token in value.split(","):
        token = token.strip().lower()[:3]
        if not token:
            continue
        if token not in _WEEKDAY_NAMES:
            raise ValueError(f"Unknown weekday: {token!r}")
        days.add(_WEEKDAY_NAMES[token])
    return tuple(sorted(days))


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def load_settings() -> SchedulerSettings:
    """Build settings from CAPAPLAN_* environment variables."""
    work_days_raw = os.getenv("CAPAPLAN_WORK_DAYS")
    work_days = parse_work_days(work_days_raw) if work_days_raw else constants.WORK_DAYS

    return SchedulerSettings(
        work_start_hour=_int_env("CAPAPLAN_WORK_START_HOUR", constants.WORK_START_HOUR),
        work_end_hour=_int_env("CAPAPLAN_WORK_END_HOUR", constants.WORK_END_HOUR),
        work_days=work_days,
        min_window_minutes=_int_env("CAPAPLAN_MIN_WINDOW_MINUTES", constants.MIN_WINDOW_MINUTES),
        min_block_minutes=_int_env("CAPAPLAN_MIN_BLOCK_MINUTES", constants.MIN_BLOCK_MINUTES),
        break_minutes=_int_env("CAPAPLAN_BREAK_MINUTES", constants.BREAK_MINUTES),
        max_blocks_per_day=_int_env("CAPAPLAN_MAX_BLOCKS_PER_DAY", constants.MAX_BLOCKS_PER_DAY),
        reschedule_lookahead_days=_int_env(
            "CAPAPLAN_RESCHEDULE_LOOKAHEAD_DAYS", constants.RESCHEDULE_LOOKAHEAD_DAYS
        ),
        min_learning_samples=_int_env("CAPAPLAN_MIN_LEARNING_SAMPLES", constants.MIN_LEARNING_SAMPLES),
        capacity_horizon_days=_int_env("CAPAPLAN_CAPACITY_HORIZON_DAYS", constants.CAPACITY_HORIZON_DAYS),
        default_task_minutes=_int_env("CAPAPLAN_DEFAULT_TASK_MINUTES", constants.DEFAULT_DURATION_MINUTES),
    )


# Loaded once at import; frozen, so safe to share between calls.
DEFAULT_SETTINGS = load_settings()
