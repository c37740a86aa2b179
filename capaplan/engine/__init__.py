"""Scheduling engine for capaplan."""

from capaplan.engine.timeutil import time_to_minutes, minutes_to_time, overlaps, format_minutes
from capaplan.engine.duration import get_adjusted_duration
from capaplan.engine.capacity import analyze_capacity, check_day_load
from capaplan.engine.ranking import rank_for_placement
from capaplan.engine.scheduler import schedule_by_priority
from capaplan.engine.splitter import split_and_schedule, get_split_recommendation
from capaplan.engine.conflicts import find_overlapping_tasks, find_next_free_slot
from capaplan.engine.movability import calculate_movability, find_movable_tasks
from capaplan.engine.rescheduler import reschedule_for_urgent_task

__all__ = [
    "time_to_minutes",
    "minutes_to_time",
    "overlaps",
    "format_minutes",
    "get_adjusted_duration",
    "analyze_capacity",
    "check_day_load",
    "rank_for_placement",
    "schedule_by_priority",
    "split_and_schedule",
    "get_split_recommendation",
    "find_overlapping_tasks",
    "find_next_free_slot",
    "calculate_movability",
    "find_movable_tasks",
    "reschedule_for_urgent_task",
]
