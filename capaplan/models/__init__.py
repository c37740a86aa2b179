"""Data models for capaplan."""

from capaplan.models.task import Task, TaskStatus, TaskCategory, Priority
from capaplan.models.learning import LearningRecord, LearningData
from capaplan.models.block import JobSpec, Block
from capaplan.models.capacity import CapacityDay, FreeWindow
from capaplan.models.plan import (
    PlacementEntry,
    PlacementResult,
    UnscheduledItem,
    SplitResult,
    SplitAnalysis,
    DeferralPlan,
    MovableTask,
    ReschedulePlan,
    RescheduleChange,
    SlotCandidate,
)

__all__ = [
    "Task",
    "TaskStatus",
    "TaskCategory",
    "Priority",
    "LearningRecord",
    "LearningData",
    "JobSpec",
    "Block",
    "CapacityDay",
    "FreeWindow",
    "PlacementEntry",
    "PlacementResult",
    "UnscheduledItem",
    "SplitResult",
    "SplitAnalysis",
    "DeferralPlan",
    "MovableTask",
    "ReschedulePlan",
    "RescheduleChange",
    "SlotCandidate",
]
