"""Task data model for capaplan."""

from datetime import date
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from capaplan.errors import InvalidDuration
from capaplan.models.constants import (
    CATEGORY_DEFAULT_DURATIONS,
    DEFAULT_DURATION_MINUTES,
    DEFAULT_QUADRANT,
)


class TaskStatus(str, Enum):
    """Task status enumeration."""
    OPEN = "open"
    COMPLETED = "completed"


class TaskCategory(str, Enum):
    """Task category enumeration (drives default duration, session size and preferred hours)."""
    TRANSCRIPTION = "transcription"
    PROOFREADING = "proofreading"
    TYPING = "typing"
    EMAIL = "email"
    COURSE = "course"
    CLIENT_COMMUNICATION = "client_communication"
    UNEXPECTED = "unexpected"
    SELFCARE = "selfcare"
    FAMILY = "family"
    REMINDERS = "reminders"
    OTHER = "other"


class Priority(str, Enum):
    """Explicit urgency level, urgent first."""
    URGENT = "urgent"
    HIGH = "high"
    NORMAL = "normal"
    LOW = "low"


def category_key(category: Any) -> str:
    """Return the plain string key for a category (enum member or value)."""
    if isinstance(category, Enum):
        return category.value
    return str(category) if category else TaskCategory.OTHER.value


def default_duration_for(category: Any) -> int:
    """Default estimated duration in minutes for a category."""
    return CATEGORY_DEFAULT_DURATIONS.get(category_key(category), DEFAULT_DURATION_MINUTES)


class Task(BaseModel):
    """Canonical Task model.

    A task with both ``due_date`` and ``due_time`` is anchored: it occupies
    ``[due_time, due_time + estimated_duration_min)`` on that date.
    """

    id: str = Field(..., description="Unique task identifier")
    title: str = Field(..., description="Task title")
    description: Optional[str] = Field(None, description="Task notes or description")
    category: TaskCategory = Field(TaskCategory.OTHER, description="Task category")
    estimated_duration_min: Optional[int] = Field(
        None, description="Estimated duration in minutes (category default when absent)"
    )
    priority: Priority = Field(Priority.NORMAL, description="Explicit urgency level")
    quadrant: int = Field(DEFAULT_QUADRANT, ge=1, le=4, description="Eisenhower quadrant (1=urgent+important)")
    due_date: Optional[date] = Field(None, description="Fixed calendar date")
    due_time: Optional[str] = Field(None, description="Fixed clock time (HH:MM)")
    deadline: Optional[date] = Field(None, description="Date the work must be finished by")
    status: TaskStatus = Field(TaskStatus.OPEN, description="Task status")
    time_spent_min: int = Field(0, ge=0, description="Minutes already logged against the task")
    reminder_sent: bool = Field(False, description="Whether a reminder was already sent")

    # Block linkage (set when the task is one session of a decomposed job)
    parent_task_id: Optional[str] = Field(None, description="Parent job id for generated blocks")
    block_index: Optional[int] = Field(None, ge=1, description="1-based block index within the parent job")
    total_blocks: Optional[int] = Field(None, ge=1, description="Number of blocks in the parent job")

    model_config = ConfigDict(use_enum_values=True)

    @model_validator(mode="before")
    @classmethod
    def _default_duration_from_category(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("estimated_duration_min") is None:
            data = {**data, "estimated_duration_min": default_duration_for(data.get("category"))}
        return data

    @field_validator("estimated_duration_min")
    @classmethod
    def _positive_duration(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value <= 0:
            raise InvalidDuration(f"Duration must be positive, got {value}", field="estimated_duration_min")
        return value

    @field_validator("due_time")
    @classmethod
    def _normalize_time(cls, value: Optional[str]) -> Optional[str]:
        # Imported here: the engine package imports this module.
        from capaplan.engine.timeutil import minutes_to_time, time_to_minutes

        minutes = time_to_minutes(value)
        if minutes is None:
            return None
        return minutes_to_time(minutes)

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    @property
    def is_anchored(self) -> bool:
        """True when the task has both a fixed date and a fixed clock time."""
        return self.due_date is not None and self.due_time is not None

    @property
    def duration(self) -> int:
        return self.estimated_duration_min or default_duration_for(self.category)
