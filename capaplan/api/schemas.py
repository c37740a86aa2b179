"""Request/response models for the planning endpoints.

Every request carries its own task snapshot; the service keeps no state.
"""

import datetime as dt
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from capaplan.models.block import JobSpec
from capaplan.models.learning import LearningRecord
from capaplan.models.plan import SlotCandidate, SplitResult
from capaplan.models.task import Task


class CapacityRequest(BaseModel):
    """Request model for capacity analysis."""
    tasks: List[Task] = Field(default_factory=list, description="Current task snapshot")
    start_date: dt.date = Field(..., description="First day to analyze")
    end_date: Optional[dt.date] = Field(None, description="Last day to analyze (inclusive)")
    max_days: Optional[int] = Field(None, gt=0, description="Maximum number of days")


class ScheduleRequest(BaseModel):
    """Request model for priority placement."""
    tasks: List[Task] = Field(default_factory=list, description="Current task snapshot")
    start_date: dt.date = Field(..., description="First day to place into")
    end_date: Optional[dt.date] = Field(None, description="Last day to place into (inclusive)")
    learning_data: Dict[str, LearningRecord] = Field(default_factory=dict, description="Per-category learning records")


class SplitRequest(BaseModel):
    """Request model for block decomposition."""
    job: JobSpec
    tasks: List[Task] = Field(default_factory=list, description="Current task snapshot")
    learning_data: Dict[str, LearningRecord] = Field(default_factory=dict)
    max_blocks_per_day: Optional[int] = Field(None, gt=0, description="Override of the per-day block limit")


class SplitResponse(BaseModel):
    """Response for block decomposition."""
    result: SplitResult
    tasks: List[Task] = Field(default_factory=list, description="Blocks in persisted task shape")


class ConflictRequest(BaseModel):
    """Request model for overlap checks."""
    candidate: SlotCandidate
    tasks: List[Task] = Field(default_factory=list)


class DeferralRequest(BaseModel):
    """Request model for deferral selection."""
    tasks: List[Task] = Field(default_factory=list)
    date: dt.date
    required_minutes: int = Field(..., ge=0)
    today: Optional[dt.date] = None


class UrgentRescheduleRequest(BaseModel):
    """Request model for urgent insertion."""
    urgent_task: Task
    tasks: List[Task] = Field(default_factory=list)
    target_date: Optional[dt.date] = None
    allow_partial: bool = True
    today: Optional[dt.date] = None
    lookahead_days: Optional[int] = Field(None, gt=0)


class DayLoadRequest(BaseModel):
    """Request model for a single-day load check."""
    tasks: List[Task] = Field(default_factory=list)
    date: dt.date
