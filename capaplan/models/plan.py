"""Result models returned by the capaplan engine.

Every engine decision is advisory: these are proposals the caller presents
and, on confirmation, asks the task store to persist.
"""

import datetime as dt
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from capaplan.models.block import Block
from capaplan.models.task import Task


class PlacementEntry(BaseModel):
    """One placed task or block."""

    item: Union[Task, Block] = Field(..., description="The placed task or block")
    date: dt.date = Field(..., description="Assigned date")
    start_time: str = Field(..., description="Assigned start (HH:MM)")
    end_time: str = Field(..., description="Assigned end (HH:MM)")
    duration: int = Field(..., description="Duration used for placement (after adjustment)")
    was_adjusted: bool = Field(False, description="Whether historical data changed the raw estimate")


class UnscheduledItem(BaseModel):
    """An item that could not be placed anywhere in the scanned range."""

    item: Union[Task, Block] = Field(..., description="The task or block left unplaced")
    required_minutes: int = Field(..., description="Duration that needed room")
    largest_window_minutes: int = Field(0, description="Largest residual window it was allowed to use")
    shortfall_minutes: int = Field(..., description="required_minutes - largest_window_minutes")
    reason: str = Field("no_capacity", description="Why the item was not placed")


class PlacementResult(BaseModel):
    """Output of priority placement."""

    scheduled: List[PlacementEntry] = Field(default_factory=list)
    unscheduled: List[UnscheduledItem] = Field(default_factory=list)


class SplitAnalysis(BaseModel):
    """Feasibility summary for a decomposed job."""

    raw_minutes: int = Field(..., description="Estimate as entered")
    required_minutes: int = Field(..., description="Estimate after historical adjustment")
    total_free_time: int = Field(..., description="Free window minutes between start date and deadline")
    scheduled_minutes: int = Field(0, description="Minutes placed into windows")
    remaining_minutes: int = Field(0, description="Minutes that could not be placed")
    has_enough_time: bool = Field(..., description="True when every block was placed")
    was_adjusted: bool = Field(False, description="True when the adjusted estimate differs from the raw one")
    block_cap: int = Field(..., description="Effective per-block maximum")
    days_used: List[dt.date] = Field(default_factory=list, description="Dates that received blocks")


class SplitResult(BaseModel):
    """Output of the block decomposer."""

    blocks: List[Block] = Field(default_factory=list, description="All blocks in order; unplaced ones have no date")
    analysis: SplitAnalysis


class SplitRecommendation(BaseModel):
    """Whether (and roughly how) a job should be split."""

    should_split: bool
    reason: str
    num_parts: int = 1
    avg_part_minutes: int = 0
    days_needed: int = 0
    available_work_days: Optional[int] = None
    has_enough_time: bool = True
    warning: Optional[str] = None


class FeasibilityReport(BaseModel):
    """Can a given amount of work fit into a date range at all."""

    feasible: bool
    total_free_minutes: int
    required_minutes: int
    utilization_percent: int


class MovableTask(BaseModel):
    """A deferral candidate with its score."""

    task: Task
    movability: float = Field(..., description="Ease of deferral, 1 (hard) .. 5 (easy)")
    freed_minutes: int = Field(..., description="Minutes freed by deferring this task")


class DeferralPlan(BaseModel):
    """Ranked deferral candidates for freeing capacity on a date."""

    tasks_to_move: List[MovableTask] = Field(default_factory=list)
    freed_minutes: int = 0
    required_minutes: int = 0
    sufficient: bool = False


class RescheduleChange(BaseModel):
    """One proposed deferral."""

    task_id: str
    task_title: str
    from_date: Optional[dt.date] = None
    to_date: dt.date
    duration: int
    reason: str


class UrgentPlacement(BaseModel):
    """Where the urgent task lands."""

    task: Task
    date: dt.date
    start_time: Optional[str] = Field(None, description="First free slot after deferrals, if one exists")


class ReschedulePlan(BaseModel):
    """Plan for inserting an urgent task, possibly deferring others."""

    success: bool
    needs_reschedule: bool
    message: str
    changes: List[RescheduleChange] = Field(default_factory=list)
    freed_minutes: int = 0
    required_minutes: int = 0
    urgent_placement: Optional[UrgentPlacement] = None
    warnings: List[str] = Field(default_factory=list)


class ProposedMove(BaseModel):
    """Concrete new slot for a task being moved out of the way."""

    task: Task
    from_date: Optional[dt.date] = None
    new_date: dt.date
    new_time: Optional[str] = None


class DayLoad(BaseModel):
    """How full a single day is."""

    date: dt.date
    total_scheduled: int
    available: int
    overbooked: bool
    overbook_amount: int = 0
    utilization_percent: int = 0
    tasks: List[Task] = Field(default_factory=list)


class BalanceSuggestion(BaseModel):
    """Move one task from an overloaded day to an under-used one."""

    task: Task
    from_date: dt.date
    to_date: dt.date
    reason: str


class WeeklyBalance(BaseModel):
    """Weekly load overview with balancing suggestions."""

    days: List[DayLoad] = Field(default_factory=list)
    overloaded_days: int = 0
    underutilized_days: int = 0
    suggestions: List[BalanceSuggestion] = Field(default_factory=list)
    is_balanced: bool = True


class DailyRescheduleItem(BaseModel):
    """Suggestion for one unfinished task."""

    task: Task
    suggested_date: dt.date
    keep_today: bool


class DailyRescheduleSummary(BaseModel):
    """End-of-day roll-forward suggestions."""

    has_unfinished: bool
    count: int = 0
    urgent_count: int = 0
    can_move_count: int = 0
    total_minutes: int = 0
    suggestions: List[DailyRescheduleItem] = Field(default_factory=list)


class SlotCandidate(BaseModel):
    """A proposed placement to check for overlaps."""

    id: Optional[str] = Field(None, description="Id of the task being moved, excluded from the check")
    date: dt.date = Field(..., description="Proposed date")
    time: Optional[str] = Field(None, description="Proposed start (HH:MM)")
    duration: int = Field(30, gt=0, description="Proposed length in minutes")


class ConflictReport(BaseModel):
    """Overlaps for a proposed placement, plus the next free slot that day."""

    has_conflict: bool
    overlapping: List[Task] = Field(default_factory=list)
    next_free_slot: Optional[str] = Field(None, description="First gap that fits the duration (HH:MM)")
