"""Job and Block data models for capaplan.

A job is one long piece of work that the splitter decomposes into bounded
sessions (blocks). Accepted blocks are persisted as ordinary Task records
carrying the parent linkage.
"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from capaplan.models.constants import DEFAULT_BLOCK_MINUTES, DEFAULT_QUADRANT
from capaplan.models.task import Priority, TaskCategory


class JobSpec(BaseModel):
    """A long work item to decompose into sessions."""

    id: Optional[str] = Field(None, description="Parent task id, when the job already exists")
    title: str = Field(..., description="Job title")
    description: Optional[str] = Field(None, description="Job notes")
    total_minutes: int = Field(..., description="Total estimated work in minutes")
    category: TaskCategory = Field(TaskCategory.OTHER, description="Job category")
    priority: Priority = Field(Priority.NORMAL, description="Job priority")
    quadrant: int = Field(DEFAULT_QUADRANT, ge=1, le=4, description="Eisenhower quadrant")
    start_date: dt.date = Field(..., description="First date a session may be placed on")
    deadline: Optional[dt.date] = Field(None, description="Last date a session may be placed on")
    preferred_block_size: int = Field(DEFAULT_BLOCK_MINUTES, gt=0, description="Preferred session length")

    model_config = ConfigDict(use_enum_values=True)


class Block(BaseModel):
    """One bounded session of a decomposed job."""

    parent_task_id: Optional[str] = Field(None, description="Parent job id")
    parent_title: str = Field(..., description="Parent job title")
    category: TaskCategory = Field(TaskCategory.OTHER, description="Inherited category")
    priority: Priority = Field(Priority.NORMAL, description="Inherited priority")
    quadrant: int = Field(DEFAULT_QUADRANT, ge=1, le=4, description="Inherited quadrant")
    block_index: int = Field(..., ge=1, description="1-based block index")
    total_blocks: int = Field(..., ge=1, description="Number of blocks in the job")
    duration: int = Field(..., gt=0, description="Session length in minutes")
    date: Optional[dt.date] = Field(None, description="Assigned date (set after placement)")
    start_time: Optional[str] = Field(None, description="Assigned start (HH:MM)")
    end_time: Optional[str] = Field(None, description="Assigned end (HH:MM)")

    model_config = ConfigDict(use_enum_values=True)

    @property
    def is_placed(self) -> bool:
        return self.date is not None and self.start_time is not None

    @property
    def title(self) -> str:
        if self.total_blocks > 1:
            return f"{self.parent_title} (part {self.block_index}/{self.total_blocks})"
        return self.parent_title
