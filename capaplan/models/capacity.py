"""Capacity data models for capaplan."""

import datetime as dt
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from capaplan.models.task import Task


class FreeWindow(BaseModel):
    """A contiguous span of unscheduled time within a day's work hours."""

    start: int = Field(..., description="Window start (minutes from midnight)")
    end: int = Field(..., description="Window end (minutes from midnight)")
    duration: int = Field(..., description="Window length in minutes")

    @property
    def start_time(self) -> str:
        from capaplan.engine.timeutil import minutes_to_time

        return minutes_to_time(self.start)

    @property
    def end_time(self) -> str:
        from capaplan.engine.timeutil import minutes_to_time

        return minutes_to_time(self.end)


class CapacityDay(BaseModel):
    """Free/occupied time accounting for one calendar date.

    Always rebuilt from the source tasks; never updated in place.
    """

    date: dt.date = Field(..., description="Calendar date")
    day_name: str = Field(..., description="Weekday name")
    is_work_day: bool = Field(True, description="Whether the date is a working day")
    work_start: int = Field(..., description="Work window start (minutes from midnight)")
    work_end: int = Field(..., description="Work window end (minutes from midnight)")
    total_minutes: int = Field(..., description="Length of the work window")
    tasks: List[Task] = Field(default_factory=list, description="Non-completed tasks anchored to this date")
    occupied_minutes: int = Field(0, description="Sum of anchored task durations")
    free_minutes: int = Field(0, description="total_minutes - occupied_minutes, clamped at 0")
    free_windows: List[FreeWindow] = Field(default_factory=list, description="Free windows, earliest first")

    model_config = ConfigDict(use_enum_values=True)
