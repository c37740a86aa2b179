"""Historical duration learning record for capaplan.

Records are produced by an external learning service, one per task category.
The engine only reads them.
"""

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field


class LearningRecord(BaseModel):
    """How a category's real durations compared to the estimates."""

    total_tasks_observed: int = Field(0, ge=0, description="Number of completed tasks observed")
    average_ratio: float = Field(1.0, gt=0.0, description="Average actual/estimated duration ratio")
    total_actual_minutes: int = Field(0, ge=0, description="Sum of actual minutes across observed tasks")

    model_config = ConfigDict(use_enum_values=True)


# Category value -> learning record
LearningData = Dict[str, LearningRecord]
