"""Task creation factory for capaplan.

This module centralizes task creation logic so ids and category-driven
defaults are applied the same way everywhere (API intake, accepted blocks).
"""

import uuid
from datetime import date
from typing import Any, Dict, Optional

from capaplan.models.constants import DEFAULT_QUADRANT
from capaplan.models.task import Priority, Task, TaskCategory, TaskStatus, default_duration_for


def create_task_defaults(category: Any = TaskCategory.OTHER) -> Dict[str, Any]:
    """Get default task values as a dictionary.

    Args:
        category: Category whose default duration applies

    Returns:
        Dictionary with default task field values
    """
    return {
        "status": TaskStatus.OPEN,
        "category": category,
        "estimated_duration_min": default_duration_for(category),
        "priority": Priority.NORMAL,
        "quadrant": DEFAULT_QUADRANT,
        "time_spent_min": 0,
        "reminder_sent": False,
    }


def create_task(
    title: str,
    description: Optional[str] = None,
    category: Optional[TaskCategory] = None,
    estimated_duration_min: Optional[int] = None,
    priority: Optional[Priority] = None,
    quadrant: Optional[int] = None,
    due_date: Optional[date] = None,
    due_time: Optional[str] = None,
    deadline: Optional[date] = None,
    parent_task_id: Optional[str] = None,
    block_index: Optional[int] = None,
    total_blocks: Optional[int] = None,
    task_id: Optional[str] = None,
) -> Task:
    """Create a task with defaults, allowing overrides.

    Args:
        title: Task title (required)
        description: Task notes
        category: Task category (defaults to OTHER)
        estimated_duration_min: Estimate in minutes (defaults to the category's)
        priority: Priority level (defaults to NORMAL)
        quadrant: Eisenhower quadrant (defaults to 2)
        due_date: Fixed date
        due_time: Fixed clock time (HH:MM)
        deadline: Date the work must be finished by
        parent_task_id: Parent job id, for generated blocks
        block_index: 1-based block index, for generated blocks
        total_blocks: Block count of the parent job, for generated blocks
        task_id: Explicit id (a new UUID when omitted)

    Returns:
        Task object with defaults applied
    """
    defaults = create_task_defaults(category if category is not None else TaskCategory.OTHER)

    return Task(
        id=task_id or str(uuid.uuid4()),
        title=title,
        description=description,
        status=defaults["status"],
        category=defaults["category"],
        estimated_duration_min=(
            estimated_duration_min if estimated_duration_min is not None else defaults["estimated_duration_min"]
        ),
        priority=priority if priority is not None else defaults["priority"],
        quadrant=quadrant if quadrant is not None else defaults["quadrant"],
        due_date=due_date,
        due_time=due_time,
        deadline=deadline,
        time_spent_min=defaults["time_spent_min"],
        reminder_sent=defaults["reminder_sent"],
        parent_task_id=parent_task_id,
        block_index=block_index,
        total_blocks=total_blocks,
    )
