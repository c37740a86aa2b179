"""Tests for the task model and task factory."""

import pytest
from datetime import date
from pydantic import ValidationError

from capaplan.models.task import Task, TaskStatus, TaskCategory, Priority
from capaplan.models.task_factory import create_task


class TestTaskCreationDefaults:
    """Test that task creation uses correct default values."""

    def test_default_task_values(self, sample_task_base):
        task = Task(**sample_task_base)

        assert task.status == TaskStatus.OPEN
        assert task.estimated_duration_min == 30
        assert task.category == TaskCategory.OTHER
        assert task.priority == Priority.NORMAL
        assert task.quadrant == 2
        assert task.time_spent_min == 0
        assert task.reminder_sent is False
        assert task.is_completed is False
        assert task.is_anchored is False

    def test_missing_duration_uses_category_default(self, sample_task_base):
        task = Task(**{**sample_task_base, "category": TaskCategory.COURSE, "estimated_duration_min": None})
        assert task.estimated_duration_min == 90

        minimal = Task(id="t-1", title="Minimal")
        assert minimal.estimated_duration_min == 30

    @pytest.mark.parametrize("duration", [0, -5])
    def test_non_positive_duration_rejected(self, sample_task_base, duration):
        with pytest.raises(ValidationError):
            Task(**{**sample_task_base, "estimated_duration_min": duration})

    def test_time_normalized(self, sample_task_base):
        task = Task(**{**sample_task_base, "due_time": "9:05:00"})
        assert task.due_time == "09:05"

    def test_invalid_time_rejected(self, sample_task_base):
        with pytest.raises(ValidationError):
            Task(**{**sample_task_base, "due_time": "25:00"})

    def test_quadrant_bounds(self, sample_task_base):
        with pytest.raises(ValidationError):
            Task(**{**sample_task_base, "quadrant": 5})

    def test_anchored_needs_date_and_time(self, sample_task_base):
        dated = Task(**{**sample_task_base, "due_date": date(2026, 10, 18)})
        anchored = Task(**{**sample_task_base, "due_date": date(2026, 10, 18), "due_time": "10:00"})
        assert dated.is_anchored is False
        assert anchored.is_anchored is True

    def test_completed_status(self, sample_task_base):
        task = Task(**{**sample_task_base, "status": "completed"})
        assert task.is_completed is True

    def test_enums_stored_as_plain_values(self, sample_task_base):
        task = Task(**{**sample_task_base, "category": TaskCategory.EMAIL, "priority": Priority.HIGH})

        assert type(task.category) is str
        assert task.model_dump()["category"] == "email"
        assert task.model_dump()["priority"] == "high"

    def test_model_uses_config_dict(self):
        assert Task.model_config["use_enum_values"] is True


class TestCreateTask:
    def test_generates_unique_ids(self):
        first = create_task("One")
        second = create_task("Two")
        assert first.id != second.id

    def test_applies_category_defaults(self):
        task = create_task("Inbox", category=TaskCategory.EMAIL)
        assert task.estimated_duration_min == 25
        assert task.category == TaskCategory.EMAIL
        assert task.priority == Priority.NORMAL

    def test_overrides_win(self):
        task = create_task(
            "Call client",
            category=TaskCategory.CLIENT_COMMUNICATION,
            estimated_duration_min=15,
            priority=Priority.HIGH,
            quadrant=1,
            task_id="fixed-id",
        )
        assert task.id == "fixed-id"
        assert task.estimated_duration_min == 15
        assert task.priority == Priority.HIGH
        assert task.quadrant == 1
