"""Pytest fixtures and configuration for capaplan tests."""

import uuid
from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from capaplan.config import SchedulerSettings
from capaplan.models.task import Task, TaskStatus, TaskCategory, Priority


# 2026-10-18 is a Sunday, the first day of the default Sunday-Thursday work week.
SUNDAY = date(2026, 10, 18)


@pytest.fixture
def settings():
    """Default engine settings, independent of the environment."""
    return SchedulerSettings()


@pytest.fixture
def work_day():
    """A working day (Sunday)."""
    return SUNDAY


@pytest.fixture
def next_day():
    """The working day after work_day (Monday)."""
    return SUNDAY + timedelta(days=1)


@pytest.fixture
def friday():
    """A non-working day in the default week."""
    return date(2026, 10, 23)


@pytest.fixture
def sample_task_base(work_day):
    """Base task data for creating test tasks.

    Returns a dict with default task attributes that can be overridden.
    """
    return {
        "id": str(uuid.uuid4()),
        "title": "Test Task",
        "description": "Test notes",
        "category": TaskCategory.OTHER,
        "estimated_duration_min": 30,
        "priority": Priority.NORMAL,
        "quadrant": 2,
        "due_date": None,
        "due_time": None,
        "deadline": None,
        "status": TaskStatus.OPEN,
        "time_spent_min": 0,
        "reminder_sent": False,
    }


@pytest.fixture
def make_task(sample_task_base):
    """Factory for tasks overriding the base attributes."""
    def _make(**overrides):
        return Task(**{**sample_task_base, "id": str(uuid.uuid4()), **overrides})
    return _make


@pytest.fixture
def sample_task(sample_task_base):
    """Create a sample Task object for testing."""
    return Task(**sample_task_base)


@pytest.fixture
def anchored_task(make_task, work_day):
    """A task fixed at 10:00 for 60 minutes on work_day."""
    return make_task(title="Anchored", due_date=work_day, due_time="10:00", estimated_duration_min=60)


@pytest.fixture
def completed_task(make_task, work_day):
    """A completed task on work_day (never counts as occupied)."""
    return make_task(
        title="Done", due_date=work_day, due_time="12:00", estimated_duration_min=60, status=TaskStatus.COMPLETED
    )


@pytest.fixture
def test_client():
    """Test client for the HTTP surface."""
    from capaplan.api.app import app
    return TestClient(app)
