"""Tests for movability scoring and deferral selection."""

from datetime import timedelta

import pytest

from capaplan.engine.movability import calculate_movability, find_movable_tasks, movability_signals
from capaplan.models.task import TaskCategory, TaskStatus


class TestCalculateMovability:
    @pytest.mark.parametrize("quadrant,expected", [(1, 2.0), (2, 3.0), (3, 3.0), (4, 4.0)])
    def test_base_by_quadrant(self, make_task, work_day, quadrant, expected):
        assert calculate_movability(make_task(quadrant=quadrant), today=work_day) == expected

    def test_deadline_proximity_is_monotonic(self, make_task, work_day):
        today = calculate_movability(make_task(deadline=work_day), today=work_day)
        tomorrow = calculate_movability(make_task(deadline=work_day + timedelta(days=1)), today=work_day)
        later = calculate_movability(make_task(deadline=work_day + timedelta(days=5)), today=work_day)

        assert today < tomorrow < later
        assert (today, tomorrow, later) == (2.0, 2.5, 3.0)

    def test_each_signal_reduces(self, make_task, work_day):
        base = calculate_movability(make_task(quadrant=4), today=work_day)
        assert calculate_movability(make_task(quadrant=4, time_spent_min=10), today=work_day) == base - 0.5
        assert calculate_movability(make_task(quadrant=4, reminder_sent=True), today=work_day) == base - 0.5
        client = make_task(quadrant=4, category=TaskCategory.CLIENT_COMMUNICATION)
        assert calculate_movability(client, today=work_day) == base - 0.5

    def test_clamped_to_minimum(self, make_task, work_day):
        task = make_task(
            quadrant=1,
            deadline=work_day,
            time_spent_min=20,
            reminder_sent=True,
            category=TaskCategory.CLIENT_COMMUNICATION,
        )
        assert calculate_movability(task, today=work_day) == 1.0

    def test_signals_are_named(self, make_task, work_day):
        task = make_task(quadrant=3, reminder_sent=True, deadline=work_day + timedelta(days=1))
        names = [s.name for s in movability_signals(task, today=work_day)]
        assert names == ["quadrant", "deadline_tomorrow", "reminder_sent"]


class TestFindMovableTasks:
    def test_single_low_value_task_covers_deficit(self, make_task, work_day):
        # 90 min urgent task, 40 min free: deficit 50, one 60 min quadrant 4 task movable
        important = make_task(quadrant=1, due_date=work_day, due_time="08:00", estimated_duration_min=380)
        movable = make_task(quadrant=4, due_date=work_day, due_time="14:20", estimated_duration_min=60)

        plan = find_movable_tasks([important, movable], work_day, 50, today=work_day)

        assert [m.task.id for m in plan.tasks_to_move] == [movable.id]
        assert plan.freed_minutes == 60
        assert plan.sufficient is True
        assert plan.required_minutes == 50

    def test_quadrant_one_never_selected(self, make_task, work_day):
        tasks = [make_task(quadrant=1, due_date=work_day, estimated_duration_min=120) for _ in range(3)]
        plan = find_movable_tasks(tasks, work_day, 30, today=work_day)

        assert plan.tasks_to_move == []
        assert plan.freed_minutes == 0
        assert plan.sufficient is False

    def test_most_movable_first(self, make_task, work_day):
        q2 = make_task(title="q2", quadrant=2, due_date=work_day, estimated_duration_min=30)
        q4 = make_task(title="q4", quadrant=4, due_date=work_day, estimated_duration_min=30)
        q3_started = make_task(title="q3", quadrant=3, due_date=work_day, estimated_duration_min=30, time_spent_min=5)

        plan = find_movable_tasks([q2, q3_started, q4], work_day, 90, today=work_day)

        assert [m.task.title for m in plan.tasks_to_move] == ["q4", "q2", "q3"]
        assert [m.movability for m in plan.tasks_to_move] == [4.0, 3.0, 2.5]

    def test_stops_once_enough_is_freed(self, make_task, work_day):
        tasks = [make_task(quadrant=4, due_date=work_day, estimated_duration_min=30) for _ in range(4)]
        plan = find_movable_tasks(tasks, work_day, 45, today=work_day)

        assert len(plan.tasks_to_move) == 2
        assert plan.freed_minutes == 60

    def test_insufficient_candidates(self, make_task, work_day):
        task = make_task(quadrant=3, due_date=work_day, estimated_duration_min=20)
        plan = find_movable_tasks([task], work_day, 45, today=work_day)

        assert plan.freed_minutes == 20
        assert plan.sufficient is False

    def test_only_that_day_and_open_tasks(self, make_task, work_day):
        other_day = make_task(quadrant=4, due_date=work_day + timedelta(days=1))
        done = make_task(quadrant=4, due_date=work_day, status=TaskStatus.COMPLETED)
        plan = find_movable_tasks([other_day, done], work_day, 10, today=work_day)

        assert plan.tasks_to_move == []

    def test_zero_requirement_selects_nothing(self, make_task, work_day):
        plan = find_movable_tasks([make_task(quadrant=4, due_date=work_day)], work_day, 0, today=work_day)
        assert plan.tasks_to_move == []
        assert plan.sufficient is True
