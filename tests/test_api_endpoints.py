"""Integration tests for API endpoints.

These tests verify API endpoints work correctly end-to-end. Every request
carries its own task snapshot.
"""

import pytest


SUNDAY = "2026-10-18"
MONDAY = "2026-10-19"


def _task(task_id, **fields):
    data = {"id": task_id, "title": f"Task {task_id}", "estimated_duration_min": 30}
    data.update(fields)
    return data


class TestHealth:
    def test_health(self, test_client):
        response = test_client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestCapacityEndpoint:
    def test_capacity_windows(self, test_client):
        response = test_client.post(
            "/capacity",
            json={
                "tasks": [_task("a", due_date=SUNDAY, due_time="10:00", estimated_duration_min=60)],
                "start_date": SUNDAY,
                "max_days": 2,
            },
        )
        assert response.status_code == 200
        days = response.json()
        assert [d["date"] for d in days] == [SUNDAY, MONDAY]
        assert days[0]["occupied_minutes"] == 60
        assert [(w["start"], w["end"]) for w in days[0]["free_windows"]] == [(480, 600), (660, 960)]

    def test_invalid_task_time_is_422(self, test_client):
        response = test_client.post(
            "/capacity",
            json={"tasks": [_task("a", due_date=SUNDAY, due_time="9am")], "start_date": SUNDAY},
        )
        assert response.status_code == 422


class TestScheduleEndpoint:
    def test_places_pending_tasks_only(self, test_client):
        tasks = [
            _task("anchored", due_date=SUNDAY, due_time="08:00", estimated_duration_min=60),
            _task("pending", estimated_duration_min=45, priority="high"),
            _task("done", status="completed"),
        ]
        response = test_client.post("/schedule", json={"tasks": tasks, "start_date": SUNDAY, "end_date": SUNDAY})

        assert response.status_code == 200
        data = response.json()
        assert len(data["scheduled"]) == 1
        entry = data["scheduled"][0]
        assert entry["item"]["id"] == "pending"
        assert (entry["date"], entry["start_time"], entry["end_time"]) == (SUNDAY, "09:00", "09:45")
        assert data["unscheduled"] == []

    def test_unscheduled_reported(self, test_client):
        tasks = [_task("big", estimated_duration_min=600)]
        response = test_client.post("/schedule", json={"tasks": tasks, "start_date": SUNDAY, "end_date": SUNDAY})

        data = response.json()
        assert data["scheduled"] == []
        assert data["unscheduled"][0]["shortfall_minutes"] == 120

    def test_dated_task_without_time_is_not_double_counted(self, test_client):
        tasks = [
            _task("dated", due_date=SUNDAY, estimated_duration_min=240),
            _task("floating", estimated_duration_min=180),
        ]
        response = test_client.post("/schedule", json={"tasks": tasks, "start_date": SUNDAY, "end_date": SUNDAY})

        data = response.json()
        assert data["unscheduled"] == []
        placed = {e["item"]["id"]: (e["start_time"], e["end_time"]) for e in data["scheduled"]}
        assert placed == {"dated": ("08:00", "12:00"), "floating": ("12:00", "15:00")}


class TestSplitEndpoint:
    def test_split_returns_blocks_and_tasks(self, test_client):
        job = {
            "id": "job-1",
            "title": "Course module",
            "total_minutes": 150,
            "category": "other",
            "start_date": SUNDAY,
            "deadline": "2026-10-20",
        }
        response = test_client.post("/split", json={"job": job})

        assert response.status_code == 200
        data = response.json()
        assert [b["duration"] for b in data["result"]["blocks"]] == [50, 50, 50]
        assert data["result"]["analysis"]["has_enough_time"] is True
        assert [t["title"] for t in data["tasks"]] == [
            "Course module (part 1/3)",
            "Course module (part 2/3)",
            "Course module (part 3/3)",
        ]
        assert all(t["parent_task_id"] == "job-1" for t in data["tasks"])

    def test_non_positive_total_is_400(self, test_client):
        job = {"title": "Empty", "total_minutes": 0, "start_date": SUNDAY}
        response = test_client.post("/split", json={"job": job})

        assert response.status_code == 400
        assert response.json()["field"] == "total_minutes"


class TestConflictEndpoint:
    def test_overlap_and_next_slot(self, test_client):
        response = test_client.post(
            "/conflicts",
            json={
                "candidate": {"date": SUNDAY, "time": "09:00", "duration": 30},
                "tasks": [_task("existing", due_date=SUNDAY, due_time="09:15")],
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["has_conflict"] is True
        assert [t["id"] for t in data["overlapping"]] == ["existing"]
        assert data["next_free_slot"] == "09:45"


class TestDeferralEndpoints:
    def test_deferrals(self, test_client):
        tasks = [
            _task("q1", quadrant=1, due_date=SUNDAY, estimated_duration_min=380),
            _task("q4", quadrant=4, due_date=SUNDAY, estimated_duration_min=60),
        ]
        response = test_client.post(
            "/deferrals", json={"tasks": tasks, "date": SUNDAY, "required_minutes": 50, "today": SUNDAY}
        )

        assert response.status_code == 200
        data = response.json()
        assert [m["task"]["id"] for m in data["tasks_to_move"]] == ["q4"]
        assert data["freed_minutes"] == 60
        assert data["sufficient"] is True

    def test_urgent_reschedule(self, test_client):
        tasks = [
            _task("q1", quadrant=1, due_date=SUNDAY, estimated_duration_min=380),
            _task("q4", quadrant=4, due_date=SUNDAY, estimated_duration_min=60),
        ]
        urgent = _task("urgent", priority="urgent", quadrant=1, estimated_duration_min=90)
        response = test_client.post(
            "/reschedule/urgent",
            json={"urgent_task": urgent, "tasks": tasks, "target_date": SUNDAY, "today": SUNDAY},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["needs_reschedule"] is True
        assert [(c["task_id"], c["to_date"]) for c in data["changes"]] == [("q4", MONDAY)]
        assert data["urgent_placement"]["date"] == SUNDAY

    @pytest.mark.parametrize("minutes,overbooked", [(300, False), (600, True)])
    def test_day_load(self, test_client, minutes, overbooked):
        response = test_client.post(
            "/day-load",
            json={"tasks": [_task("a", due_date=SUNDAY, estimated_duration_min=minutes)], "date": SUNDAY},
        )
        assert response.status_code == 200
        assert response.json()["overbooked"] is overbooked
