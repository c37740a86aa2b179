"""FastAPI web application for capaplan.

A stateless adapter over the engine: each request brings its own task
snapshot and gets a proposal back. Nothing is stored between requests.
"""

import logging
from datetime import timedelta
from typing import List

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from capaplan.api.schemas import (
    CapacityRequest,
    ConflictRequest,
    DayLoadRequest,
    DeferralRequest,
    ScheduleRequest,
    SplitRequest,
    SplitResponse,
    UrgentRescheduleRequest,
)
from capaplan.config import DEFAULT_SETTINGS
from capaplan.engine.capacity import analyze_capacity, check_day_load
from capaplan.engine.conflicts import check_conflicts
from capaplan.engine.movability import find_movable_tasks
from capaplan.engine.rescheduler import reschedule_for_urgent_task
from capaplan.engine.scheduler import schedule_by_priority
from capaplan.engine.splitter import blocks_to_tasks, split_and_schedule
from capaplan.errors import SchedulingInputError
from capaplan.models.capacity import CapacityDay
from capaplan.models.plan import ConflictReport, DayLoad, DeferralPlan, PlacementResult, ReschedulePlan

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="capaplan API",
    description="Capacity-aware placement, splitting and rescheduling of personal tasks",
    version="0.1.0"
)


@app.exception_handler(SchedulingInputError)
async def scheduling_input_error_handler(request: Request, exc: SchedulingInputError):
    """Malformed input raised by the engine becomes a 400."""
    logger.info(f"Rejected {request.url.path}: {exc}")
    return JSONResponse(status_code=400, content={"detail": str(exc), "field": exc.field})


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}


@app.post("/capacity", response_model=List[CapacityDay])
async def capacity(request: CapacityRequest):
    """Per-day free and occupied time."""
    return analyze_capacity(request.tasks, request.start_date, request.end_date, request.max_days)


@app.post("/schedule", response_model=PlacementResult)
async def schedule(request: ScheduleRequest):
    """Place every pending task (no date or no time) by priority.

    Capacity and placement come from the same snapshot; dated tasks without
    a time keep the span capacity analysis already holds for them.
    """
    days = analyze_capacity(request.tasks, request.start_date, request.end_date)
    pending = [t for t in request.tasks if not t.is_completed and not t.is_anchored]
    result = schedule_by_priority(pending, days, request.learning_data)
    logger.info(f"Placed {len(result.scheduled)} tasks, {len(result.unscheduled)} left unscheduled")
    return result


@app.post("/split", response_model=SplitResponse)
async def split(request: SplitRequest):
    """Decompose a long job into sessions and place them."""
    job = request.job
    max_days = DEFAULT_SETTINGS.capacity_horizon_days
    if job.deadline is not None:
        max_days = max(1, (job.deadline - job.start_date + timedelta(days=1)).days)
    days = analyze_capacity(request.tasks, job.start_date, job.deadline, max_days)

    result = split_and_schedule(job, days, request.learning_data, max_blocks_per_day=request.max_blocks_per_day)
    return SplitResponse(result=result, tasks=blocks_to_tasks(result.blocks, job))


@app.post("/conflicts", response_model=ConflictReport)
async def conflicts(request: ConflictRequest):
    """Overlapping tasks for a proposed slot, plus the next free slot."""
    return check_conflicts(request.candidate, request.tasks)


@app.post("/deferrals", response_model=DeferralPlan)
async def deferrals(request: DeferralRequest):
    """Most movable tasks to defer for the required minutes."""
    return find_movable_tasks(request.tasks, request.date, request.required_minutes, today=request.today)


@app.post("/reschedule/urgent", response_model=ReschedulePlan)
async def reschedule_urgent(request: UrgentRescheduleRequest):
    """Plan room for an urgent task."""
    return reschedule_for_urgent_task(
        request.urgent_task,
        request.tasks,
        target_date=request.target_date,
        allow_partial=request.allow_partial,
        today=request.today,
        lookahead_days=request.lookahead_days,
    )


@app.post("/day-load", response_model=DayLoad)
async def day_load(request: DayLoadRequest):
    """Committed minutes against the work window for one day."""
    return check_day_load(request.tasks, request.date)


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8000)
