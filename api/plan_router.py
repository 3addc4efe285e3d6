"""
Plan API Router - REST endpoints for committed improvement plans.

Endpoints:
- GET /api/plans/{team_id} - list a team's plans, newest first
- GET /api/plans/plan/{plan_id} - one plan
- POST /api/plans/plan/{plan_id}/events - apply one lifecycle event
- POST /api/plans/plan/{plan_id}/archive - archive a plan
- DELETE /api/plans/plan/{plan_id} - delete a plan
- GET /api/plans/plan/{plan_id}/progress - status counts and completion

The engine treats unknown ids as no-ops; this boundary turns an unknown
plan id into a 404.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from api.response_models import (
    DetailResponse,
    ListResponse,
    MutationResponse,
    PlanEventRequest,
    PlanEventResponse,
    PlanProgressResponse,
    require_field,
)
from teamplan import lifecycle
from teamplan.models import ImprovementPlan, PlayStatus, TaskStatus
from teamplan.plan_service import PlanService
from teamplan.plan_store import PlanStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/plans", tags=["plans"])


def get_plan_store() -> PlanStore:
    """Plan store dependency; tests override it with an in-memory store."""
    return get_store()


def to_plan_event(req: PlanEventRequest) -> lifecycle.PlanEvent:
    """Map a request event onto a lifecycle event. Raises ValueError when malformed."""
    t = req.type
    if t == "setPlayStatus":
        return lifecycle.SetPlayStatus(
            require_field(req.play_id, "playId", t), PlayStatus(require_field(req.status, "status", t))
        )
    if t == "movePlay":
        return lifecycle.MovePlay(
            source_column=PlayStatus(require_field(req.source_column, "sourceColumn", t)),
            source_index=require_field(req.source_index, "sourceIndex", t),
            dest_column=PlayStatus(req.dest_column) if req.dest_column else None,
            dest_index=req.dest_index,
        )
    if t == "reorderPlays":
        return lifecycle.ReorderPlays(tuple(require_field(req.ordered_play_ids, "orderedPlayIds", t)))
    if t == "setPlayNotes":
        return lifecycle.SetPlayNotes(require_field(req.play_id, "playId", t), req.notes)
    if t == "addTask":
        return lifecycle.AddTask(require_field(req.play_id, "playId", t), require_field(req.title, "title", t))
    if t == "setTaskStatus":
        return lifecycle.SetTaskStatus(
            require_field(req.play_id, "playId", t),
            require_field(req.task_id, "taskId", t),
            TaskStatus(require_field(req.status, "status", t)),
        )
    if t == "deleteTask":
        return lifecycle.DeleteTask(
            require_field(req.play_id, "playId", t), require_field(req.task_id, "taskId", t)
        )
    if t == "ensureDoNextQueue":
        return lifecycle.EnsureDoNextQueue()
    raise ValueError(f"Unknown plan event type: {t!r}")


def _service_for(store: PlanStore, plan_id: str) -> tuple[PlanService, ImprovementPlan]:
    plan = store.load_by_id(plan_id)
    if plan is None:
        raise HTTPException(status_code=404, detail=f"Plan {plan_id} not found")
    service = PlanService(store, plan.team_id)
    return service, service.get(plan_id) or plan


# Endpoints


@router.get("/{team_id}", response_model=ListResponse)
async def list_plans(
    team_id: str,
    status: str | None = Query(default=None, description="active or archived"),
    store: PlanStore = Depends(get_plan_store),
):
    """List a team's plans, newest first."""
    service = PlanService(store, team_id)
    if status == "active":
        plans = service.active_plans
    elif status == "archived":
        plans = service.archived_plans
    elif status is None:
        plans = service.all_plans
    else:
        raise HTTPException(status_code=400, detail=f"Unknown status filter: {status}")
    return {"items": [p.to_dict() for p in plans], "total": len(plans)}


@router.get("/plan/{plan_id}", response_model=DetailResponse)
async def get_plan(plan_id: str, store: PlanStore = Depends(get_plan_store)):
    _, plan = _service_for(store, plan_id)
    return plan.to_dict()


@router.post("/plan/{plan_id}/events", response_model=PlanEventResponse)
async def apply_event(
    plan_id: str, request: PlanEventRequest, store: PlanStore = Depends(get_plan_store)
):
    """Apply one lifecycle event; ``changed`` is false for a no-op."""
    service, plan = _service_for(store, plan_id)
    try:
        event = to_plan_event(request)
    except ValueError as e:
        logger.error(f"Invalid plan event: {str(e)}")
        raise HTTPException(status_code=400, detail=str(e)) from e

    updated = service.apply(event, plan_id)
    return {"changed": updated is not plan, "plan": updated.to_dict()}


@router.post("/plan/{plan_id}/archive", response_model=DetailResponse)
async def archive_plan(plan_id: str, store: PlanStore = Depends(get_plan_store)):
    service, _ = _service_for(store, plan_id)
    return service.archive(plan_id).to_dict()


@router.delete("/plan/{plan_id}", response_model=MutationResponse)
async def delete_plan(plan_id: str, store: PlanStore = Depends(get_plan_store)):
    service, _ = _service_for(store, plan_id)
    return {"success": service.delete(plan_id), "plan_id": plan_id}


@router.get("/plan/{plan_id}/progress", response_model=PlanProgressResponse)
async def plan_progress(plan_id: str, store: PlanStore = Depends(get_plan_store)):
    _, plan = _service_for(store, plan_id)
    return lifecycle.plan_progress(plan).to_dict()
