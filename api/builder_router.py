"""
Builder API Router - stateless endpoints over the plan builder wizard.

The wizard state is session-scoped, so the client posts the diagnostic
dimensions together with the events it has applied; the server replays
them and returns the resulting state.

Endpoints:
- POST /api/builder/preview - wizard state and computed summary
- POST /api/builder/commit - commit the wizard and save the new plan
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from api.plan_router import get_plan_store
from api.response_models import (
    BuilderCommitRequest,
    BuilderCommitResponse,
    BuilderEventRequest,
    BuilderPreviewResponse,
    BuilderRequest,
    require_field,
)
from teamplan import builder
from teamplan.models import BuilderWizardState
from teamplan.plan_service import PlanService
from teamplan.plan_store import PlanStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/builder", tags=["builder"])


def to_builder_event(req: BuilderEventRequest) -> builder.BuilderEvent:
    """Map a request event onto a wizard event. Raises ValueError when malformed."""
    t = req.type
    if t == "goToStep":
        return builder.GoToStep(require_field(req.step, "step", t))
    if t == "nextStep":
        return builder.NextStep()
    if t == "prevStep":
        return builder.PrevStep()
    if t == "toggleDimension":
        return builder.ToggleDimension(require_field(req.dimension_key, "dimensionKey", t))
    if t == "selectAllRecommended":
        return builder.SelectAllRecommended()
    if t == "deselectAll":
        return builder.DeselectAll()
    if t == "reorderDimensions":
        return builder.ReorderDimensions(
            require_field(req.from_index, "fromIndex", t), require_field(req.to_index, "toIndex", t)
        )
    if t == "toggleAction":
        return builder.ToggleAction(require_field(req.recommendation_id, "recommendationId", t))
    if t == "selectAllInDimension":
        return builder.SelectAllInDimension(require_field(req.dimension_key, "dimensionKey", t))
    if t == "deselectAllInDimension":
        return builder.DeselectAllInDimension(require_field(req.dimension_key, "dimensionKey", t))
    if t == "reset":
        return builder.Reset()
    raise ValueError(f"Unknown builder event type: {t!r}")


def replay(request: BuilderRequest) -> BuilderWizardState:
    try:
        dimensions = builder.dimensions_from_dicts(request.dimensions)
        events = [to_builder_event(e) for e in request.events]
    except (KeyError, TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=f"Invalid builder request: {e}") from e
    return builder.reduce_all(builder.open_wizard(dimensions), events)


@router.post("/preview", response_model=BuilderPreviewResponse)
async def preview(request: BuilderRequest):
    """Replay the events and return the wizard state with its summary."""
    state = replay(request)
    step = builder.step_info(state)
    return {
        "step": {"index": step.index, "title": step.title, "description": step.description},
        "state": state.to_dict(),
        "summary": builder.summarize(state).to_dict(),
    }


@router.post("/commit", response_model=BuilderCommitResponse)
async def commit(request: BuilderCommitRequest, store: PlanStore = Depends(get_plan_store)):
    """Replay, commit and persist a new plan for the team."""
    service = PlanService(store, request.team_id)
    state = replay(request)
    state = builder.reduce(state, builder.Commit(request.committed_at, service.focus_count))

    plan = service.commit_wizard(state, name=request.name)
    logger.info(f"Committed builder wizard into plan {plan.id}")
    return {"commit": state.last_commit.to_dict(), "plan": plan.to_dict()}
