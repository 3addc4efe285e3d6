"""
Shared Pydantic request/response models for the plan API.

Request models carry the wire (camelCase) names of the engine's
serialized shapes through ``alias`` so clients post the same keys they
read back.

Usage:
    from api.response_models import PlanResponse, ListResponse

    @router.get("/endpoint", response_model=PlanResponse)
    async def my_endpoint(): ...
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def require_field(value, field: str, event_type: str):
    """Return an event field the wire model left optional; ValueError when absent."""
    if value is None:
        raise ValueError(f"{event_type} requires {field}")
    return value


# ==== Envelopes ====


class ListResponse(BaseModel):
    """Standard list endpoint response."""

    items: list[Any] = Field(default_factory=list, description="Result items")
    total: int = Field(description="Total count")


class MutationResponse(BaseModel):
    """Standard mutation result."""

    success: bool = Field(description="Whether the operation succeeded")

    model_config = {"extra": "allow"}


class HealthResponse(BaseModel):
    """Health check result."""

    status: str = Field(description="healthy or error")
    timestamp: str = Field(description="ISO timestamp")


class DetailResponse(BaseModel):
    """Single serialized engine record; shape follows the record's to_dict()."""

    model_config = {"extra": "allow"}


# ==== Builder ====


class BuilderEventRequest(BaseModel):
    """
    One wizard event.

    ``type`` is one of: goToStep, nextStep, prevStep, toggleDimension,
    selectAllRecommended, deselectAll, reorderDimensions, toggleAction,
    selectAllInDimension, deselectAllInDimension, reset.
    """

    model_config = ConfigDict(populate_by_name=True)

    type: str = Field(..., description="Event name")
    step: int | None = None
    dimension_key: str | None = Field(default=None, alias="dimensionKey")
    recommendation_id: str | None = Field(default=None, alias="recommendationId")
    from_index: int | None = Field(default=None, alias="fromIndex")
    to_index: int | None = Field(default=None, alias="toIndex")


class BuilderRequest(BaseModel):
    """Diagnostic dimensions plus the wizard events to replay over them."""

    dimensions: list[dict[str, Any]] = Field(
        default_factory=list, description="Serialized Dimension records"
    )
    events: list[BuilderEventRequest] = Field(default_factory=list)


class BuilderCommitRequest(BuilderRequest):
    model_config = ConfigDict(populate_by_name=True)

    team_id: str = Field(..., alias="teamId")
    name: str | None = None
    committed_at: str | None = Field(default=None, alias="committedAt")


class BuilderPreviewResponse(BaseModel):
    step: dict[str, Any]
    state: dict[str, Any]
    summary: dict[str, Any]


class BuilderCommitResponse(BaseModel):
    commit: dict[str, Any]
    plan: dict[str, Any]


# ==== Plans ====


class PlanEventRequest(BaseModel):
    """
    One lifecycle event.

    ``type`` is one of: setPlayStatus, movePlay, reorderPlays, setPlayNotes,
    addTask, setTaskStatus, deleteTask, ensureDoNextQueue.
    """

    model_config = ConfigDict(populate_by_name=True)

    type: str = Field(..., description="Event name")
    play_id: str | None = Field(default=None, alias="playId")
    task_id: str | None = Field(default=None, alias="taskId")
    status: str | None = None
    source_column: str | None = Field(default=None, alias="sourceColumn")
    source_index: int | None = Field(default=None, alias="sourceIndex")
    dest_column: str | None = Field(default=None, alias="destColumn")
    dest_index: int = Field(default=0, alias="destIndex")
    ordered_play_ids: list[str] | None = Field(default=None, alias="orderedPlayIds")
    notes: str | None = None
    title: str | None = None


class PlanEventResponse(BaseModel):
    changed: bool = Field(description="False when the event was a no-op")
    plan: dict[str, Any]


class PlanProgressResponse(BaseModel):
    total: int
    backlog: int
    doNext: int
    inProgress: int
    completed: int
    skipped: int
    completionPercentage: int
