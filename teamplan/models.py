"""
Team Plan - Domain Models

Enums, input records, wizard state and plan records shared by every
engine module. All records are frozen; reducers produce new instances
with ``dataclasses.replace``.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

logger = logging.getLogger(__name__)

# =============================================================================
# ID / TIME HELPERS
# =============================================================================


def generate_id(prefix: str = "") -> str:
    """Generate a unique ID with optional prefix."""
    uid = uuid.uuid4().hex[:16]
    if prefix:
        return f"{prefix}-{uid}"
    return uid


def now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _coerce(enum_cls, value, default):
    """Parse an enum value, falling back to ``default`` on unknown input."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        logger.debug(f"Unknown {enum_cls.__name__} value {value!r}, using {default}")
        return default


# =============================================================================
# ENUMS
# =============================================================================


class HealthStatus(StrEnum):
    """Display-facing health bucket of a dimension."""

    AT_RISK = "at-risk"
    NEEDS_ATTENTION = "needs-attention"
    ON_TRACK = "on-track"


class RiskLevel(StrEnum):
    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"


class TrendDirection(StrEnum):
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


class ZoneTag(StrEnum):
    """Nine-way urgency classification (risk tier x trend direction)."""

    CRITICAL = "critical"  # high risk, declining
    URGENT = "urgent"  # high risk, stable
    MOMENTUM = "momentum"  # high risk, improving
    PREVENT = "prevent"  # moderate risk, declining
    MONITOR = "monitor"  # moderate risk, stable
    PROGRESSING = "progressing"  # moderate risk, improving
    EARLY_WARNING = "early-warning"  # low risk, declining
    SUSTAIN = "sustain"  # low risk, stable
    CELEBRATE = "celebrate"  # low risk, improving


class Level(StrEnum):
    """Three-step scale used for effort, impact and play priority level."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RecommendationCategory(StrEnum):
    PROCESS = "process"
    TOOLING = "tooling"
    CULTURE = "culture"
    GOVERNANCE = "governance"


class InterventionType(StrEnum):
    PROCESS = "process"
    CULTURE = "culture"
    TOOLING = "tooling"


class PlayStatus(StrEnum):
    """
    Status of a play in an improvement plan.

    - backlog: prioritized, not yet scheduled
    - do-next: queued, ready to start
    - in-progress: being worked on
    - completed: done
    - skipped: decided not to do (plays are never deleted)
    """

    BACKLOG = "backlog"
    DO_NEXT = "do-next"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    SKIPPED = "skipped"


class TaskStatus(StrEnum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class PlanStatus(StrEnum):
    """
    Plan status. The engine only produces ACTIVE and ARCHIVED; the other
    values are accepted when loading plans written by other clients.
    """

    DRAFT = "draft"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    ARCHIVED = "archived"


# =============================================================================
# DIAGNOSTIC INPUT
# =============================================================================


@dataclass(frozen=True)
class TrendPoint:
    period: str
    value: float

    @classmethod
    def from_dict(cls, data: dict) -> "TrendPoint":
        return cls(period=str(data.get("period", "")), value=float(data.get("value") or 0.0))

    def to_dict(self) -> dict:
        return {"period": self.period, "value": self.value}


@dataclass(frozen=True)
class Recommendation:
    """One candidate intervention supplied with a dimension."""

    id: str
    title: str
    description: str = ""
    effort: Level = Level.MEDIUM
    impact: Level = Level.MEDIUM
    category: RecommendationCategory = RecommendationCategory.PROCESS

    @classmethod
    def from_dict(cls, data: dict) -> "Recommendation":
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            description=data.get("description", ""),
            effort=_coerce(Level, data.get("effort"), Level.MEDIUM),
            impact=_coerce(Level, data.get("impact"), Level.MEDIUM),
            category=_coerce(
                RecommendationCategory, data.get("category"), RecommendationCategory.PROCESS
            ),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "effort": self.effort.value,
            "impact": self.impact.value,
            "category": self.category.value,
        }


@dataclass(frozen=True)
class Dimension:
    """
    One measured aspect of team health, as delivered by the scoring pipeline.

    Read-only to this engine.
    """

    dimension_key: str
    dimension_name: str
    health_score: float | None = None
    trend: TrendDirection = TrendDirection.STABLE
    trend_data: tuple[TrendPoint, ...] = ()
    recommendations: tuple[Recommendation, ...] = ()
    overall_percentile: float | None = None

    @property
    def score(self) -> float:
        """Working score: health score, else legacy percentile, else 0."""
        if self.health_score is not None:
            return float(self.health_score)
        if self.overall_percentile is not None:
            return float(self.overall_percentile)
        return 0.0

    @classmethod
    def from_dict(cls, data: dict) -> "Dimension":
        return cls(
            dimension_key=data["dimensionKey"],
            dimension_name=data.get("dimensionName") or data["dimensionKey"],
            health_score=data.get("healthScore"),
            trend=_coerce(TrendDirection, data.get("trend"), TrendDirection.STABLE),
            trend_data=tuple(TrendPoint.from_dict(p) for p in data.get("trendData") or []),
            recommendations=tuple(
                Recommendation.from_dict(r) for r in data.get("recommendations") or []
            ),
            overall_percentile=data.get("overallPercentile"),
        )

    def to_dict(self) -> dict:
        return {
            "dimensionKey": self.dimension_key,
            "dimensionName": self.dimension_name,
            "healthScore": self.health_score,
            "overallPercentile": self.overall_percentile,
            "trend": self.trend.value,
            "trendData": [p.to_dict() for p in self.trend_data],
            "recommendations": [r.to_dict() for r in self.recommendations],
        }


# =============================================================================
# WIZARD STATE
# =============================================================================


@dataclass(frozen=True)
class Explanation:
    title: str
    what_it_means: str
    why_it_matters: str
    impact: str

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "whatItMeans": self.what_it_means,
            "whyItMatters": self.why_it_matters,
            "impact": self.impact,
        }


@dataclass(frozen=True)
class SelectableDimension:
    """A dimension wrapped with wizard-only selection and priority fields."""

    dimension_key: str
    dimension_name: str
    explanation: Explanation
    explanation_generated: bool
    health_score: float
    health_status: HealthStatus
    risk_level: RiskLevel
    trend: TrendDirection
    total_actions: int
    quick_win_actions: int
    is_selected: bool
    is_recommended: bool
    priority: int | None = None

    def to_dict(self) -> dict:
        return {
            "dimensionKey": self.dimension_key,
            "dimensionName": self.dimension_name,
            "explanation": self.explanation.to_dict(),
            "explanationGenerated": self.explanation_generated,
            "healthScore": self.health_score,
            "healthStatus": self.health_status.value,
            "riskLevel": self.risk_level.value,
            "trend": self.trend.value,
            "totalActions": self.total_actions,
            "quickWinActions": self.quick_win_actions,
            "isSelected": self.is_selected,
            "isRecommended": self.is_recommended,
            "priority": self.priority,
        }


@dataclass(frozen=True)
class ActionSelection:
    """
    One selectable action per recommendation.

    Dimension membership is fixed at creation; only ``selected`` and the
    post-commit ``priority``/``is_focus`` change afterwards.
    """

    recommendation_id: str
    dimension_key: str
    zone_tag: ZoneTag
    recommendation: Recommendation
    selected: bool
    priority: int | None = None
    is_focus: bool = False

    def to_dict(self) -> dict:
        return {
            "recommendationId": self.recommendation_id,
            "dimensionKey": self.dimension_key,
            "zoneTag": self.zone_tag.value,
            "recommendation": self.recommendation.to_dict(),
            "selected": self.selected,
            "priority": self.priority,
            "isFocus": self.is_focus,
        }


@dataclass(frozen=True)
class OrderedSelection:
    recommendation_id: str
    dimension_key: str
    zone_tag: ZoneTag
    priority: int
    is_focus: bool
    recommendation: Recommendation

    def to_dict(self) -> dict:
        return {
            "recommendationId": self.recommendation_id,
            "dimensionKey": self.dimension_key,
            "zoneTag": self.zone_tag.value,
            "priority": self.priority,
            "isFocus": self.is_focus,
            "recommendation": self.recommendation.to_dict(),
        }


@dataclass(frozen=True)
class CommitPayload:
    """Immutable result of committing the wizard."""

    selections: tuple[OrderedSelection, ...]
    committed_at: str

    def to_dict(self) -> dict:
        return {
            "selections": [s.to_dict() for s in self.selections],
            "committedAt": self.committed_at,
        }


@dataclass(frozen=True)
class BuilderWizardState:
    """
    Session-scoped wizard state.

    ``selections`` is the single action table keyed by selection id;
    ``dimension_index`` maps a dimension key to its selection ids so that
    cascades are direct lookups.
    """

    current_step: int
    dimensions: tuple[SelectableDimension, ...]
    selections: dict[str, ActionSelection]
    dimension_index: dict[str, tuple[str, ...]]
    source: tuple[Dimension, ...] = ()
    is_complete: bool = False
    last_commit: CommitPayload | None = None

    def dimension(self, dimension_key: str) -> SelectableDimension | None:
        for dim in self.dimensions:
            if dim.dimension_key == dimension_key:
                return dim
        return None

    def to_dict(self) -> dict:
        return {
            "currentStep": self.current_step,
            "dimensions": [d.to_dict() for d in self.dimensions],
            "selections": [s.to_dict() for s in self.selections.values()],
            "isComplete": self.is_complete,
        }


# =============================================================================
# PLAN RECORDS
# =============================================================================


@dataclass(frozen=True)
class PlanTask:
    id: str
    title: str
    status: TaskStatus = TaskStatus.PENDING
    created_at: str = field(default_factory=now_iso)
    completed_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "PlanTask":
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            status=_coerce(TaskStatus, data.get("status"), TaskStatus.PENDING),
            created_at=data.get("createdAt") or now_iso(),
            completed_at=data.get("completedAt"),
        )

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "status": self.status.value,
            "createdAt": self.created_at,
        }
        if self.completed_at:
            data["completedAt"] = self.completed_at
        return data


@dataclass(frozen=True)
class PlanPlay:
    """A play inside an improvement plan. Lower ``priority`` ranks first."""

    id: str
    title: str
    effort: Level
    impact: Level
    priority: int
    priority_level: Level
    status: PlayStatus
    source_dimension_key: str
    source_dimension_name: str
    tasks: tuple[PlanTask, ...] = ()
    play_id: str | None = None
    description: str = ""
    intervention_type: InterventionType = InterventionType.PROCESS
    notes: str | None = None
    started_at: str | None = None
    completed_at: str | None = None

    def find_task(self, task_id: str) -> PlanTask | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    @classmethod
    def from_dict(cls, data: dict) -> "PlanPlay":
        # Imported here to avoid a cycle: priority derives from model enums.
        from teamplan.priority import intervention_type_for, priority_level

        effort = _coerce(Level, data.get("effort"), Level.MEDIUM)
        impact = _coerce(Level, data.get("impact"), Level.MEDIUM)
        level = data.get("priorityLevel")
        priority_lvl = (
            _coerce(Level, level, priority_level(effort, impact))
            if level
            else priority_level(effort, impact)
        )
        intervention = data.get("interventionType")
        if intervention:
            intervention = _coerce(InterventionType, intervention, InterventionType.PROCESS)
        else:
            intervention = intervention_type_for(data.get("category"))

        return cls(
            id=data["id"],
            title=data.get("title", ""),
            effort=effort,
            impact=impact,
            priority=int(data.get("priority") or 0),
            priority_level=priority_lvl,
            status=_coerce(PlayStatus, data.get("status"), PlayStatus.BACKLOG),
            source_dimension_key=data.get("sourceDimensionKey", ""),
            source_dimension_name=data.get("sourceDimensionName", ""),
            tasks=tuple(PlanTask.from_dict(t) for t in data.get("tasks") or []),
            play_id=data.get("playId"),
            description=data.get("description", ""),
            intervention_type=intervention,
            notes=data.get("notes"),
            started_at=data.get("startedAt"),
            completed_at=data.get("completedAt"),
        )

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "effort": self.effort.value,
            "impact": self.impact.value,
            "priority": self.priority,
            "priorityLevel": self.priority_level.value,
            "status": self.status.value,
            "sourceDimensionKey": self.source_dimension_key,
            "sourceDimensionName": self.source_dimension_name,
            "tasks": [t.to_dict() for t in self.tasks],
            "playId": self.play_id,
            "description": self.description,
            "interventionType": self.intervention_type.value,
        }
        for key, value in (
            ("notes", self.notes),
            ("startedAt", self.started_at),
            ("completedAt", self.completed_at),
        ):
            if value is not None:
                data[key] = value
        return data


@dataclass(frozen=True)
class ImprovementPlan:
    id: str
    team_id: str
    name: str
    status: PlanStatus
    plays: tuple[PlanPlay, ...]
    created_at: str
    updated_at: str
    description: str | None = None

    @property
    def is_archived(self) -> bool:
        return self.status == PlanStatus.ARCHIVED

    def find_play(self, play_id: str) -> PlanPlay | None:
        for play in self.plays:
            if play.id == play_id:
                return play
        return None

    @classmethod
    def from_dict(cls, data: dict) -> "ImprovementPlan":
        created = data.get("createdAt") or now_iso()
        return cls(
            id=data["id"],
            team_id=data.get("teamId", ""),
            name=data.get("name", ""),
            status=_coerce(PlanStatus, data.get("status"), PlanStatus.ACTIVE),
            plays=tuple(PlanPlay.from_dict(p) for p in data.get("plays") or []),
            created_at=created,
            updated_at=data.get("updatedAt") or created,
            description=data.get("description"),
        )

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "id": self.id,
            "teamId": self.team_id,
            "name": self.name,
            "status": self.status.value,
            "plays": [p.to_dict() for p in self.plays],
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        if self.description is not None:
            data["description"] = self.description
        return data
