"""
Plan Factory - turns a commit payload into a persisted-ready ImprovementPlan.
"""

import logging

from .config import MIN_DO_NEXT_COUNT
from .lifecycle import backfill_do_next
from .models import (
    CommitPayload,
    ImprovementPlan,
    OrderedSelection,
    PlanPlay,
    PlanStatus,
    PlayStatus,
    generate_id,
)
from .priority import intervention_type_for, priority_level

logger = logging.getLogger(__name__)

DEFAULT_PLAN_NAME = "Improvement Plan"


def default_plan_name(dimension_names) -> str:
    names = [n for n in dimension_names if n]
    if not names:
        return DEFAULT_PLAN_NAME
    if len(names) == 1:
        return f"Improve {names[0]}"
    if len(names) == 2:
        return f"Improve {names[0]} & {names[1]}"
    return f"Improve {names[0]} + {len(names) - 1} more"


def play_from_selection(selection: OrderedSelection, dimension_name: str) -> PlanPlay:
    rec = selection.recommendation
    return PlanPlay(
        id=generate_id("play"),
        title=rec.title,
        effort=rec.effort,
        impact=rec.impact,
        priority=selection.priority,
        priority_level=priority_level(rec.effort, rec.impact),
        status=PlayStatus.BACKLOG,
        source_dimension_key=selection.dimension_key,
        source_dimension_name=dimension_name,
        play_id=rec.id,
        description=rec.description,
        intervention_type=intervention_type_for(rec.category),
    )


def create_plan_from_commit(
    payload: CommitPayload,
    team_id: str,
    name: str | None = None,
    dimension_names: dict[str, str] | None = None,
    now: str | None = None,
    min_do_next: int = MIN_DO_NEXT_COUNT,
) -> ImprovementPlan:
    """
    Build an active plan with one backlog play per committed selection,
    then fill the do-next queue from the top of the backlog.

    ``dimension_names`` maps dimension keys to display names; keys are
    used when a name is missing.
    """
    names = dimension_names or {}
    created = now or payload.committed_at

    plays = tuple(
        play_from_selection(sel, names.get(sel.dimension_key, sel.dimension_key))
        for sel in payload.selections
    )
    plays = backfill_do_next(plays, min_do_next, created)

    if name is None:
        ordered_names = []
        for sel in payload.selections:
            dim_name = names.get(sel.dimension_key, sel.dimension_key)
            if dim_name not in ordered_names:
                ordered_names.append(dim_name)
        name = default_plan_name(ordered_names)

    plan = ImprovementPlan(
        id=generate_id("plan"),
        team_id=team_id,
        name=name,
        status=PlanStatus.ACTIVE,
        plays=plays,
        created_at=created,
        updated_at=created,
    )
    logger.info(f"Created plan {plan.id} for team {team_id} with {len(plays)} plays")
    return plan
