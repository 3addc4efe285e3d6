"""
Plan Commit Assembler - flattens the final wizard state into an ordered payload.

Dimension priority is the primary key. Impact and effort only break ties
inside one dimension, never across dimension boundaries. Focus is the
top ``focus_count`` positions of the whole plan.
"""

import logging

from .config import FOCUS_COUNT
from .dimension_selector import prioritized_dimensions
from .action_selector import dimension_actions
from .models import ActionSelection, BuilderWizardState, CommitPayload, OrderedSelection, now_iso
from .priority import effort_rank, impact_rank

logger = logging.getLogger(__name__)


def _within_dimension_order(sel: ActionSelection) -> tuple[int, int]:
    return (impact_rank(sel.recommendation.impact), effort_rank(sel.recommendation.effort))


def ordered_actions(state: BuilderWizardState) -> list[ActionSelection]:
    """Selected actions in commit order, before priorities are assigned."""
    ordered: list[ActionSelection] = []
    for dim in prioritized_dimensions(state.dimensions):
        chosen = [s for s in dimension_actions(state, dim.dimension_key) if s.selected]
        ordered.extend(sorted(chosen, key=_within_dimension_order))
    return ordered


def assemble_commit(
    state: BuilderWizardState,
    committed_at: str | None = None,
    focus_count: int = FOCUS_COUNT,
) -> CommitPayload:
    """
    Build the commit payload.

    Final priority is the position in the concatenated order (0..k-1) and
    ``is_focus`` is ``priority < focus_count``. An empty selection gives
    an empty payload.
    """
    selections = tuple(
        OrderedSelection(
            recommendation_id=sel.recommendation_id,
            dimension_key=sel.dimension_key,
            zone_tag=sel.zone_tag,
            priority=position,
            is_focus=position < focus_count,
            recommendation=sel.recommendation,
        )
        for position, sel in enumerate(ordered_actions(state))
    )

    payload = CommitPayload(selections=selections, committed_at=committed_at or now_iso())
    logger.info(
        f"Assembled commit: {len(selections)} actions, "
        f"{sum(1 for s in selections if s.is_focus)} in focus"
    )
    return payload
