"""
Action Selector

Derives one ActionSelection per recommendation and exposes the computed
summary the wizard renders. The dependency runs one way only: dimension
selection cascades into actions, action edits never touch dimensions.
"""

import logging
from dataclasses import dataclass, replace

from .models import (
    ActionSelection,
    BuilderWizardState,
    Dimension,
    Level,
    SelectableDimension,
)
from .priority import impact_rank, is_quick_win, summarize_levels
from .zones import classify_zone, trend_change

logger = logging.getLogger(__name__)


def build_selections(
    source: tuple[Dimension, ...],
    dimensions: tuple[SelectableDimension, ...],
) -> tuple[dict[str, ActionSelection], dict[str, tuple[str, ...]]]:
    """
    Build the action table and the dimension -> selection-id index.

    Each action starts selected iff its dimension is selected. The zone
    tag is computed once here from the dimension's score and trend.
    """
    selected_keys = {d.dimension_key for d in dimensions if d.is_selected}
    selections: dict[str, ActionSelection] = {}
    index: dict[str, tuple[str, ...]] = {}

    for dim in source:
        zone = classify_zone(dim.score, trend_change(dim.trend_data))
        ids: list[str] = []
        for rec in dim.recommendations:
            selection_id = rec.id
            if selection_id in selections:
                selection_id = f"{dim.dimension_key}/{rec.id}"
                logger.warning(
                    f"Duplicate recommendation id {rec.id!r}; keyed as {selection_id!r}"
                )
            selections[selection_id] = ActionSelection(
                recommendation_id=rec.id,
                dimension_key=dim.dimension_key,
                zone_tag=zone,
                recommendation=rec,
                selected=dim.dimension_key in selected_keys,
            )
            ids.append(selection_id)
        index[dim.dimension_key] = index.get(dim.dimension_key, ()) + tuple(ids)

    return selections, index


def set_selected(
    state: BuilderWizardState, selection_ids, selected: bool
) -> BuilderWizardState:
    """Set ``selected`` on the given selections; unknown ids are ignored."""
    changed = {}
    for sid in selection_ids:
        sel = state.selections.get(sid)
        if sel is not None and sel.selected != selected:
            changed[sid] = replace(sel, selected=selected)

    if not changed:
        return state

    selections = dict(state.selections)
    selections.update(changed)
    return replace(state, selections=selections)


def cascade_dimension(
    state: BuilderWizardState, dimension_key: str, selected: bool
) -> BuilderWizardState:
    return set_selected(state, state.dimension_index.get(dimension_key, ()), selected)


def toggle_action(state: BuilderWizardState, selection_id: str) -> BuilderWizardState:
    sel = state.selections.get(selection_id)
    if sel is None:
        logger.debug(f"toggle_action: unknown selection {selection_id!r}")
        return state
    return set_selected(state, (selection_id,), not sel.selected)


def select_all_in_dimension(state: BuilderWizardState, dimension_key: str) -> BuilderWizardState:
    return cascade_dimension(state, dimension_key, True)


def deselect_all_in_dimension(
    state: BuilderWizardState, dimension_key: str
) -> BuilderWizardState:
    return cascade_dimension(state, dimension_key, False)


def dimension_actions(state: BuilderWizardState, dimension_key: str) -> list[ActionSelection]:
    return [state.selections[sid] for sid in state.dimension_index.get(dimension_key, ())]


# =============================================================================
# COMPUTED VIEW
# =============================================================================


@dataclass(frozen=True)
class SelectionSummary:
    """Derived wizard figures, recomputed from the state on every call."""

    selected_dimension_count: int
    recommended_dimension_count: int
    prioritized_dimensions: tuple[SelectableDimension, ...]
    available_action_count: int
    selected_action_count: int
    quick_win_count: int
    selected_quick_win_count: int
    selected_items: tuple[ActionSelection, ...]
    effort_summary: Level
    impact_summary: Level
    actions_by_dimension: dict[str, tuple[ActionSelection, ...]]

    def to_dict(self) -> dict:
        return {
            "selectedDimensionCount": self.selected_dimension_count,
            "recommendedDimensionCount": self.recommended_dimension_count,
            "prioritizedDimensions": [d.to_dict() for d in self.prioritized_dimensions],
            "availableActionCount": self.available_action_count,
            "selectedActionCount": self.selected_action_count,
            "quickWinCount": self.quick_win_count,
            "selectedQuickWinCount": self.selected_quick_win_count,
            "selectedItems": [s.to_dict() for s in self.selected_items],
            "effortSummary": self.effort_summary.value,
            "impactSummary": self.impact_summary.value,
            "actionsByDimension": {
                key: [s.to_dict() for s in actions]
                for key, actions in self.actions_by_dimension.items()
            },
        }


def _review_order(sel: ActionSelection) -> tuple[int, int]:
    # Quick wins first, then by impact
    return (0 if is_quick_win(sel.recommendation) else 1, impact_rank(sel.recommendation.impact))


def summarize(state: BuilderWizardState) -> SelectionSummary:
    from .dimension_selector import prioritized_dimensions

    prioritized = prioritized_dimensions(state.dimensions)

    available: list[ActionSelection] = []
    for dim in prioritized:
        available.extend(dimension_actions(state, dim.dimension_key))
    selected_items = [s for s in available if s.selected]

    actions_by_dimension = {
        dim.dimension_key: tuple(
            sorted(dimension_actions(state, dim.dimension_key), key=_review_order)
        )
        for dim in prioritized
    }

    return SelectionSummary(
        selected_dimension_count=len(prioritized),
        recommended_dimension_count=sum(1 for d in state.dimensions if d.is_recommended),
        prioritized_dimensions=tuple(prioritized),
        available_action_count=len(available),
        selected_action_count=len(selected_items),
        quick_win_count=sum(1 for s in available if is_quick_win(s.recommendation)),
        selected_quick_win_count=sum(1 for s in selected_items if is_quick_win(s.recommendation)),
        selected_items=tuple(selected_items),
        effort_summary=summarize_levels([s.recommendation.effort for s in selected_items]),
        impact_summary=summarize_levels([s.recommendation.impact for s in selected_items]),
        actions_by_dimension=actions_by_dimension,
    )
