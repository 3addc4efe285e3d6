"""
Dimension Selector / Prioritizer

Wraps diagnostic dimensions with wizard fields and owns dimension
selection, the one-time priority assignment and drag reordering.

Selected-dimension priorities, once assigned, are always a gapless
permutation of 0..n-1; unselected dimensions carry no priority.
"""

import logging
from dataclasses import replace

from .action_selector import cascade_dimension
from .explanations import resolve_explanation
from .models import BuilderWizardState, Dimension, HealthStatus, SelectableDimension
from .priority import health_status_rank, is_quick_win
from .zones import display_risk_level, health_status

logger = logging.getLogger(__name__)

# Step at which dimension priorities become meaningful
PRIORITIZE_STEP = 1


def to_selectable(dim: Dimension) -> SelectableDimension:
    resolved = resolve_explanation(dim.dimension_key, dim.dimension_name)
    score = dim.score
    status = health_status(score)
    recommended = status != HealthStatus.ON_TRACK
    return SelectableDimension(
        dimension_key=dim.dimension_key,
        dimension_name=dim.dimension_name,
        explanation=resolved.explanation,
        explanation_generated=resolved.is_generated,
        health_score=score,
        health_status=status,
        risk_level=display_risk_level(score),
        trend=dim.trend,
        total_actions=len(dim.recommendations),
        quick_win_actions=sum(1 for r in dim.recommendations if is_quick_win(r)),
        is_selected=recommended,
        is_recommended=recommended,
    )


def build_selectable_dimensions(source) -> tuple[SelectableDimension, ...]:
    return tuple(to_selectable(dim) for dim in source)


def _priority_key(dim: SelectableDimension) -> float:
    return float("inf") if dim.priority is None else dim.priority


def prioritized_dimensions(dimensions) -> list[SelectableDimension]:
    """Selected dimensions in priority order; unassigned sort last, input order kept."""
    return sorted((d for d in dimensions if d.is_selected), key=_priority_key)


def _with_priorities(
    state: BuilderWizardState, ordered: list[SelectableDimension]
) -> BuilderWizardState:
    """Assign 0..n-1 over ``ordered``; every other dimension gets None."""
    ranks = {dim.dimension_key: rank for rank, dim in enumerate(ordered)}
    dimensions = tuple(
        replace(dim, priority=ranks.get(dim.dimension_key)) for dim in state.dimensions
    )
    if dimensions == state.dimensions:
        return state
    return replace(state, dimensions=dimensions)


def assign_initial_priorities(state: BuilderWizardState) -> BuilderWizardState:
    """Stable sort of selected dimensions by health status rank, most at-risk first."""
    selected = [d for d in state.dimensions if d.is_selected]
    ordered = sorted(selected, key=lambda d: health_status_rank(d.health_status))
    return _with_priorities(state, ordered)


def _close_priorities(state: BuilderWizardState) -> BuilderWizardState:
    # Before prioritization nothing is ranked; afterwards keep the ranks gapless.
    if state.current_step < PRIORITIZE_STEP:
        return state
    if all(d.priority is None for d in state.dimensions if d.is_selected):
        return assign_initial_priorities(state)
    return _with_priorities(state, prioritized_dimensions(state.dimensions))


def toggle_dimension(state: BuilderWizardState, dimension_key: str) -> BuilderWizardState:
    dim = state.dimension(dimension_key)
    if dim is None:
        logger.debug(f"toggle_dimension: unknown dimension {dimension_key!r}")
        return state

    selected = not dim.is_selected
    dimensions = tuple(
        replace(d, is_selected=selected, priority=None) if d.dimension_key == dimension_key else d
        for d in state.dimensions
    )
    state = replace(state, dimensions=dimensions)
    state = cascade_dimension(state, dimension_key, selected)
    return _close_priorities(state)


def _select_where(state: BuilderWizardState, predicate) -> BuilderWizardState:
    dimensions = tuple(
        replace(d, is_selected=predicate(d), priority=None) for d in state.dimensions
    )
    state = replace(state, dimensions=dimensions)
    for dim in dimensions:
        state = cascade_dimension(state, dim.dimension_key, dim.is_selected)
    return _close_priorities(state)


def select_all_recommended(state: BuilderWizardState) -> BuilderWizardState:
    """Overwrite: selected becomes exactly the recommended set."""
    return _select_where(state, lambda d: d.is_recommended)


def deselect_all(state: BuilderWizardState) -> BuilderWizardState:
    return _select_where(state, lambda d: False)


def reorder_dimensions(
    state: BuilderWizardState, from_index: int, to_index: int
) -> BuilderWizardState:
    """
    Splice-move within the priority-ordered selected list and renumber.

    Indices are clamped to the list bounds. An empty selection is a no-op.
    """
    ordered = prioritized_dimensions(state.dimensions)
    if not ordered:
        return state

    last = len(ordered) - 1
    from_index = min(max(from_index, 0), last)
    to_index = min(max(to_index, 0), last)

    moved = ordered.pop(from_index)
    ordered.insert(to_index, moved)
    return _with_priorities(state, ordered)
