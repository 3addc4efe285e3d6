"""
Builder Wizard - the four-step flow that turns diagnostics into a plan.

The wizard is an explicit reducer: ``reduce(state, event)`` returns the
next immutable snapshot. Derived figures are never stored on the state;
``summarize`` recomputes them from the primitives on demand.

Usage:
    state = open_wizard(dimensions)
    state = reduce(state, NextStep())
    state = reduce(state, ReorderDimensions(2, 0))
    state = reduce(state, Commit())
    payload = state.last_commit
"""

import logging
from dataclasses import dataclass, replace

from . import action_selector, dimension_selector
from .action_selector import SelectionSummary, build_selections
from .commit import assemble_commit
from .models import BuilderWizardState, CommitPayload, Dimension

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuilderStep:
    index: int
    title: str
    description: str


BUILDER_STEPS: tuple[BuilderStep, ...] = (
    BuilderStep(0, "Select Areas", "Choose the dimensions you want to improve"),
    BuilderStep(1, "Prioritize", "Order the selected areas by importance"),
    BuilderStep(2, "Review Actions", "Pick the actions to include in your plan"),
    BuilderStep(3, "Launch", "Confirm and create your improvement plan"),
)

SELECT_STEP = 0
LAST_STEP = len(BUILDER_STEPS) - 1


# =============================================================================
# EVENTS
# =============================================================================


@dataclass(frozen=True)
class GoToStep:
    step: int


@dataclass(frozen=True)
class NextStep:
    pass


@dataclass(frozen=True)
class PrevStep:
    pass


@dataclass(frozen=True)
class ToggleDimension:
    dimension_key: str


@dataclass(frozen=True)
class SelectAllRecommended:
    pass


@dataclass(frozen=True)
class DeselectAll:
    pass


@dataclass(frozen=True)
class ReorderDimensions:
    from_index: int
    to_index: int


@dataclass(frozen=True)
class ToggleAction:
    recommendation_id: str


@dataclass(frozen=True)
class SelectAllInDimension:
    dimension_key: str


@dataclass(frozen=True)
class DeselectAllInDimension:
    dimension_key: str


@dataclass(frozen=True)
class Commit:
    committed_at: str | None = None
    focus_count: int | None = None


@dataclass(frozen=True)
class Reset:
    pass


BuilderEvent = (
    GoToStep
    | NextStep
    | PrevStep
    | ToggleDimension
    | SelectAllRecommended
    | DeselectAll
    | ReorderDimensions
    | ToggleAction
    | SelectAllInDimension
    | DeselectAllInDimension
    | Commit
    | Reset
)


# =============================================================================
# REDUCER
# =============================================================================


def open_wizard(dimensions) -> BuilderWizardState:
    """Fresh wizard at step 0 with the recommended dimensions pre-selected."""
    source = tuple(dimensions)
    selectable = dimension_selector.build_selectable_dimensions(source)
    selections, index = build_selections(source, selectable)
    logger.debug(
        f"Opened wizard: {len(selectable)} dimensions, {len(selections)} actions"
    )
    return BuilderWizardState(
        current_step=SELECT_STEP,
        dimensions=selectable,
        selections=selections,
        dimension_index=index,
        source=source,
    )


def _clamp_step(step: int) -> int:
    return min(max(step, SELECT_STEP), LAST_STEP)


def _go_to(state: BuilderWizardState, step: int) -> BuilderWizardState:
    step = _clamp_step(step)
    if step == state.current_step:
        return state
    leaving_selection = state.current_step == SELECT_STEP and step > SELECT_STEP
    state = replace(state, current_step=step)
    if leaving_selection:
        state = dimension_selector.assign_initial_priorities(state)
    return state


def _commit(state: BuilderWizardState, event: "Commit") -> BuilderWizardState:
    if event.focus_count is None:
        payload = assemble_commit(state, committed_at=event.committed_at)
    else:
        payload = assemble_commit(
            state, committed_at=event.committed_at, focus_count=event.focus_count
        )

    placed = {(s.dimension_key, s.recommendation_id): s for s in payload.selections}
    selections = {}
    for sid, sel in state.selections.items():
        ordered = placed.get((sel.dimension_key, sel.recommendation_id)) if sel.selected else None
        if ordered is None:
            selections[sid] = replace(sel, priority=None, is_focus=False)
        else:
            selections[sid] = replace(sel, priority=ordered.priority, is_focus=ordered.is_focus)

    return replace(state, selections=selections, is_complete=True, last_commit=payload)


def reduce(state: BuilderWizardState, event: BuilderEvent) -> BuilderWizardState:
    """Apply one wizard event. Unknown ids and out-of-range indices are no-ops."""
    if isinstance(event, GoToStep):
        return _go_to(state, event.step)
    if isinstance(event, NextStep):
        return _go_to(state, state.current_step + 1)
    if isinstance(event, PrevStep):
        return _go_to(state, state.current_step - 1)
    if isinstance(event, ToggleDimension):
        return dimension_selector.toggle_dimension(state, event.dimension_key)
    if isinstance(event, SelectAllRecommended):
        return dimension_selector.select_all_recommended(state)
    if isinstance(event, DeselectAll):
        return dimension_selector.deselect_all(state)
    if isinstance(event, ReorderDimensions):
        return dimension_selector.reorder_dimensions(state, event.from_index, event.to_index)
    if isinstance(event, ToggleAction):
        return action_selector.toggle_action(state, event.recommendation_id)
    if isinstance(event, SelectAllInDimension):
        return action_selector.select_all_in_dimension(state, event.dimension_key)
    if isinstance(event, DeselectAllInDimension):
        return action_selector.deselect_all_in_dimension(state, event.dimension_key)
    if isinstance(event, Commit):
        return _commit(state, event)
    if isinstance(event, Reset):
        return open_wizard(state.source)
    raise TypeError(f"Unknown builder event: {event!r}")


def reduce_all(state: BuilderWizardState, events) -> BuilderWizardState:
    for event in events:
        state = reduce(state, event)
    return state


def summarize(state: BuilderWizardState) -> SelectionSummary:
    return action_selector.summarize(state)


def commit_payload(state: BuilderWizardState) -> CommitPayload | None:
    return state.last_commit


def step_info(state: BuilderWizardState) -> BuilderStep:
    return BUILDER_STEPS[state.current_step]


def dimensions_from_dicts(items) -> list[Dimension]:
    return [Dimension.from_dict(item) for item in items]
