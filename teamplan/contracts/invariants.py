"""
Invariants Module - semantic correctness checks for wizard and plan state.

Each check raises InvariantViolation with a readable message. The
enforcement helpers run every plan-level check: ``enforce_invariants``
collects messages, ``enforce_invariants_strict`` fails fast.
"""

from functools import partial

from teamplan.config import FOCUS_COUNT, MIN_DO_NEXT_COUNT
from teamplan.models import BuilderWizardState, CommitPayload, ImprovementPlan, PlayStatus


class InvariantViolation(Exception):
    """Raised when a domain invariant is violated."""

    pass


# =============================================================================
# WIZARD INVARIANTS
# =============================================================================


def check_dimension_priorities(state: BuilderWizardState) -> None:
    """
    INVARIANT: once assigned, selected-dimension priorities are exactly
    0..n-1 and unselected dimensions carry none.

    Raises:
        InvariantViolation: On gaps, duplicates or a ranked unselected dimension
    """
    ranked_unselected = [
        d.dimension_key for d in state.dimensions if not d.is_selected and d.priority is not None
    ]
    if ranked_unselected:
        raise InvariantViolation(f"Unselected dimensions carry a priority: {ranked_unselected}")

    priorities = [d.priority for d in state.dimensions if d.is_selected]
    if all(p is None for p in priorities):
        return
    if None in priorities or sorted(priorities) != list(range(len(priorities))):
        raise InvariantViolation(
            f"Dimension priorities are not a permutation of 0..{len(priorities) - 1}: "
            f"{priorities}"
        )


def check_commit_priorities(payload: CommitPayload, focus_count: int = FOCUS_COUNT) -> None:
    """
    INVARIANT: commit priorities are 0..k-1 in payload order and focus is
    exactly the first ``focus_count`` positions.
    """
    priorities = [s.priority for s in payload.selections]
    if priorities != list(range(len(priorities))):
        raise InvariantViolation(f"Commit priorities out of sequence: {priorities}")

    wrong_focus = [s.priority for s in payload.selections if s.is_focus != (s.priority < focus_count)]
    if wrong_focus:
        raise InvariantViolation(f"Focus flag wrong at priorities {wrong_focus}")


# =============================================================================
# PLAN INVARIANTS
# =============================================================================


def check_do_next_floor(plan: ImprovementPlan, min_count: int = MIN_DO_NEXT_COUNT) -> None:
    """
    INVARIANT: do-next holds at least min(min_count, do-next + backlog) plays.

    Archived plans are frozen and exempt.
    """
    if plan.is_archived:
        return
    do_next = sum(1 for p in plan.plays if p.status == PlayStatus.DO_NEXT)
    backlog = sum(1 for p in plan.plays if p.status == PlayStatus.BACKLOG)
    floor = min(min_count, do_next + backlog)
    if do_next < floor:
        raise InvariantViolation(
            f"Plan {plan.id}: do-next has {do_next} plays, floor is {floor} "
            f"({backlog} in backlog)"
        )


def check_unique_play_priorities(plan: ImprovementPlan) -> None:
    """INVARIANT: no two plays in a plan share a priority number."""
    priorities = [p.priority for p in plan.plays]
    duplicates = sorted({n for n in priorities if priorities.count(n) > 1})
    if duplicates:
        raise InvariantViolation(f"Plan {plan.id}: duplicate play priorities {duplicates}")


def check_unique_play_ids(plan: ImprovementPlan) -> None:
    ids = [p.id for p in plan.plays]
    if len(ids) != len(set(ids)):
        raise InvariantViolation(f"Plan {plan.id}: duplicate play ids")


ALL_INVARIANTS = [
    check_do_next_floor,
    check_unique_play_priorities,
    check_unique_play_ids,
]


def plan_invariants(min_count: int = MIN_DO_NEXT_COUNT) -> list:
    """ALL_INVARIANTS as single-argument checks, with the do-next floor bound to ``min_count``."""
    return [
        partial(check, min_count=min_count) if check is check_do_next_floor else check
        for check in ALL_INVARIANTS
    ]


# =============================================================================
# ENFORCEMENT
# =============================================================================


def enforce_invariants(plan: ImprovementPlan, min_count: int = MIN_DO_NEXT_COUNT) -> list[str]:
    """
    Run all plan invariants. Returns list of violations.

    Returns:
        List of violation messages. Empty = pass.
    """
    violations = []

    for invariant in plan_invariants(min_count):
        try:
            invariant(plan)
        except InvariantViolation as e:
            violations.append(f"INVARIANT_VIOLATION: {str(e)}")

    return violations


def enforce_invariants_strict(plan: ImprovementPlan, min_count: int = MIN_DO_NEXT_COUNT) -> None:
    """
    Strict enforcement - raises on first violation.

    Raises:
        InvariantViolation: If any invariant fails
    """
    for invariant in plan_invariants(min_count):
        invariant(plan)
