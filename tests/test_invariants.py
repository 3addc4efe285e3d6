"""
Tests for the contract checks themselves.
"""

from dataclasses import replace

import pytest

from teamplan.builder import NextStep, open_wizard, reduce_all
from teamplan.commit import assemble_commit
from teamplan.contracts import (
    InvariantViolation,
    check_commit_priorities,
    check_dimension_priorities,
    check_do_next_floor,
    check_unique_play_ids,
    check_unique_play_priorities,
    enforce_invariants,
    enforce_invariants_strict,
    plan_invariants,
)
from teamplan.models import PlanStatus
from tests.fixtures import make_plan, make_play, scenario_dimensions


class TestWizardContracts:
    def test_unassigned_priorities_pass(self):
        check_dimension_priorities(open_wizard(scenario_dimensions()))

    def test_assigned_priorities_pass(self):
        check_dimension_priorities(reduce_all(open_wizard(scenario_dimensions()), [NextStep()]))

    def test_gap_fails(self):
        state = reduce_all(open_wizard(scenario_dimensions()), [NextStep()])
        dims = tuple(replace(d, priority=5) if d.priority == 1 else d for d in state.dimensions)

        with pytest.raises(InvariantViolation, match="permutation"):
            check_dimension_priorities(replace(state, dimensions=dims))

    def test_commit_priorities(self):
        payload = assemble_commit(reduce_all(open_wizard(scenario_dimensions()), [NextStep()]))
        check_commit_priorities(payload)

        with pytest.raises(InvariantViolation, match="Focus flag"):
            check_commit_priorities(payload, focus_count=0)


class TestPlanContracts:
    def test_floor_violation(self):
        plan = make_plan([make_play("a", "do-next", 0), make_play("b", "backlog", 1)])
        check_do_next_floor(plan, 1)

        with pytest.raises(InvariantViolation, match="floor is 2"):
            check_do_next_floor(plan, 2)

    def test_floor_capped_by_supply(self):
        check_do_next_floor(make_plan([make_play("a", "completed", 0)]), 2)

    def test_archived_plans_exempt(self):
        plan = make_plan([make_play("b", "backlog", 0)], status=PlanStatus.ARCHIVED)
        check_do_next_floor(plan)

    def test_duplicates(self):
        plan = make_plan([make_play("a", "do-next", 0), make_play("a", "do-next", 0)])

        with pytest.raises(InvariantViolation):
            check_unique_play_priorities(plan)
        with pytest.raises(InvariantViolation):
            check_unique_play_ids(plan)

    def test_enforce_collects_all(self):
        plan = make_plan([make_play("a", "backlog", 0), make_play("a", "backlog", 0)])
        violations = enforce_invariants(plan)

        assert len(violations) == 3
        assert all(v.startswith("INVARIANT_VIOLATION:") for v in violations)
        with pytest.raises(InvariantViolation):
            enforce_invariants_strict(plan)

    def test_clean_plan(self):
        plan = make_plan([make_play("a", "do-next", 0), make_play("b", "do-next", 1)])

        assert enforce_invariants(plan) == []

    def test_min_count_reaches_floor_check_only(self):
        plan = make_plan([make_play("a", "do-next", 0), make_play("b", "backlog", 1)])

        assert enforce_invariants(plan, min_count=1) == []
        assert len(enforce_invariants(plan, min_count=2)) == 1

    def test_plan_invariants_take_the_plan_alone(self):
        plan = make_plan([make_play("a", "do-next", 0), make_play("b", "do-next", 1)])

        for check in plan_invariants(min_count=3):
            check(plan)
