"""
Tests for the plan commit assembler.

Covers:
- Dimension priority as the primary key, impact/effort within a dimension
- Global focus flags
- Empty selections
"""

from teamplan.action_selector import toggle_action
from teamplan.builder import NextStep, ReorderDimensions, open_wizard, reduce_all
from teamplan.commit import assemble_commit
from teamplan.contracts import check_commit_priorities
from teamplan.dimension_selector import deselect_all, toggle_dimension
from tests.fixtures import dimension, rec, scenario_dimensions


def prioritized_all(dims=None):
    state = toggle_dimension(open_wizard(dims or scenario_dimensions()), "gamma")
    return reduce_all(state, [NextStep()])


class TestAssembleCommit:
    """Ordering and numbering of committed selections."""

    def test_dimension_order_then_impact(self):
        payload = assemble_commit(prioritized_all(), committed_at="2026-01-15T10:00:00.000Z")

        assert [s.recommendation_id for s in payload.selections] == [
            "alpha-quick",
            "alpha-hard",
            "beta-quick",
            "beta-hard",
            "gamma-quick",
            "gamma-hard",
        ]
        assert [s.priority for s in payload.selections] == [0, 1, 2, 3, 4, 5]
        assert payload.committed_at == "2026-01-15T10:00:00.000Z"

    def test_focus_is_global_top_three(self):
        payload = assemble_commit(prioritized_all())

        assert [s.is_focus for s in payload.selections] == [True, True, True, False, False, False]
        check_commit_priorities(payload)

    def test_focus_count_is_configurable(self):
        payload = assemble_commit(prioritized_all(), focus_count=1)

        assert [s.is_focus for s in payload.selections][:2] == [True, False]
        check_commit_priorities(payload, focus_count=1)

    def test_effort_breaks_impact_ties(self):
        dims = [
            dimension(
                "d",
                20,
                [rec("hard-high", "high", "high"), rec("easy-high", "low", "high"), rec("mid", "low", "medium")],
            )
        ]
        payload = assemble_commit(reduce_all(open_wizard(dims), [NextStep()]))

        assert [s.recommendation_id for s in payload.selections] == ["easy-high", "hard-high", "mid"]

    def test_impact_never_crosses_dimension_boundary(self):
        # beta has the only high-impact action but ranks second
        dims = [
            dimension("alpha", 10, [rec("a-low", "low", "low")]),
            dimension("beta", 40, [rec("b-high", "low", "high")]),
        ]
        payload = assemble_commit(reduce_all(open_wizard(dims), [NextStep()]))

        assert [s.dimension_key for s in payload.selections] == ["alpha", "beta"]

    def test_follows_reordered_dimensions(self):
        state = reduce_all(prioritized_all(), [ReorderDimensions(2, 0)])
        payload = assemble_commit(state)

        assert [s.dimension_key for s in payload.selections][:2] == ["gamma", "gamma"]

    def test_deselected_actions_are_left_out(self):
        state = prioritized_all()
        sid = "beta-quick"

        payload = assemble_commit(toggle_action(state, sid))

        assert sid not in [s.recommendation_id for s in payload.selections]
        assert [s.priority for s in payload.selections] == [0, 1, 2, 3, 4]

    def test_empty_selection_gives_empty_payload(self):
        payload = assemble_commit(deselect_all(open_wizard(scenario_dimensions())))

        assert payload.selections == ()
        assert payload.committed_at
        check_commit_priorities(payload)

    def test_payload_carries_recommendation_and_zone(self):
        payload = assemble_commit(prioritized_all())
        first = payload.selections[0]

        assert first.recommendation.title == "Action alpha-quick"
        assert first.to_dict()["zoneTag"] == "urgent"
