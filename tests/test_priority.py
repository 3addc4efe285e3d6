"""
Tests for priority derivation and the canonical pick-next-work order.
"""

from teamplan.models import InterventionType, Level, PlayStatus
from teamplan.priority import (
    intervention_type_for,
    is_quick_win,
    pick_next_work_key,
    priority_level,
    sort_plays_for_work,
    summarize_levels,
)
from tests.fixtures import make_play, rec


class TestPriorityLevel:
    """Priority level from effort and impact."""

    def test_high_impact_low_effort_is_high(self):
        assert priority_level(Level.LOW, Level.HIGH) == Level.HIGH
        assert priority_level(Level.MEDIUM, Level.HIGH) == Level.HIGH

    def test_high_impact_high_effort_is_medium(self):
        assert priority_level(Level.HIGH, Level.HIGH) == Level.MEDIUM

    def test_medium_impact_is_medium(self):
        for effort in Level:
            assert priority_level(effort, Level.MEDIUM) == Level.MEDIUM

    def test_low_impact_is_low(self):
        for effort in Level:
            assert priority_level(effort, Level.LOW) == Level.LOW


class TestInterventionType:
    def test_governance_maps_to_process(self):
        assert intervention_type_for("governance") == InterventionType.PROCESS

    def test_direct_categories_pass_through(self):
        assert intervention_type_for("culture") == InterventionType.CULTURE
        assert intervention_type_for("tooling") == InterventionType.TOOLING

    def test_unknown_defaults_to_process(self):
        assert intervention_type_for(None) == InterventionType.PROCESS
        assert intervention_type_for("mystery") == InterventionType.PROCESS


class TestQuickWin:
    def test_only_low_effort_high_impact(self):
        assert is_quick_win(rec("a", "low", "high"))
        assert not is_quick_win(rec("b", "low", "medium"))
        assert not is_quick_win(rec("c", "medium", "high"))


class TestPickNextWork:
    """Priority level first, then effort, then the priority number."""

    def test_level_beats_priority_number(self):
        high = make_play("high", priority=9, effort="low", impact="high")
        low = make_play("low", priority=0, effort="low", impact="low")
        assert sort_plays_for_work([low, high])[0].id == "high"

    def test_effort_breaks_level_ties(self):
        # Both medium level: medium impact at high vs low effort
        hard = make_play("hard", priority=0, effort="high", impact="medium")
        easy = make_play("easy", priority=5, effort="low", impact="medium")
        assert [p.id for p in sort_plays_for_work([hard, easy])] == ["easy", "hard"]

    def test_priority_number_breaks_remaining_ties(self):
        a = make_play("a", priority=3)
        b = make_play("b", priority=1)
        assert [p.id for p in sort_plays_for_work([a, b])] == ["b", "a"]

    def test_key_shape(self):
        play = make_play("x", status=PlayStatus.BACKLOG.value, priority=4, effort="low", impact="high")
        assert pick_next_work_key(play) == (0, 0, 4)


class TestSummarizeLevels:
    def test_empty_is_medium(self):
        assert summarize_levels([]) == Level.MEDIUM

    def test_thresholds(self):
        assert summarize_levels([Level.LOW, Level.MEDIUM]) == Level.LOW  # 1.5
        assert summarize_levels([Level.MEDIUM, Level.HIGH]) == Level.MEDIUM  # 2.5
        assert summarize_levels([Level.HIGH, Level.HIGH, Level.MEDIUM]) == Level.HIGH
