"""
Tests for the plan lifecycle reducer.

Covers:
- Status changes, timestamps and the do-next backfill
- Drag-and-drop moves across and within columns
- Play notes and the task sub-lifecycle
- Archiving and read-only archived plans
- Derived progress views
"""

import logging
from dataclasses import replace

from teamplan.contracts import check_do_next_floor
from teamplan.lifecycle import (
    AddTask,
    ArchivePlan,
    DeleteTask,
    EnsureDoNextQueue,
    MovePlay,
    ReorderPlays,
    SetPlayNotes,
    SetPlayStatus,
    SetTaskStatus,
    active_play_count,
    column,
    group_plays_by_status,
    has_active_plays,
    plan_progress,
    reduce_plan,
    reduce_plan_all,
    task_progress,
)
from teamplan.models import PlanStatus, PlanTask, PlayStatus, TaskStatus
from tests.fixtures import make_plan, make_play

NOW = "2026-02-01T09:00:00.000Z"
LATER = "2026-02-02T09:00:00.000Z"


def board():
    """Two do-next plays and three backlog plays with distinct priority levels."""
    return make_plan(
        [
            make_play("p1", "do-next", 0),
            make_play("p2", "do-next", 1),
            make_play("b1", "backlog", 2, effort="high", impact="high"),  # medium level
            make_play("b2", "backlog", 3, effort="low", impact="high"),  # high level
            make_play("b3", "backlog", 4, effort="low", impact="low"),  # low level
        ]
    )


def statuses(plan):
    return {p.id: p.status.value for p in plan.plays}


def do_next_ids(plan):
    return {p.id for p in plan.plays if p.status == PlayStatus.DO_NEXT}


# =============================================================================
# STATUS CHANGES
# =============================================================================


class TestSetPlayStatus:
    """Free status graph plus the do-next floor."""

    def test_leaving_do_next_promotes_best_backlog_play(self):
        plan = reduce_plan(board(), SetPlayStatus("p1", PlayStatus.COMPLETED), now=NOW)

        assert do_next_ids(plan) == {"p2", "b2"}
        assert plan.find_play("p1").completed_at == NOW
        check_do_next_floor(plan)

    def test_promotion_uses_level_then_effort(self):
        plan = reduce_plan(board(), SetPlayStatus("p1", PlayStatus.SKIPPED), now=NOW)
        plan = reduce_plan(plan, SetPlayStatus("p2", PlayStatus.SKIPPED), now=NOW)

        # b2 (high) first, then b1 (medium) ahead of b3 (low)
        assert do_next_ids(plan) == {"b2", "b1"}

    def test_entering_do_next_never_promotes(self):
        plan = reduce_plan(board(), SetPlayStatus("b3", PlayStatus.DO_NEXT), now=NOW)

        assert do_next_ids(plan) == {"p1", "p2", "b3"}
        assert statuses(plan)["b2"] == "backlog"

    def test_reopening_into_backlog_refills_empty_queue(self):
        plan = make_plan([make_play("a", "do-next", 0), make_play("b", "do-next", 1)])
        plan = reduce_plan_all(
            plan,
            [
                SetPlayStatus("a", PlayStatus.COMPLETED),
                SetPlayStatus("b", PlayStatus.COMPLETED),
                SetPlayStatus("a", PlayStatus.BACKLOG),
            ],
            now=NOW,
        )

        assert statuses(plan) == {"a": "do-next", "b": "completed"}
        check_do_next_floor(plan)

    def test_transition_between_other_columns_repairs_floor(self):
        plan = make_plan(
            [
                make_play("d", "do-next", 0),
                make_play("c", "completed", 1),
                make_play("b", "backlog", 2),
            ]
        )
        plan = reduce_plan(plan, SetPlayStatus("c", PlayStatus.SKIPPED), now=NOW)

        assert do_next_ids(plan) == {"d", "b"}
        check_do_next_floor(plan)

    def test_demoted_play_stays_in_backlog(self):
        plan = make_plan(
            [
                make_play("a", "do-next", 0, effort="low", impact="high"),
                make_play("b", "do-next", 1),
                make_play("c", "backlog", 2, effort="high", impact="low"),
            ]
        )
        plan = reduce_plan(plan, SetPlayStatus("a", PlayStatus.BACKLOG), now=NOW)

        assert plan.find_play("a").status == PlayStatus.BACKLOG
        assert do_next_ids(plan) == {"b", "c"}
        check_do_next_floor(plan)

    def test_demoting_the_only_supply_keeps_floor(self):
        plan = make_plan([make_play("a", "do-next", 0), make_play("b", "do-next", 1)])

        assert reduce_plan(plan, SetPlayStatus("a", PlayStatus.BACKLOG), now=NOW) is plan

    def test_no_backlog_supply_leaves_short_queue(self):
        plan = make_plan([make_play("a", "do-next", 0), make_play("b", "do-next", 1)])
        plan = reduce_plan(plan, SetPlayStatus("a", PlayStatus.COMPLETED), now=NOW)

        assert do_next_ids(plan) == {"b"}
        check_do_next_floor(plan)

    def test_started_at_set_once(self):
        plan = reduce_plan(board(), SetPlayStatus("p1", PlayStatus.IN_PROGRESS), now=NOW)
        plan = reduce_plan(plan, SetPlayStatus("p1", PlayStatus.DO_NEXT), now=LATER)
        plan = reduce_plan(plan, SetPlayStatus("p1", PlayStatus.IN_PROGRESS), now=LATER)

        assert plan.find_play("p1").started_at == NOW

    def test_completed_plays_can_be_reopened(self):
        plan = reduce_plan(board(), SetPlayStatus("p1", PlayStatus.COMPLETED), now=NOW)
        plan = reduce_plan(plan, SetPlayStatus("p1", PlayStatus.BACKLOG), now=LATER)

        assert statuses(plan)["p1"] == "backlog"

    def test_effective_change_bumps_updated_at(self):
        plan = reduce_plan(board(), SetPlayStatus("b3", PlayStatus.SKIPPED), now=NOW)

        assert plan.updated_at == NOW

    def test_same_status_returns_same_object(self):
        plan = board()

        assert reduce_plan(plan, SetPlayStatus("p1", PlayStatus.DO_NEXT), now=NOW) is plan

    def test_unknown_play_returns_same_object(self):
        plan = board()

        assert reduce_plan(plan, SetPlayStatus("ghost", PlayStatus.COMPLETED), now=NOW) is plan

    def test_min_do_next_is_configurable(self):
        plan = reduce_plan(
            board(), SetPlayStatus("p1", PlayStatus.COMPLETED), now=NOW, min_do_next=3
        )

        assert len(do_next_ids(plan)) == 3


# =============================================================================
# DRAG AND DROP
# =============================================================================


class TestMovePlay:
    """A completed drag is one atomic move."""

    def test_columns_follow_priority_number(self):
        assert [p.id for p in column(board(), PlayStatus.BACKLOG)] == ["b1", "b2", "b3"]

    def test_drop_outside_board_is_noop(self):
        plan = board()

        assert reduce_plan(plan, MovePlay(PlayStatus.DO_NEXT, 0, None), now=NOW) is plan

    def test_cross_column_move_changes_status_and_backfills(self):
        plan = reduce_plan(
            board(), MovePlay(PlayStatus.DO_NEXT, 0, PlayStatus.COMPLETED, 0), now=NOW
        )

        assert statuses(plan)["p1"] == "completed"
        assert do_next_ids(plan) == {"p2", "b2"}

    def test_dragging_do_next_play_to_backlog_sticks(self):
        plan = reduce_plan(
            board(), MovePlay(PlayStatus.DO_NEXT, 0, PlayStatus.BACKLOG, 0), now=NOW
        )

        assert statuses(plan)["p1"] == "backlog"
        assert do_next_ids(plan) == {"p2", "b2"}

    def test_cross_column_move_into_do_next_does_not_promote(self):
        plan = reduce_plan(
            board(), MovePlay(PlayStatus.BACKLOG, 2, PlayStatus.DO_NEXT, 0), now=NOW
        )

        assert do_next_ids(plan) == {"p1", "p2", "b3"}

    def test_same_column_move_renumbers_that_column_only(self):
        plan = reduce_plan(
            board(), MovePlay(PlayStatus.BACKLOG, 0, PlayStatus.BACKLOG, 2), now=NOW
        )

        priorities = {p.id: p.priority for p in plan.plays}
        # [b1, b2, b3] -> [b2, b3, b1] over the numbers {2, 3, 4}
        assert priorities == {"p1": 0, "p2": 1, "b2": 2, "b3": 3, "b1": 4}
        assert statuses(plan) == statuses(board())

    def test_drag_low_level_play_to_top_of_column(self):
        plan = reduce_plan(
            board(), MovePlay(PlayStatus.BACKLOG, 2, PlayStatus.BACKLOG, 0), now=NOW
        )

        assert [p.id for p in column(plan, PlayStatus.BACKLOG)] == ["b3", "b1", "b2"]

        # Promotion still picks by level, not by board position
        plan = reduce_plan(plan, SetPlayStatus("p1", PlayStatus.COMPLETED), now=NOW)
        assert do_next_ids(plan) == {"p2", "b2"}

    def test_same_column_same_index_is_noop(self):
        plan = board()

        move = MovePlay(PlayStatus.BACKLOG, 1, PlayStatus.BACKLOG, 1)
        assert reduce_plan(plan, move, now=NOW) is plan

    def test_source_index_out_of_range_is_noop(self):
        plan = board()

        move = MovePlay(PlayStatus.IN_PROGRESS, 0, PlayStatus.COMPLETED, 0)
        assert reduce_plan(plan, move, now=NOW) is plan

    def test_destination_index_is_clamped(self):
        plan = reduce_plan(
            board(), MovePlay(PlayStatus.BACKLOG, 0, PlayStatus.BACKLOG, 50), now=NOW
        )

        assert plan.find_play("b1").priority == 4


class TestReorderPlays:
    def test_redistributes_existing_numbers(self):
        plan = reduce_plan(board(), ReorderPlays(("b3", "b1")), now=NOW)

        assert plan.find_play("b3").priority == 2
        assert plan.find_play("b1").priority == 4
        assert plan.find_play("b2").priority == 3

    def test_mixed_statuses_are_rejected(self):
        plan = board()

        assert reduce_plan(plan, ReorderPlays(("p1", "b1")), now=NOW) is plan

    def test_unknown_id_is_noop(self):
        plan = board()

        assert reduce_plan(plan, ReorderPlays(("b1", "ghost")), now=NOW) is plan


# =============================================================================
# NOTES AND TASKS
# =============================================================================


class TestNotesAndTasks:
    """Tasks never change the parent play's status."""

    def test_set_notes(self):
        plan = reduce_plan(board(), SetPlayNotes("p1", "Pair with QA"), now=NOW)

        assert plan.find_play("p1").notes == "Pair with QA"
        assert reduce_plan(plan, SetPlayNotes("p1", "Pair with QA"), now=LATER) is plan

    def test_add_task(self):
        plan = reduce_plan(board(), AddTask("p1", "  Draft checklist ", task_id="t1"), now=NOW)
        task = plan.find_play("p1").find_task("t1")

        assert task.title == "Draft checklist"
        assert task.status == TaskStatus.PENDING
        assert task.created_at == NOW

    def test_add_task_generates_id(self):
        plan = reduce_plan(board(), AddTask("p1", "Draft"), now=NOW)

        assert plan.find_play("p1").tasks[0].id.startswith("task-")

    def test_blank_title_is_noop(self):
        plan = board()

        assert reduce_plan(plan, AddTask("p1", "   "), now=NOW) is plan

    def test_task_completion_timestamps(self):
        plan = reduce_plan(board(), AddTask("p1", "Draft", task_id="t1"), now=NOW)
        plan = reduce_plan(plan, SetTaskStatus("p1", "t1", TaskStatus.COMPLETED), now=LATER)
        task = plan.find_play("p1").find_task("t1")

        assert task.completed_at == LATER
        assert plan.find_play("p1").status == PlayStatus.DO_NEXT

        plan = reduce_plan(plan, SetTaskStatus("p1", "t1", TaskStatus.PENDING), now=LATER)
        assert plan.find_play("p1").find_task("t1").completed_at is None

    def test_unknown_task_is_noop(self):
        plan = board()

        assert reduce_plan(plan, SetTaskStatus("p1", "nope", TaskStatus.COMPLETED), now=NOW) is plan
        assert reduce_plan(plan, DeleteTask("p1", "nope"), now=NOW) is plan

    def test_delete_task(self):
        plan = reduce_plan(board(), AddTask("p1", "Draft", task_id="t1"), now=NOW)
        plan = reduce_plan(plan, DeleteTask("p1", "t1"), now=LATER)

        assert plan.find_play("p1").tasks == ()


# =============================================================================
# ARCHIVE
# =============================================================================


class TestArchive:
    def test_archive_flips_status_only(self):
        before = board()
        plan = reduce_plan(before, ArchivePlan(), now=NOW)

        assert plan.status == PlanStatus.ARCHIVED
        assert plan.updated_at == NOW
        assert plan.plays == before.plays

    def test_archive_twice_is_noop(self):
        plan = reduce_plan(board(), ArchivePlan(), now=NOW)

        assert reduce_plan(plan, ArchivePlan(), now=LATER) is plan

    def test_archived_plan_rejects_mutations(self, caplog):
        plan = reduce_plan(board(), ArchivePlan(), now=NOW)

        with caplog.at_level(logging.WARNING, logger="teamplan.lifecycle"):
            result = reduce_plan(plan, SetPlayStatus("p1", PlayStatus.COMPLETED), now=LATER)

        assert result is plan
        assert "archived plan" in caplog.text


class TestEnsureDoNextQueue:
    def test_initial_population(self):
        plan = make_plan([make_play(f"b{i}", "backlog", i) for i in range(3)])
        plan = reduce_plan(plan, EnsureDoNextQueue(), now=NOW)

        assert do_next_ids(plan) == {"b0", "b1"}

    def test_full_queue_is_noop(self):
        plan = board()

        assert reduce_plan(plan, EnsureDoNextQueue(), now=NOW) is plan


# =============================================================================
# DERIVED VIEWS
# =============================================================================


class TestDerivedViews:
    def _mixed(self):
        return make_plan(
            [
                make_play("a", "backlog", 0),
                make_play("b", "do-next", 1),
                make_play("c", "in-progress", 2),
                make_play("d", "completed", 3),
                make_play("e", "skipped", 4),
            ]
        )

    def test_plan_progress_excludes_backlog_and_skipped(self):
        progress = plan_progress(self._mixed())

        assert progress.total == 5
        assert progress.completed == 1
        assert progress.completion_percentage == 33

    def test_plan_progress_empty_denominator(self):
        plan = make_plan([make_play("a", "backlog", 0), make_play("b", "skipped", 1)])

        assert plan_progress(plan).completion_percentage == 0

    def test_group_plays_by_status(self):
        groups = group_plays_by_status(board())

        assert list(groups) == [
            PlayStatus.BACKLOG,
            PlayStatus.DO_NEXT,
            PlayStatus.IN_PROGRESS,
            PlayStatus.COMPLETED,
            PlayStatus.SKIPPED,
        ]
        assert [p.id for p in groups[PlayStatus.BACKLOG]] == ["b1", "b2", "b3"]
        assert groups[PlayStatus.SKIPPED] == []

    def test_task_progress(self):
        play = replace(
            make_play("p"),
            tasks=(
                PlanTask("t1", "one", TaskStatus.COMPLETED),
                PlanTask("t2", "two"),
                PlanTask("t3", "three"),
            ),
        )
        progress = task_progress(play)

        assert (progress.completed, progress.total, progress.percentage) == (1, 3, 33)

    def test_task_progress_without_tasks(self):
        assert task_progress(make_play("p")).percentage == 0

    def test_active_plays(self):
        plan = self._mixed()

        assert active_play_count(plan) == 2
        assert has_active_plays(plan) is True
        assert has_active_plays(make_plan([make_play("a", "completed", 0)])) is False


class TestReducePlanAll:
    def test_applies_events_in_order(self):
        plan = reduce_plan_all(
            board(),
            [
                SetPlayStatus("p1", PlayStatus.IN_PROGRESS),
                SetPlayStatus("p1", PlayStatus.COMPLETED),
            ],
            now=NOW,
        )

        assert plan.find_play("p1").started_at == NOW
        assert plan.find_play("p1").completed_at == NOW
        assert do_next_ids(plan) == {"p2", "b2"}
