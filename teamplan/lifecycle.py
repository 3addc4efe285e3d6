"""
Plan Lifecycle - status board reducer for a committed improvement plan.

Play status is a free graph: any status can move to any other. The one
rule layered on top is the do-next floor: after any status change that
does not land in do-next, the queue is refilled from backlog up to the
configured minimum using the canonical pick-next-work order. Moves *into*
do-next never promote. The play that was just moved is promoted last,
only when no other backlog play can fill the gap.

Columns display in priority-number order, so a same-column drag is what
the board shows next.

``reduce_plan(plan, event)`` returns the next plan snapshot. A stale play
or task id, a drop outside any column and any other no-op returns the
very same object, so callers can test ``new is old``.
"""

import logging
from dataclasses import dataclass, replace

from .config import MIN_DO_NEXT_COUNT
from .models import (
    ImprovementPlan,
    PlanPlay,
    PlanStatus,
    PlanTask,
    PlayStatus,
    TaskStatus,
    generate_id,
    now_iso,
)
from .priority import sort_plays_for_work

logger = logging.getLogger(__name__)

# Board column order
BOARD_COLUMNS: tuple[PlayStatus, ...] = (
    PlayStatus.BACKLOG,
    PlayStatus.DO_NEXT,
    PlayStatus.IN_PROGRESS,
    PlayStatus.COMPLETED,
    PlayStatus.SKIPPED,
)

# Statuses counted as "active work"
ACTIVE_STATUSES = frozenset({PlayStatus.DO_NEXT, PlayStatus.IN_PROGRESS})


# =============================================================================
# EVENTS
# =============================================================================


@dataclass(frozen=True)
class SetPlayStatus:
    play_id: str
    status: PlayStatus


@dataclass(frozen=True)
class MovePlay:
    """One completed drag. ``dest_column`` is None when dropped outside the board."""

    source_column: PlayStatus
    source_index: int
    dest_column: PlayStatus | None
    dest_index: int = 0


@dataclass(frozen=True)
class ReorderPlays:
    """Full new order for plays that share one status."""

    ordered_play_ids: tuple[str, ...]


@dataclass(frozen=True)
class SetPlayNotes:
    play_id: str
    notes: str | None


@dataclass(frozen=True)
class AddTask:
    play_id: str
    title: str
    task_id: str | None = None


@dataclass(frozen=True)
class SetTaskStatus:
    play_id: str
    task_id: str
    status: TaskStatus


@dataclass(frozen=True)
class DeleteTask:
    play_id: str
    task_id: str


@dataclass(frozen=True)
class ArchivePlan:
    pass


@dataclass(frozen=True)
class EnsureDoNextQueue:
    pass


PlanEvent = (
    SetPlayStatus
    | MovePlay
    | ReorderPlays
    | SetPlayNotes
    | AddTask
    | SetTaskStatus
    | DeleteTask
    | ArchivePlan
    | EnsureDoNextQueue
)


# =============================================================================
# PLAY HELPERS
# =============================================================================


def column(plan: ImprovementPlan, status: PlayStatus) -> list[PlanPlay]:
    """Plays of one status in board display order (priority number)."""
    return sorted((p for p in plan.plays if p.status == status), key=lambda p: p.priority)


def count_status(plays, status: PlayStatus) -> int:
    return sum(1 for p in plays if p.status == status)


def with_status(play: PlanPlay, status: PlayStatus, now: str) -> PlanPlay:
    """Status change with its timestamps: first start and each completion."""
    changes: dict = {"status": status}
    if status == PlayStatus.IN_PROGRESS and play.started_at is None:
        changes["started_at"] = now
    if status == PlayStatus.COMPLETED:
        changes["completed_at"] = now
    return replace(play, **changes)


def backfill_do_next(
    plays: tuple[PlanPlay, ...], min_count: int, now: str, moved_id: str | None = None
) -> tuple[PlanPlay, ...]:
    """
    Promote backlog plays until do-next holds ``min_count`` or backlog runs out.

    ``moved_id`` names the play the user just moved; it goes to the back of
    the candidate list so an explicit demotion sticks whenever other
    backlog supply exists.
    """
    shortfall = min_count - count_status(plays, PlayStatus.DO_NEXT)
    if shortfall <= 0:
        return plays

    backlog = sort_plays_for_work(
        p for p in plays if p.status == PlayStatus.BACKLOG and p.id != moved_id
    )
    backlog += [p for p in plays if p.id == moved_id and p.status == PlayStatus.BACKLOG]
    promote = {p.id for p in backlog[:shortfall]}
    if not promote:
        return plays

    logger.info(f"Promoting {len(promote)} play(s) from backlog to do-next")
    return tuple(
        with_status(p, PlayStatus.DO_NEXT, now) if p.id in promote else p for p in plays
    )


def _renumber(plays: tuple[PlanPlay, ...], ordered: list[PlanPlay]) -> tuple[PlanPlay, ...]:
    # Reuse the numbers these plays already hold so the plan-wide set is unchanged
    numbers = sorted(p.priority for p in ordered)
    new_priority = {p.id: n for p, n in zip(ordered, numbers)}
    return tuple(
        replace(p, priority=new_priority[p.id])
        if p.id in new_priority and p.priority != new_priority[p.id]
        else p
        for p in plays
    )


def _update_play(plays: tuple[PlanPlay, ...], play_id: str, fn) -> tuple[PlanPlay, ...]:
    return tuple(fn(p) if p.id == play_id else p for p in plays)


# =============================================================================
# EVENT HANDLERS
# =============================================================================


def _set_play_status(plan, event: SetPlayStatus, now, min_do_next):
    play = plan.find_play(event.play_id)
    if play is None or play.status == event.status:
        return plan.plays

    plays = _update_play(plan.plays, play.id, lambda p: with_status(p, event.status, now))
    if event.status != PlayStatus.DO_NEXT:
        plays = backfill_do_next(plays, min_do_next, now, moved_id=play.id)
    return plays


def _move_play(plan, event: MovePlay, now, min_do_next):
    if event.dest_column is None:
        return plan.plays

    source = column(plan, event.source_column)
    if not 0 <= event.source_index < len(source):
        logger.debug(
            f"move_play: index {event.source_index} outside {event.source_column} column"
        )
        return plan.plays
    moved = source[event.source_index]

    if event.dest_column == event.source_column:
        ordered = [p for p in source if p.id != moved.id]
        dest_index = min(max(event.dest_index, 0), len(ordered))
        ordered.insert(dest_index, moved)
        return _renumber(plan.plays, ordered)

    plays = _update_play(plan.plays, moved.id, lambda p: with_status(p, event.dest_column, now))
    if event.dest_column != PlayStatus.DO_NEXT:
        plays = backfill_do_next(plays, min_do_next, now, moved_id=moved.id)
    return plays


def _reorder_plays(plan, event: ReorderPlays):
    ordered = [plan.find_play(pid) for pid in event.ordered_play_ids]
    if not ordered or any(p is None for p in ordered):
        return plan.plays
    if len({p.status for p in ordered}) != 1 or len({p.id for p in ordered}) != len(ordered):
        logger.debug("reorder_plays: ids must be distinct plays sharing one status")
        return plan.plays
    return _renumber(plan.plays, ordered)


def _set_notes(plan, event: SetPlayNotes):
    play = plan.find_play(event.play_id)
    if play is None or play.notes == event.notes:
        return plan.plays
    return _update_play(plan.plays, play.id, lambda p: replace(p, notes=event.notes))


def _add_task(plan, event: AddTask, now):
    title = (event.title or "").strip()
    if not title or plan.find_play(event.play_id) is None:
        return plan.plays
    task = PlanTask(id=event.task_id or generate_id("task"), title=title, created_at=now)
    return _update_play(plan.plays, event.play_id, lambda p: replace(p, tasks=p.tasks + (task,)))


def _task_with_status(task: PlanTask, status: TaskStatus, now: str) -> PlanTask:
    completed_at = now if status == TaskStatus.COMPLETED else None
    return replace(task, status=status, completed_at=completed_at)


def _set_task_status(plan, event: SetTaskStatus, now):
    play = plan.find_play(event.play_id)
    task = play.find_task(event.task_id) if play else None
    if task is None or task.status == event.status:
        return plan.plays

    tasks = tuple(
        _task_with_status(t, event.status, now) if t.id == task.id else t for t in play.tasks
    )
    return _update_play(plan.plays, play.id, lambda p: replace(p, tasks=tasks))


def _delete_task(plan, event: DeleteTask):
    play = plan.find_play(event.play_id)
    if play is None or play.find_task(event.task_id) is None:
        return plan.plays
    tasks = tuple(t for t in play.tasks if t.id != event.task_id)
    return _update_play(plan.plays, play.id, lambda p: replace(p, tasks=tasks))


# =============================================================================
# REDUCER
# =============================================================================


def reduce_plan(
    plan: ImprovementPlan,
    event: PlanEvent,
    now: str | None = None,
    min_do_next: int = MIN_DO_NEXT_COUNT,
) -> ImprovementPlan:
    """
    Apply one lifecycle event.

    Returns ``plan`` itself when nothing changed. Every effective change
    bumps ``updated_at``. Archived plans are read-only.
    """
    now = now or now_iso()

    if isinstance(event, ArchivePlan):
        if plan.is_archived:
            return plan
        logger.info(f"Archiving plan {plan.id}")
        return replace(plan, status=PlanStatus.ARCHIVED, updated_at=now)

    if plan.is_archived:
        logger.warning(f"Ignoring {type(event).__name__} on archived plan {plan.id}")
        return plan

    if isinstance(event, SetPlayStatus):
        plays = _set_play_status(plan, event, now, min_do_next)
    elif isinstance(event, MovePlay):
        plays = _move_play(plan, event, now, min_do_next)
    elif isinstance(event, ReorderPlays):
        plays = _reorder_plays(plan, event)
    elif isinstance(event, SetPlayNotes):
        plays = _set_notes(plan, event)
    elif isinstance(event, AddTask):
        plays = _add_task(plan, event, now)
    elif isinstance(event, SetTaskStatus):
        plays = _set_task_status(plan, event, now)
    elif isinstance(event, DeleteTask):
        plays = _delete_task(plan, event)
    elif isinstance(event, EnsureDoNextQueue):
        plays = backfill_do_next(plan.plays, min_do_next, now)
    else:
        raise TypeError(f"Unknown plan event: {event!r}")

    if plays == plan.plays:
        logger.debug(f"{type(event).__name__} left plan {plan.id} unchanged")
        return plan
    return replace(plan, plays=plays, updated_at=now)


def reduce_plan_all(plan: ImprovementPlan, events, **kwargs) -> ImprovementPlan:
    for event in events:
        plan = reduce_plan(plan, event, **kwargs)
    return plan


# =============================================================================
# DERIVED VIEWS
# =============================================================================


@dataclass(frozen=True)
class PlanProgress:
    total: int
    backlog: int
    do_next: int
    in_progress: int
    completed: int
    skipped: int
    completion_percentage: int

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "backlog": self.backlog,
            "doNext": self.do_next,
            "inProgress": self.in_progress,
            "completed": self.completed,
            "skipped": self.skipped,
            "completionPercentage": self.completion_percentage,
        }


def plan_progress(plan: ImprovementPlan) -> PlanProgress:
    """
    Status counts and completion percentage.

    Skipped and backlog plays are excluded from the denominator; only
    committed work counts toward completion.
    """
    plays = plan.plays
    counts = {status: count_status(plays, status) for status in BOARD_COLUMNS}
    total = len(plays)
    denominator = total - counts[PlayStatus.SKIPPED] - counts[PlayStatus.BACKLOG]
    percentage = (
        int(100 * counts[PlayStatus.COMPLETED] / denominator + 0.5) if denominator > 0 else 0
    )
    return PlanProgress(
        total=total,
        backlog=counts[PlayStatus.BACKLOG],
        do_next=counts[PlayStatus.DO_NEXT],
        in_progress=counts[PlayStatus.IN_PROGRESS],
        completed=counts[PlayStatus.COMPLETED],
        skipped=counts[PlayStatus.SKIPPED],
        completion_percentage=percentage,
    )


def group_plays_by_status(plan: ImprovementPlan) -> dict[PlayStatus, list[PlanPlay]]:
    groups: dict[PlayStatus, list[PlanPlay]] = {status: [] for status in BOARD_COLUMNS}
    for play in sorted(plan.plays, key=lambda p: p.priority):
        groups.setdefault(play.status, []).append(play)
    return groups


@dataclass(frozen=True)
class TaskProgress:
    completed: int
    total: int
    percentage: int

    def to_dict(self) -> dict:
        return {"completed": self.completed, "total": self.total, "percentage": self.percentage}


def task_progress(play: PlanPlay) -> TaskProgress:
    total = len(play.tasks)
    completed = sum(1 for t in play.tasks if t.status == TaskStatus.COMPLETED)
    percentage = int(100 * completed / total + 0.5) if total else 0
    return TaskProgress(completed=completed, total=total, percentage=percentage)


def active_play_count(plan: ImprovementPlan) -> int:
    return sum(1 for p in plan.plays if p.status in ACTIVE_STATUSES)


def has_active_plays(plan: ImprovementPlan) -> bool:
    return active_play_count(plan) > 0
