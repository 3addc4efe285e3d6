#!/usr/bin/env python3
"""
Team Health Plans CLI - build improvement plans and work the plan board.

Usage:
    python -m cli.main init
    python -m cli.main build dimensions.json --team team-a
    python -m cli.main plans --team team-a
    python -m cli.main show <plan_id>
    python -m cli.main move <plan_id> <play_id> in-progress
"""

import argparse
import json
import sys

from teamplan import builder, config, paths
from teamplan.lifecycle import (
    AddTask,
    SetPlayStatus,
    SetTaskStatus,
    group_plays_by_status,
    plan_progress,
    task_progress,
)
from teamplan.models import ImprovementPlan, PlayStatus, TaskStatus
from teamplan.observability import RequestContext, configure_logging
from teamplan.plan_service import PlanService
from teamplan.plan_store import SqlitePlanStore, get_store
from teamplan.zones import classify_zone, risk_level, trend_direction


def print_header(text: str):
    """Print a section header."""
    print(f"\n{'═' * 50}")
    print(f"  {text}")
    print(f"{'═' * 50}")


def print_table(headers: list, rows: list, widths: list = None):
    """Print a simple table."""
    if not widths:
        widths = [
            max(len(str(row[i])) for row in [headers] + rows)
            for i in range(len(headers))
        ]

    header_str = " │ ".join(str(h).ljust(w) for h, w in zip(headers, widths))
    print(header_str)
    print("─" * len(header_str))

    for row in rows:
        print(" │ ".join(str(c)[:w].ljust(w) for c, w in zip(row, widths)))


def _fail(message: str) -> int:
    print(f"Error: {message}", file=sys.stderr)
    return 1


def _service_for_plan(plan_id: str) -> tuple[PlanService | None, ImprovementPlan | None]:
    store = get_store()
    plan = store.load_by_id(plan_id)
    if plan is None:
        return None, None
    return PlanService(store, plan.team_id), plan


def _print_plan_summary(plan: ImprovementPlan):
    progress = plan_progress(plan)
    print_header(f"{plan.name} [{plan.status.value}]")
    print(f"  id: {plan.id}  team: {plan.team_id}  updated: {plan.updated_at}")
    print(
        f"  {progress.total} plays, {progress.do_next} do-next, "
        f"{progress.in_progress} in progress, {progress.completion_percentage}% complete"
    )


# =============================================================================
# COMMANDS
# =============================================================================


def cmd_init(args) -> int:
    """Create the app directories and the plan database."""
    for d in paths.ensure_app_dirs():
        print(f"OK: {d}")
    store = SqlitePlanStore(args.db)
    print(f"OK: initialized {store.db_path}")
    return 0


def cmd_build(args) -> int:
    """Run the wizard over a dimensions file with the recommended defaults and save."""
    try:
        with open(args.dimensions) as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        return _fail(f"cannot read {args.dimensions}: {e}")

    items = raw.get("dimensions", []) if isinstance(raw, dict) else raw
    try:
        dimensions = builder.dimensions_from_dicts(items)
    except (KeyError, TypeError, ValueError) as e:
        return _fail(f"invalid dimension record: {e}")

    service = PlanService(get_store(), args.team)
    state = builder.reduce_all(
        builder.open_wizard(dimensions),
        [
            builder.SelectAllRecommended(),
            builder.NextStep(),
            builder.Commit(focus_count=service.focus_count),
        ],
    )
    plan = service.commit_wizard(state, name=args.name)

    if args.json:
        print(json.dumps(plan.to_dict(), indent=2))
        return 0

    _print_plan_summary(plan)
    rows = [
        [p.priority, p.status.value, p.priority_level.value, p.source_dimension_name, p.title]
        for p in sorted(plan.plays, key=lambda p: p.priority)
    ]
    if rows:
        print_table(["#", "Status", "Level", "Dimension", "Play"], rows)
    else:
        print("No actions selected; the plan is empty.")
    return 0


def cmd_plans(args) -> int:
    service = PlanService(get_store(), args.team)
    plans = service.archived_plans if args.archived else service.active_plans

    print_header(f"PLANS: {args.team}" + (" (archived)" if args.archived else ""))
    if not plans:
        print("No plans.")
        return 0

    rows = []
    for plan in plans:
        progress = plan_progress(plan)
        marker = "*" if plan.id == service.selected_plan_id else ""
        rows.append(
            [marker, plan.id, plan.name[:35], progress.total, f"{progress.completion_percentage}%"]
        )
    print_table(["", "ID", "Name", "Plays", "Done"], rows)
    return 0


def cmd_show(args) -> int:
    _, plan = _service_for_plan(args.plan_id)
    if plan is None:
        return _fail(f"plan {args.plan_id} not found")

    if args.json:
        print(json.dumps(plan.to_dict(), indent=2))
        return 0

    _print_plan_summary(plan)
    for status, plays in group_plays_by_status(plan).items():
        print(f"\n  {status.value.upper()} ({len(plays)})")
        for play in plays:
            tasks = task_progress(play)
            task_str = f"  [{tasks.completed}/{tasks.total} tasks]" if tasks.total else ""
            print(f"    {play.priority:>3}  {play.id}  {play.title}{task_str}")
    return 0


def cmd_move(args) -> int:
    service, plan = _service_for_plan(args.plan_id)
    if plan is None:
        return _fail(f"plan {args.plan_id} not found")
    if plan.find_play(args.play_id) is None:
        return _fail(f"play {args.play_id} not found in plan {plan.id}")

    updated = service.apply(SetPlayStatus(args.play_id, PlayStatus(args.status)), plan.id)
    if updated is plan:
        print("No change.")
        return 0
    progress = plan_progress(updated)
    print(f"OK: {args.play_id} -> {args.status} (do-next now {progress.do_next})")
    return 0


def cmd_task_add(args) -> int:
    service, plan = _service_for_plan(args.plan_id)
    if plan is None:
        return _fail(f"plan {args.plan_id} not found")

    updated = service.apply(AddTask(args.play_id, args.title), plan.id)
    if updated is plan:
        return _fail("task not added (unknown play, empty title or archived plan)")
    task = updated.find_play(args.play_id).tasks[-1]
    print(f"OK: added task {task.id}")
    return 0


def cmd_task_status(args) -> int:
    service, plan = _service_for_plan(args.plan_id)
    if plan is None:
        return _fail(f"plan {args.plan_id} not found")

    updated = service.apply(
        SetTaskStatus(args.play_id, args.task_id, TaskStatus(args.status)), plan.id
    )
    print("No change." if updated is plan else f"OK: {args.task_id} -> {args.status}")
    return 0


def cmd_archive(args) -> int:
    service, plan = _service_for_plan(args.plan_id)
    if plan is None:
        return _fail(f"plan {args.plan_id} not found")
    service.archive(plan.id)
    print(f"OK: archived {plan.id}")
    return 0


def cmd_zone(args) -> int:
    tag = classify_zone(args.percentile, args.trend)
    print_table(
        ["Percentile", "Trend", "Risk", "Direction", "Zone"],
        [
            [
                args.percentile,
                args.trend,
                risk_level(args.percentile).value,
                trend_direction(args.trend).value,
                tag.value,
            ]
        ],
    )
    return 0


COMMANDS = {
    "init": cmd_init,
    "build": cmd_build,
    "plans": cmd_plans,
    "show": cmd_show,
    "move": cmd_move,
    "task-add": cmd_task_add,
    "task-status": cmd_task_status,
    "archive": cmd_archive,
    "zone": cmd_zone,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Team Health Plans - improvement plan builder and board"
    )
    parser.add_argument("--log-level", default=config.LOG_LEVEL, help="Log level")

    subparsers = parser.add_subparsers(dest="command", required=True, help="Commands")

    p = subparsers.add_parser("init", help="Create app directories and the plan database")
    p.add_argument("--db", default=None, help="Database path (default: TEAMPLAN_DB or app home)")

    p = subparsers.add_parser("build", help="Build and save a plan from a dimensions file")
    p.add_argument("dimensions", help="JSON file: a list of dimensions or {dimensions: [...]}")
    p.add_argument("--team", "-t", required=True, help="Team id")
    p.add_argument("--name", "-n", help="Plan name (default: derived from dimensions)")
    p.add_argument("--json", action="store_true", help="Print the plan as JSON")

    p = subparsers.add_parser("plans", help="List a team's plans")
    p.add_argument("--team", "-t", required=True, help="Team id")
    p.add_argument("--archived", action="store_true", help="List archived plans instead")

    p = subparsers.add_parser("show", help="Show a plan board by status")
    p.add_argument("plan_id")
    p.add_argument("--json", action="store_true", help="Print the plan as JSON")

    p = subparsers.add_parser("move", help="Set a play's status")
    p.add_argument("plan_id")
    p.add_argument("play_id")
    p.add_argument("status", choices=[s.value for s in PlayStatus])

    p = subparsers.add_parser("task-add", help="Add a task to a play")
    p.add_argument("plan_id")
    p.add_argument("play_id")
    p.add_argument("title")

    p = subparsers.add_parser("task-status", help="Set a task's status")
    p.add_argument("plan_id")
    p.add_argument("play_id")
    p.add_argument("task_id")
    p.add_argument("status", choices=[s.value for s in TaskStatus])

    p = subparsers.add_parser("archive", help="Archive a plan")
    p.add_argument("plan_id")

    p = subparsers.add_parser("zone", help="Classify a percentile and trend delta")
    p.add_argument("percentile", type=float)
    p.add_argument("--trend", type=float, default=0.0, help="Trend change (last - first)")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, json_format=False)
    with RequestContext():
        return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
