# Team Health Plans - Improvement Plan Engine
"""
Exports for the API, the CLI and other consumers.
"""

from .builder import open_wizard, reduce, summarize
from .commit import assemble_commit
from .lifecycle import group_plays_by_status, plan_progress, reduce_plan, task_progress
from .plan_factory import create_plan_from_commit, default_plan_name
from .plan_service import PlanService
from .plan_store import InMemoryPlanStore, SqlitePlanStore, get_store
from .zones import classify_zone, health_status, trend_change

__all__ = [
    "open_wizard",
    "reduce",
    "summarize",
    "assemble_commit",
    "create_plan_from_commit",
    "default_plan_name",
    "reduce_plan",
    "plan_progress",
    "group_plays_by_status",
    "task_progress",
    "PlanService",
    "InMemoryPlanStore",
    "SqlitePlanStore",
    "get_store",
    "classify_zone",
    "health_status",
    "trend_change",
]
