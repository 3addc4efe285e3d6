"""
Plan Service - multi-plan management for one team.

Holds the team's plans loaded from a PlanStore, tracks which plan is
selected, and routes lifecycle events to it. A plan is written back to
the store only when an event actually changed it.
"""

import logging

from . import config
from .contracts import enforce_invariants
from .builder import Commit, commit_payload
from .builder import reduce as reduce_wizard
from .lifecycle import (
    ArchivePlan,
    PlanEvent,
    PlanProgress,
    group_plays_by_status,
    plan_progress,
    reduce_plan,
)
from .models import BuilderWizardState, ImprovementPlan, PlanPlay, PlayStatus
from .observability import PlanScope
from .plan_factory import create_plan_from_commit
from .plan_store import PlanStore

logger = logging.getLogger(__name__)


class PlanService:
    def __init__(self, store: PlanStore, team_id: str):
        self.store = store
        self.team_id = team_id
        self.min_do_next = int(config.get("lifecycle.min_do_next", config.MIN_DO_NEXT_COUNT))
        self.focus_count = int(config.get("commit.focus_count", config.FOCUS_COUNT))
        self._plans: list[ImprovementPlan] = []
        self.selected_plan_id: str | None = None
        self.newly_created_plan_id: str | None = None
        self.refresh()

    # ==================== Plan list ====================

    def refresh(self) -> list[ImprovementPlan]:
        """Reload the team's plans, newest first, and repair the selection."""
        self._plans = self.store.load_all(self.team_id)
        self._ensure_selection()
        return self._plans

    def _ensure_selection(self):
        if self.selected_plan_id and self.get(self.selected_plan_id) is not None:
            return
        active = self.active_plans
        self.selected_plan_id = active[0].id if active else None

    @property
    def all_plans(self) -> list[ImprovementPlan]:
        return list(self._plans)

    @property
    def active_plans(self) -> list[ImprovementPlan]:
        return [p for p in self._plans if not p.is_archived]

    @property
    def archived_plans(self) -> list[ImprovementPlan]:
        return [p for p in self._plans if p.is_archived]

    @property
    def selected_plan(self) -> ImprovementPlan | None:
        return self.get(self.selected_plan_id) if self.selected_plan_id else None

    def get(self, plan_id: str) -> ImprovementPlan | None:
        for plan in self._plans:
            if plan.id == plan_id:
                return plan
        return None

    def select(self, plan_id: str) -> ImprovementPlan | None:
        plan = self.get(plan_id)
        if plan is None:
            logger.debug(f"select: unknown plan {plan_id}")
            return None
        self.selected_plan_id = plan.id
        return plan

    # ==================== Mutations ====================

    def add_plan(self, plan: ImprovementPlan) -> ImprovementPlan:
        self.store.save(plan)
        self._plans = [plan] + [p for p in self._plans if p.id != plan.id]
        self.selected_plan_id = plan.id
        self.newly_created_plan_id = plan.id
        return plan

    def commit_wizard(
        self,
        state: BuilderWizardState,
        name: str | None = None,
        committed_at: str | None = None,
    ) -> ImprovementPlan:
        """Commit a wizard (unless already committed) and save the resulting plan."""
        payload = commit_payload(state)
        if payload is None:
            payload = commit_payload(reduce_wizard(state, Commit(committed_at, self.focus_count)))
        names = {d.dimension_key: d.dimension_name for d in state.dimensions}
        plan = create_plan_from_commit(
            payload,
            self.team_id,
            name=name,
            dimension_names=names,
            min_do_next=self.min_do_next,
        )
        return self.add_plan(plan)

    def _replace(self, plan: ImprovementPlan):
        self._plans = [plan if p.id == plan.id else p for p in self._plans]

    def apply(self, event: PlanEvent, plan_id: str | None = None) -> ImprovementPlan | None:
        """
        Run one lifecycle event on a plan (the selected one by default).

        Returns the resulting plan, or None for an unknown plan id.
        """
        plan = self.get(plan_id) if plan_id else self.selected_plan
        if plan is None:
            return None

        with PlanScope(plan.id):
            updated = reduce_plan(plan, event, min_do_next=self.min_do_next)
            if updated is plan:
                return plan

            for violation in enforce_invariants(updated, self.min_do_next):
                logger.warning(violation)

            self.store.save(updated)
        self._replace(updated)
        return updated

    def archive(self, plan_id: str | None = None) -> ImprovementPlan | None:
        target = plan_id or self.selected_plan_id
        was_selected = target == self.selected_plan_id
        plan = self.apply(ArchivePlan(), target)
        if plan is not None and was_selected:
            self.selected_plan_id = None
            self._ensure_selection()
        return plan

    def delete(self, plan_id: str) -> bool:
        plan = self.get(plan_id)
        if plan is None:
            return False
        self.store.delete(plan)
        self._plans = [p for p in self._plans if p.id != plan_id]
        if self.newly_created_plan_id == plan_id:
            self.newly_created_plan_id = None
        self._ensure_selection()
        logger.info(f"Deleted plan {plan_id}")
        return True

    def clear_newly_created(self):
        self.newly_created_plan_id = None

    # ==================== Views ====================

    def progress(self, plan_id: str | None = None) -> PlanProgress | None:
        plan = self.get(plan_id) if plan_id else self.selected_plan
        return plan_progress(plan) if plan else None

    def plays_by_status(self, plan_id: str | None = None) -> dict[PlayStatus, list[PlanPlay]]:
        plan = self.get(plan_id) if plan_id else self.selected_plan
        return group_plays_by_status(plan) if plan else {}
