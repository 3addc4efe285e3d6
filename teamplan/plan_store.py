"""
Plan Store - persistence for improvement plans.

Two backends behind one protocol: an in-memory store for sessions and
tests, and a SQLite store keyed by plan id with a team index. Writes are
last-write-wins; concurrent editors of one plan are not reconciled here.
"""

import json
import logging
import sqlite3
from contextlib import contextmanager
from typing import Protocol

from . import config, paths
from .models import ImprovementPlan

logger = logging.getLogger(__name__)


class PlanStore(Protocol):
    def load_all(self, team_id: str) -> list[ImprovementPlan]: ...

    def load_by_id(self, plan_id: str) -> ImprovementPlan | None: ...

    def save(self, plan: ImprovementPlan) -> None: ...

    def delete(self, plan: ImprovementPlan) -> None: ...


def _newest_first(plans: list[ImprovementPlan]) -> list[ImprovementPlan]:
    return sorted(plans, key=lambda p: p.updated_at, reverse=True)


class InMemoryPlanStore:
    """Dict-backed store. Plans are stored as JSON so callers never share state."""

    def __init__(self):
        self._plans: dict[str, str] = {}
        self._team_index: dict[str, list[str]] = {}

    def load_all(self, team_id: str) -> list[ImprovementPlan]:
        plans = [self.load_by_id(pid) for pid in self._team_index.get(team_id, [])]
        return _newest_first([p for p in plans if p is not None])

    def load_by_id(self, plan_id: str) -> ImprovementPlan | None:
        raw = self._plans.get(plan_id)
        if raw is None:
            return None
        return ImprovementPlan.from_dict(json.loads(raw))

    def save(self, plan: ImprovementPlan) -> None:
        self._plans[plan.id] = json.dumps(plan.to_dict())
        ids = self._team_index.setdefault(plan.team_id, [])
        if plan.id not in ids:
            ids.append(plan.id)

    def delete(self, plan: ImprovementPlan) -> None:
        self._plans.pop(plan.id, None)
        ids = self._team_index.get(plan.team_id, [])
        if plan.id in ids:
            ids.remove(plan.id)


class SqlitePlanStore:
    """
    SQLite-backed store.

    One row per plan: indexed columns for lookup plus the full plan as a
    JSON payload.
    """

    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or str(paths.db_path())
        logger.info(f"SqlitePlanStore initializing with DB: {self.db_path}")
        self._ensure_schema()

    @contextmanager
    def _get_conn(self):
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def _ensure_schema(self):
        with self._get_conn() as conn:
            conn.execute(
                """CREATE TABLE IF NOT EXISTS improvement_plans (
                    id TEXT PRIMARY KEY,
                    team_id TEXT NOT NULL,
                    status TEXT NOT NULL,
                    payload TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )"""
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_improvement_plans_team "
                "ON improvement_plans(team_id)"
            )

    def _decode(self, row) -> ImprovementPlan | None:
        try:
            return ImprovementPlan.from_dict(json.loads(row["payload"]))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Skipping unreadable plan row {row['id']}: {e}")
            return None

    def load_all(self, team_id: str) -> list[ImprovementPlan]:
        with self._get_conn() as conn:
            rows = conn.execute(
                "SELECT id, payload FROM improvement_plans WHERE team_id = ? "
                "ORDER BY updated_at DESC",
                [team_id],
            ).fetchall()
        plans = [self._decode(row) for row in rows]
        return [p for p in plans if p is not None]

    def load_by_id(self, plan_id: str) -> ImprovementPlan | None:
        with self._get_conn() as conn:
            row = conn.execute(
                "SELECT id, payload FROM improvement_plans WHERE id = ?", [plan_id]
            ).fetchone()
        return self._decode(row) if row else None

    def save(self, plan: ImprovementPlan) -> None:
        with self._get_conn() as conn:
            conn.execute(
                """INSERT OR REPLACE INTO improvement_plans
                (id, team_id, status, payload, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)""",
                [
                    plan.id,
                    plan.team_id,
                    plan.status.value,
                    json.dumps(plan.to_dict()),
                    plan.created_at,
                    plan.updated_at,
                ],
            )

    def delete(self, plan: ImprovementPlan) -> None:
        with self._get_conn() as conn:
            conn.execute("DELETE FROM improvement_plans WHERE id = ?", [plan.id])


# Singleton accessor
_store: PlanStore | None = None


def get_store(backend: str | None = None, db_path: str | None = None) -> PlanStore:
    """Get the process-wide plan store, creating it on first use."""
    global _store
    if _store is None:
        backend = backend or config.get("store.backend", config.STORE_BACKEND)
        if backend == "memory":
            _store = InMemoryPlanStore()
        elif backend == "sqlite":
            _store = SqlitePlanStore(db_path)
        else:
            raise ValueError(f"Unknown plan store backend: {backend!r}")
    return _store


def reset_store() -> None:
    """Drop the cached store (tests, reconfiguration)."""
    global _store
    _store = None
