"""
Test configuration - ensures repo root is in sys.path + isolation guards.

This allows tests to import from top-level packages (teamplan, api, cli).
Every test runs against its own app home and plan database so nothing
touches ~/.teamplan.
"""

import sys
from pathlib import Path

import pytest

# Add repo root to sys.path so tests can import teamplan.*, api.*, cli.*
REPO_ROOT = Path(__file__).parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from teamplan import plan_store  # noqa: E402
from teamplan.plan_store import InMemoryPlanStore  # noqa: E402

# =============================================================================
# ISOLATION GUARD: private app home and DB per test
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Private app home and DB per test, no TEAMPLAN_CONFIG, fresh store cache."""
    home = tmp_path / "teamplan_home"
    monkeypatch.setenv("TEAMPLAN_HOME", str(home))
    monkeypatch.setenv("TEAMPLAN_DB", str(tmp_path / "plans.db"))
    monkeypatch.delenv("TEAMPLAN_CONFIG", raising=False)
    plan_store.reset_store()
    yield home
    plan_store.reset_store()


@pytest.fixture
def memory_store():
    return InMemoryPlanStore()


@pytest.fixture
def db_file(tmp_path):
    return str(tmp_path / "plans.db")
