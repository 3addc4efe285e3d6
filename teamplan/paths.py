"""
Filesystem locations for plan data and engine configuration.

Everything lives under one app home (``~/.teamplan`` unless TEAMPLAN_HOME
is set). The plan database and the engine.yaml override file can each be
pointed elsewhere on their own.
"""

from __future__ import annotations

import os
from pathlib import Path

APP_ENV_HOME = "TEAMPLAN_HOME"
APP_ENV_DB = "TEAMPLAN_DB"
APP_ENV_CONFIG = "TEAMPLAN_CONFIG"

ENGINE_CONFIG_FILE = "engine.yaml"
PLAN_DB_FILE = "plans.db"


def _env_path(name: str) -> Path | None:
    value = os.environ.get(name)
    return Path(value).expanduser().resolve() if value else None


def app_home() -> Path:
    return _env_path(APP_ENV_HOME) or (Path.home() / ".teamplan").resolve()


def config_dir() -> Path:
    d = app_home() / "config"
    d.mkdir(parents=True, exist_ok=True)
    return d


def data_dir() -> Path:
    d = app_home() / "data"
    d.mkdir(parents=True, exist_ok=True)
    return d


def engine_config_path() -> Path:
    """
    Engine override file.

    Resolution order:
    1. TEAMPLAN_CONFIG env var
    2. <app home>/config/engine.yaml
    """
    return _env_path(APP_ENV_CONFIG) or config_dir() / ENGINE_CONFIG_FILE


def db_path() -> Path:
    """
    Plan database.

    Resolution order:
    1. TEAMPLAN_DB env var
    2. <app home>/data/plans.db
    """
    return _env_path(APP_ENV_DB) or data_dir() / PLAN_DB_FILE


def ensure_app_dirs() -> list[Path]:
    """Create the config and data directories; returns them for reporting."""
    return [config_dir(), data_dir()]
