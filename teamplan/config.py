"""
Centralized configuration for the improvement plan engine.

Values that vary by deployment belong here.
Override via environment variables where marked, or via
``engine.yaml`` in the config directory or the file TEAMPLAN_CONFIG names
(see ``load_engine_config``).
"""

import logging
import os
from copy import deepcopy
from typing import Any

import yaml

from teamplan import paths

logger = logging.getLogger(__name__)

# ============================================================
# Plan lifecycle
# ============================================================

MIN_DO_NEXT_COUNT: int = int(os.environ.get("TEAMPLAN_MIN_DO_NEXT", "2"))
"""Minimum number of plays kept in the Do Next queue while backlog supply exists."""

FOCUS_COUNT: int = int(os.environ.get("TEAMPLAN_FOCUS_COUNT", "3"))
"""Number of globally top-ranked selections flagged as focus items at commit."""

# ============================================================
# Storage / runtime
# ============================================================

STORE_BACKEND: str = os.environ.get("TEAMPLAN_STORE", "sqlite")
"""Plan store backend: 'sqlite' (default) or 'memory'."""

LOG_LEVEL: str = os.environ.get("TEAMPLAN_LOG_LEVEL", "INFO")
"""Root log level used by the CLI and API server."""


def _default_engine_config() -> dict:
    return {
        "lifecycle": {
            "min_do_next": MIN_DO_NEXT_COUNT,
        },
        "commit": {
            "focus_count": FOCUS_COUNT,
        },
        "store": {
            "backend": STORE_BACKEND,
        },
    }


def _merge(base: dict, override: dict) -> dict:
    merged = deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_engine_config() -> dict:
    """Load engine configuration, YAML overrides merged over defaults."""
    config = _default_engine_config()
    config_file = paths.engine_config_path()
    if not config_file.exists():
        return config

    try:
        with open(config_file) as f:
            overrides = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        logger.warning(f"Ignoring unreadable {config_file}: {e}")
        return config

    if not isinstance(overrides, dict):
        logger.warning(f"Ignoring {config_file}: top level must be a mapping")
        return config

    return _merge(config, overrides)


def get(path: str, default: Any = None) -> Any:
    """
    Get an engine config value by dot-separated path.

    Example: get("lifecycle.min_do_next")
    """
    value: Any = load_engine_config()
    for part in path.split("."):
        if isinstance(value, dict) and part in value:
            value = value[part]
        else:
            return default
    return value
