"""
Test fixtures for deterministic testing.

This module provides:
- plan_data: builders for dimensions, recommendations, plays and plans
- dimensions_seed.json: pinned diagnostic input used by CLI and API tests
"""

from .plan_data import (
    SEED_PATH,
    dimension,
    load_seed_dimensions,
    make_plan,
    make_play,
    rec,
    scenario_dimensions,
)

__all__ = [
    "SEED_PATH",
    "dimension",
    "load_seed_dimensions",
    "make_plan",
    "make_play",
    "rec",
    "scenario_dimensions",
]
