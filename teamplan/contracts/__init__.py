"""
Contracts Module - invariant checks for wizard state, commit payloads and plans.

Checks run in tests and in production: the plan service logs any
violation after every effective lifecycle change.
"""

from .invariants import (
    ALL_INVARIANTS,
    InvariantViolation,
    check_commit_priorities,
    check_dimension_priorities,
    check_do_next_floor,
    check_unique_play_ids,
    check_unique_play_priorities,
    enforce_invariants,
    enforce_invariants_strict,
    plan_invariants,
)

__all__ = [
    "ALL_INVARIANTS",
    "InvariantViolation",
    "check_commit_priorities",
    "check_dimension_priorities",
    "check_do_next_floor",
    "check_unique_play_ids",
    "check_unique_play_priorities",
    "enforce_invariants",
    "enforce_invariants_strict",
    "plan_invariants",
]
