"""
Play Priority Derivation

Rank tables and the canonical "pick next work" ordering shared by the
commit assembler, the action selector and the plan lifecycle.
"""

from .models import HealthStatus, InterventionType, Level, PlanPlay, Recommendation

# Lower rank sorts first. Unknown values rank after every known one.
PRIORITY_LEVEL_RANK: dict[Level, int] = {Level.HIGH: 0, Level.MEDIUM: 1, Level.LOW: 2}
IMPACT_RANK: dict[Level, int] = {Level.HIGH: 0, Level.MEDIUM: 1, Level.LOW: 2}
EFFORT_RANK: dict[Level, int] = {Level.LOW: 0, Level.MEDIUM: 1, Level.HIGH: 2}
HEALTH_STATUS_RANK: dict[HealthStatus, int] = {
    HealthStatus.AT_RISK: 0,
    HealthStatus.NEEDS_ATTENTION: 1,
    HealthStatus.ON_TRACK: 2,
}

# Numeric weights for effort/impact averages
LEVEL_SCORE: dict[Level, int] = {Level.LOW: 1, Level.MEDIUM: 2, Level.HIGH: 3}

_UNRANKED = 99


def priority_level(effort: Level, impact: Level) -> Level:
    """
    Priority level from effort and impact.

    - high: high impact with low/medium effort
    - medium: high impact with high effort, or medium impact
    - low: low impact
    """
    if impact == Level.HIGH:
        return Level.MEDIUM if effort == Level.HIGH else Level.HIGH
    if impact == Level.MEDIUM:
        return Level.MEDIUM
    return Level.LOW


def intervention_type_for(category: str | None) -> InterventionType:
    """Governance recommendations are process changes; unknown defaults to process."""
    try:
        return InterventionType(category)
    except ValueError:
        return InterventionType.PROCESS


def is_quick_win(recommendation: Recommendation) -> bool:
    return recommendation.effort == Level.LOW and recommendation.impact == Level.HIGH


def impact_rank(level: Level) -> int:
    return IMPACT_RANK.get(level, _UNRANKED)


def effort_rank(level: Level) -> int:
    return EFFORT_RANK.get(level, _UNRANKED)


def health_status_rank(status: HealthStatus) -> int:
    return HEALTH_STATUS_RANK.get(status, _UNRANKED)


def pick_next_work_key(play: PlanPlay) -> tuple[int, int, int]:
    """
    Canonical ordering for choosing the next play to work on:
    priority level, then effort, then the play's priority number.
    """
    return (
        PRIORITY_LEVEL_RANK.get(play.priority_level, _UNRANKED),
        effort_rank(play.effort),
        play.priority,
    )


def sort_plays_for_work(plays) -> list[PlanPlay]:
    return sorted(plays, key=pick_next_work_key)


def summarize_levels(levels: list[Level]) -> Level:
    """
    Average a list of levels (low=1, medium=2, high=3) back onto the scale.

    <= 1.5 low, <= 2.5 medium, else high; an empty list is medium.
    """
    if not levels:
        return Level.MEDIUM
    average = sum(LEVEL_SCORE[level] for level in levels) / len(levels)
    if average <= 1.5:
        return Level.LOW
    if average <= 2.5:
        return Level.MEDIUM
    return Level.HIGH
