"""
Zone / Tier Classifier

Pure, total functions mapping a score and a trend to categorical tags.

Two independent threshold sets live here:
- zone risk (67 / 34 percentile break points) feeds the nine-way zone tag;
- display health (55 / 30 break points) feeds health status and the
  display-facing risk level. Both display views share one partition
  function so their buckets cannot drift apart.
"""

import math
from collections.abc import Sequence

from .models import HealthStatus, RiskLevel, TrendDirection, TrendPoint, ZoneTag

# Zone risk break points (percentile)
ZONE_LOW_RISK_FROM = 67
ZONE_MODERATE_RISK_FROM = 34

# Trend delta beyond which a series counts as moving
TREND_THRESHOLD = 3

# Display health break points (health score)
HEALTH_NEEDS_ATTENTION_FROM = 30
HEALTH_ON_TRACK_FROM = 55

ZONE_MATRIX: dict[tuple[RiskLevel, TrendDirection], ZoneTag] = {
    (RiskLevel.HIGH, TrendDirection.DECLINING): ZoneTag.CRITICAL,
    (RiskLevel.HIGH, TrendDirection.STABLE): ZoneTag.URGENT,
    (RiskLevel.HIGH, TrendDirection.IMPROVING): ZoneTag.MOMENTUM,
    (RiskLevel.MODERATE, TrendDirection.DECLINING): ZoneTag.PREVENT,
    (RiskLevel.MODERATE, TrendDirection.STABLE): ZoneTag.MONITOR,
    (RiskLevel.MODERATE, TrendDirection.IMPROVING): ZoneTag.PROGRESSING,
    (RiskLevel.LOW, TrendDirection.DECLINING): ZoneTag.EARLY_WARNING,
    (RiskLevel.LOW, TrendDirection.STABLE): ZoneTag.SUSTAIN,
    (RiskLevel.LOW, TrendDirection.IMPROVING): ZoneTag.CELEBRATE,
}

# Display order, most urgent first
ZONE_TAG_PRIORITY_ORDER: list[ZoneTag] = [
    ZoneTag.CRITICAL,
    ZoneTag.URGENT,
    ZoneTag.MOMENTUM,
    ZoneTag.PREVENT,
    ZoneTag.MONITOR,
    ZoneTag.PROGRESSING,
    ZoneTag.EARLY_WARNING,
    ZoneTag.SUSTAIN,
    ZoneTag.CELEBRATE,
]


def risk_level(percentile: float) -> RiskLevel:
    """Zone risk tier: >= 67 low, >= 34 moderate, else high."""
    if percentile >= ZONE_LOW_RISK_FROM:
        return RiskLevel.LOW
    if percentile >= ZONE_MODERATE_RISK_FROM:
        return RiskLevel.MODERATE
    return RiskLevel.HIGH


def trend_direction(delta: float) -> TrendDirection:
    if delta < -TREND_THRESHOLD:
        return TrendDirection.DECLINING
    if delta > TREND_THRESHOLD:
        return TrendDirection.IMPROVING
    return TrendDirection.STABLE


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def trend_change(series: Sequence[TrendPoint]) -> int:
    """
    Endpoint delta of a trend series: round(last - first).

    Fewer than two samples yields 0. Only the endpoints are used, so a
    volatile series that returns to its start reads as flat.
    """
    if not series or len(series) < 2:
        return 0
    return _round_half_up(series[-1].value - series[0].value)


def zone_tag(risk: RiskLevel, trend: TrendDirection) -> ZoneTag:
    return ZONE_MATRIX[(risk, trend)]


def classify_zone(percentile: float, change: float) -> ZoneTag:
    """Zone tag straight from a percentile and a trend delta."""
    return zone_tag(risk_level(percentile), trend_direction(change))


# =============================================================================
# DISPLAY HEALTH VIEWS
# =============================================================================

_HEALTH_STATUS_BANDS = (HealthStatus.AT_RISK, HealthStatus.NEEDS_ATTENTION, HealthStatus.ON_TRACK)
_DISPLAY_RISK_BANDS = (RiskLevel.HIGH, RiskLevel.MODERATE, RiskLevel.LOW)


def health_band(score: float) -> int:
    """Shared partition: 0 below 30, 1 below 55, else 2."""
    if score < HEALTH_NEEDS_ATTENTION_FROM:
        return 0
    if score < HEALTH_ON_TRACK_FROM:
        return 1
    return 2


def health_status(score: float) -> HealthStatus:
    return _HEALTH_STATUS_BANDS[health_band(score)]


def display_risk_level(score: float) -> RiskLevel:
    return _DISPLAY_RISK_BANDS[health_band(score)]
