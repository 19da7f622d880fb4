"""
handover/analytics/evaluator.py
───────────────────────────────
Reading status and deviation against an operating range.

Status (inclusive bands, critical checked first):
  value outside [critical_min, critical_max]  → critical
  value outside [min, max]                    → warning
  otherwise                                   → normal

Deviation is the distance from the normal band's midpoint as a percentage of
the band width:
  deviation = |value − mid| / (max − min) × 100      (one decimal)

It is symmetric: both band edges report 50.0%.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from config.equipment import DEVIATION_NOTICE_PCT
from handover.data.models import OperatingRange, ReadingStatus


@dataclass(frozen=True)
class Evaluation:
    status: ReadingStatus
    deviation: float


def evaluate_status(
    value: float,
    normal_min: float,
    normal_max: float,
    critical_min: float,
    critical_max: float,
) -> ReadingStatus:
    if value < critical_min or value > critical_max:
        return ReadingStatus.CRITICAL
    if value < normal_min or value > normal_max:
        return ReadingStatus.WARNING
    return ReadingStatus.NORMAL


def compute_deviation(value: float, normal_min: float, normal_max: float) -> float:
    """
    Percentage distance of `value` from the normal band midpoint.

    A zero-width band (min == max) has no scale: the deviation is 0.0 for a
    value on the band point and infinite for anything else.
    """
    midpoint = (normal_min + normal_max) / 2.0
    width = normal_max - normal_min
    if width == 0:
        return 0.0 if value == midpoint else math.inf
    return round(abs(value - midpoint) / width * 100.0, 1)


def evaluate(value: float, operating_range: OperatingRange) -> Evaluation:
    r = operating_range
    return Evaluation(
        status=evaluate_status(value, r.min, r.max, r.critical_min, r.critical_max),
        deviation=compute_deviation(value, r.min, r.max),
    )


def recommend(status: ReadingStatus, deviation: float) -> str:
    """Operator-facing recommendation for a single reading."""
    if status == ReadingStatus.CRITICAL:
        return "🚨 CRITICAL: Immediate action required. Inspect equipment and consider shutdown if unsafe."
    if status == ReadingStatus.WARNING:
        return "⚠️ WARNING: Parameter outside normal range. Monitor closely and schedule inspection."
    if deviation > DEVIATION_NOTICE_PCT:
        return "📋 NOTICE: Reading is within limits but showing significant deviation. Continue monitoring."
    return "✅ NORMAL: Equipment operating within normal parameters."


def format_deviation(deviation: float) -> str:
    if math.isinf(deviation):
        return "∞% (zero-width normal range)"
    return f"{deviation}%"
