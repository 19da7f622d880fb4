"""
handover/analytics/trends.py
────────────────────────────
Short-window trend detection for one (equipment_id, parameter) series.

Input is the reading history newest first, at most TREND_HISTORY_SIZE long.
Two independent views are produced:

  Drift     recent = readings [0, 3), previous = readings [3, 6)
            trend% = (avg(recent) − avg(previous)) / avg(previous) × 100
            |trend| ≤ 5 → stable, > 5 → increasing, < −5 → decreasing

  Incidents warning / critical tally over the whole fetched history
            any critical    → schedule immediate inspection
            > 2 warnings    → schedule preventive maintenance

A drift needs a non-empty, non-zero baseline; without one the direction is
"indeterminate" and only the incident tally is reported.
"""
from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from config.settings import settings
from handover.data.models import EquipmentReading, ReadingStatus, TrendAnalysis, TrendDirection

MIN_SAMPLES = 3
RECENT_WINDOW = slice(0, 3)
PREVIOUS_WINDOW = slice(3, 6)
STABLE_BAND_PCT = 5.0

INSUFFICIENT_DATA_TEXT = "Insufficient historical data for trend analysis."
INSPECTION_RECOMMENDATION = "Schedule immediate inspection"
PREVENTIVE_RECOMMENDATION = "Schedule preventive maintenance"


def compute_trend_pct(recent_avg: float, previous_avg: float) -> float | None:
    """Percent change of the recent average over the previous one, None if undefined."""
    if previous_avg == 0:
        return 0.0 if recent_avg == 0 else None
    return (recent_avg - previous_avg) / previous_avg * 100.0


def classify_trend(trend_pct: float | None) -> TrendDirection:
    if trend_pct is None:
        return TrendDirection.INDETERMINATE
    # Rounded so float noise cannot push an exact ±5% out of the stable band
    if abs(round(trend_pct, 9)) <= STABLE_BAND_PCT:
        return TrendDirection.STABLE
    if trend_pct > 0:
        return TrendDirection.INCREASING
    return TrendDirection.DECREASING


def _trend_lines(
    direction: TrendDirection,
    recent_avg: float,
    previous_avg: float | None,
    trend_pct: float | None,
) -> list[str]:
    lines = [f"• Recent average: {recent_avg:.2f}"]
    if previous_avg is None:
        lines.append("• Previous average: n/a")
        lines.append("• Trend: Indeterminate (not enough readings for a baseline)")
        return lines

    lines.append(f"• Previous average: {previous_avg:.2f}")
    if direction == TrendDirection.INDETERMINATE:
        lines.append("• Trend: Indeterminate (baseline average is zero)")
    elif direction == TrendDirection.STABLE:
        sign = "+" if trend_pct > 0 else ""
        lines.append(f"• Trend: Stable ({sign}{trend_pct:.1f}%)")
    elif direction == TrendDirection.INCREASING:
        lines.append(f"• Trend: ⬆️ Increasing ({trend_pct:.1f}%)")
        lines.append("• ⚠️ Consider monitoring - upward trend detected")
    else:
        lines.append(f"• Trend: ⬇️ Decreasing ({trend_pct:.1f}%)")
        lines.append("• ⚠️ Consider monitoring - downward trend detected")
    return lines


def analyze_trend(
    history: Sequence[EquipmentReading],
    window: int = settings.TREND_HISTORY_SIZE,
) -> TrendAnalysis:
    """
    Analyze a reading history (newest first).

    Args:
        history: Readings for one equipment parameter, newest first
        window: Number of readings considered for the incident tally

    Returns:
        TrendAnalysis with the drift classification, incident counts and the
        formatted analysis text
    """
    history = list(history)[:window]
    if len(history) < MIN_SAMPLES:
        return TrendAnalysis(
            direction=TrendDirection.INSUFFICIENT_DATA,
            sample_size=len(history),
            text=INSUFFICIENT_DATA_TEXT,
        )

    values = np.array([r.value for r in history], dtype=float)
    recent_avg = float(values[RECENT_WINDOW].mean())
    previous = values[PREVIOUS_WINDOW]
    previous_avg = float(previous.mean()) if previous.size else None

    trend_pct = None if previous_avg is None else compute_trend_pct(recent_avg, previous_avg)
    direction = classify_trend(trend_pct)

    warnings = sum(1 for r in history if r.status == ReadingStatus.WARNING)
    criticals = sum(1 for r in history if r.status == ReadingStatus.CRITICAL)

    lines = ["", "📊 TREND ANALYSIS:"]
    lines += _trend_lines(direction, recent_avg, previous_avg, trend_pct)

    recommendation = None
    if criticals > 0:
        recommendation = INSPECTION_RECOMMENDATION
        lines.append(f"• 🚨 {criticals} critical reading(s) in last {window} entries")
        lines.append(f"• 🔧 RECOMMEND: {recommendation}")
    elif warnings > 2:
        recommendation = PREVENTIVE_RECOMMENDATION
        lines.append(f"• ⚠️ {warnings} warning reading(s) in last {window} entries")
        lines.append(f"• 🔧 RECOMMEND: {recommendation}")

    return TrendAnalysis(
        direction=direction,
        sample_size=len(history),
        recent_average=round(recent_avg, 4),
        previous_average=None if previous_avg is None else round(previous_avg, 4),
        trend_pct=None if trend_pct is None else round(trend_pct, 2),
        warning_count=warnings,
        critical_count=criticals,
        maintenance_recommendation=recommendation,
        text="\n".join(lines) + "\n",
    )
