"""
tests/test_trends.py
────────────────────
Tests for short-window trend analysis.
"""
import pytest

from handover.analytics.trends import (
    INSPECTION_RECOMMENDATION,
    INSUFFICIENT_DATA_TEXT,
    PREVENTIVE_RECOMMENDATION,
    analyze_trend,
    classify_trend,
    compute_trend_pct,
)
from handover.data.models import TrendDirection


class TestComputeTrendPct:
    def test_increase(self):
        assert compute_trend_pct(125.0, 100.0) == pytest.approx(25.0)

    def test_decrease(self):
        assert compute_trend_pct(80.0, 100.0) == pytest.approx(-20.0)

    def test_zero_baseline_zero_recent(self):
        assert compute_trend_pct(0.0, 0.0) == 0.0

    def test_zero_baseline_nonzero_recent(self):
        assert compute_trend_pct(5.0, 0.0) is None


class TestClassifyTrend:
    @pytest.mark.parametrize(
        "pct, expected",
        [
            (0.0, TrendDirection.STABLE),
            (5.0, TrendDirection.STABLE),
            (-5.0, TrendDirection.STABLE),
            (5.01, TrendDirection.INCREASING),
            (-5.01, TrendDirection.DECREASING),
            (None, TrendDirection.INDETERMINATE),
        ],
    )
    def test_bands(self, pct, expected):
        assert classify_trend(pct) == expected


class TestAnalyzeTrend:
    def test_insufficient_data(self, history):
        result = analyze_trend(history([100.0, 100.0]))
        assert result.direction == TrendDirection.INSUFFICIENT_DATA
        assert result.text == INSUFFICIENT_DATA_TEXT

    def test_exactly_three_is_indeterminate(self, history):
        result = analyze_trend(history([100.0, 101.0, 102.0]))
        assert result.direction == TrendDirection.INDETERMINATE
        assert result.previous_average is None
        assert "Previous average: n/a" in result.text

    def test_increasing(self, history):
        result = analyze_trend(history([125.0, 125.0, 125.0, 100.0, 100.0, 100.0]))
        assert result.direction == TrendDirection.INCREASING
        assert result.trend_pct == 25.0
        assert "⬆️ Increasing (25.0%)" in result.text
        assert "upward trend detected" in result.text

    def test_decreasing(self, history):
        result = analyze_trend(history([80.0, 80.0, 80.0, 100.0, 100.0, 100.0]))
        assert result.direction == TrendDirection.DECREASING
        assert "⬇️ Decreasing (-20.0%)" in result.text

    def test_small_change_is_stable(self, history):
        result = analyze_trend(history([101.0, 101.0, 101.0, 100.0, 100.0, 100.0]))
        assert result.direction == TrendDirection.STABLE
        assert "Trend: Stable (+1.0%)" in result.text

    def test_exact_five_percent_is_stable(self, history):
        result = analyze_trend(history([105.0, 105.0, 105.0, 100.0, 100.0, 100.0]))
        assert result.direction == TrendDirection.STABLE

    def test_partial_previous_window(self, history):
        result = analyze_trend(history([120.0, 120.0, 120.0, 100.0]))
        assert result.previous_average == 100.0
        assert result.direction == TrendDirection.INCREASING

    def test_text_layout(self, history):
        text = analyze_trend(history([100.0] * 6)).text
        assert text.startswith("\n📊 TREND ANALYSIS:\n")
        assert text.endswith("\n")

    def test_critical_history_recommends_inspection(self, history):
        result = analyze_trend(history([100.0, 200.0, 100.0, 100.0]))
        assert result.critical_count == 1
        assert result.maintenance_recommendation == INSPECTION_RECOMMENDATION
        assert "1 critical reading(s) in last 10 entries" in result.text

    def test_three_warnings_recommend_preventive(self, history):
        result = analyze_trend(history([160.0, 160.0, 160.0, 100.0]))
        assert result.warning_count == 3
        assert result.maintenance_recommendation == PREVENTIVE_RECOMMENDATION

    def test_two_warnings_no_recommendation(self, history):
        result = analyze_trend(history([160.0, 160.0, 100.0, 100.0]))
        assert result.maintenance_recommendation is None

    def test_critical_takes_precedence_over_warnings(self, history):
        result = analyze_trend(history([160.0, 160.0, 160.0, 200.0]))
        assert result.maintenance_recommendation == INSPECTION_RECOMMENDATION

    def test_only_window_considered(self, history):
        values = [100.0] * 10 + [200.0] * 5
        result = analyze_trend(history(values))
        assert result.sample_size == 10
        assert result.critical_count == 0
