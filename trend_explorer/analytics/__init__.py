"""
Trend estimation for indicator series.

Two interchangeable estimators share the :class:`TrendEstimator` contract:

- ``"sts"``: Kalman filter + backward smoother with percentile forecast
  (:class:`StructuralTimeSeries`)
- ``"simple"``: fixed-gain filter for a quick trend arrow
  (:class:`SimpleKalmanTrend`)

Nothing in this package touches Streamlit or keeps state between calls.
"""

from __future__ import annotations

from typing import Callable, Dict

from trend_explorer.analytics.base import Observation, TrendEstimator, classify_trend, prepare_observations
from trend_explorer.analytics.periods import (
    Frequency,
    classify_frequency,
    detect_frequency,
    format_axis_label,
    format_period_label,
    next_period_date,
    next_period_label,
)
from trend_explorer.analytics.simple import SimpleKalmanTrend, SimpleTrendResult
from trend_explorer.analytics.sts import (
    ForecastRecord,
    STSResult,
    StructuralTimeSeries,
    default_result,
    run_structural_time_series,
)
from trend_explorer.analytics.variance import VarianceParameters, heuristic_variances

ESTIMATORS: Dict[str, Callable[[], TrendEstimator]] = {
    StructuralTimeSeries.name: StructuralTimeSeries,
    SimpleKalmanTrend.name: SimpleKalmanTrend,
}


def get_estimator(name: str) -> TrendEstimator:
    """Instantiate the estimator registered under ``name``."""
    try:
        factory = ESTIMATORS[name]
    except KeyError:
        raise ValueError(f"Unknown estimator {name!r}; expected one of {sorted(ESTIMATORS)}") from None
    return factory()


__all__ = [
    "ESTIMATORS",
    "ForecastRecord",
    "Frequency",
    "Observation",
    "STSResult",
    "SimpleKalmanTrend",
    "SimpleTrendResult",
    "StructuralTimeSeries",
    "TrendEstimator",
    "VarianceParameters",
    "classify_frequency",
    "classify_trend",
    "default_result",
    "detect_frequency",
    "format_axis_label",
    "format_period_label",
    "get_estimator",
    "heuristic_variances",
    "next_period_date",
    "next_period_label",
    "prepare_observations",
    "run_structural_time_series",
]
