"""
Structural time series (local-level/local-trend) trend estimator.

:class:`StructuralTimeSeries` runs the forward Kalman filter and the backward
smoother over a dated series and summarises the final state as confidence
bands, a one-period-ahead forecast with percentiles, trend and uncertainty
tags and innovation-based anomaly flags. It holds no state between calls.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from trend_explorer.analytics.base import (
    MIN_OBSERVATIONS,
    RATIO_FLOOR,
    SeriesInput,
    classify_trend,
    prepare_observations,
)
from trend_explorer.analytics.kalman import backward_smooth, forward_filter
from trend_explorer.analytics.periods import Frequency, next_period_label
from trend_explorer.analytics.variance import (
    ZERO_VARIANCES,
    VarianceParameters,
    VariancePolicy,
    heuristic_variances,
)

logger = logging.getLogger(__name__)

Z_95 = 1.96
# standard normal quantiles for the forecast percentiles
Z_05 = 1.645
Z_25 = 0.675
ANOMALY_THRESHOLD = 2.0
LOW_UNCERTAINTY = 0.10
MODERATE_UNCERTAINTY = 0.25


@dataclass
class ForecastRecord:
    next_period_label: str
    mean: float
    p05: float
    p25: float
    p50: float
    p75: float
    p95: float

    @classmethod
    def from_distribution(cls, label: str, mean: float, stddev: float) -> "ForecastRecord":
        return cls(
            next_period_label=label,
            mean=mean,
            p05=mean - Z_05 * stddev,
            p25=mean - Z_25 * stddev,
            p50=mean,
            p75=mean + Z_25 * stddev,
            p95=mean + Z_05 * stddev,
        )

    def percentiles(self) -> Dict[str, float]:
        return {"p05": self.p05, "p25": self.p25, "p50": self.p50, "p75": self.p75, "p95": self.p95}

    def to_dict(self) -> Dict[str, Any]:
        return {"nextPeriod": self.next_period_label, "mean": self.mean, **self.percentiles()}


@dataclass
class STSResult:
    mu_smoothed: float = 0.0
    mu_ci_low: float = 0.0
    mu_ci_high: float = 0.0
    beta_smoothed: float = 0.0
    beta_ci_low: float = 0.0
    beta_ci_high: float = 0.0
    mu_series: List[float] = field(default_factory=list)
    beta_series: List[float] = field(default_factory=list)
    variances: VarianceParameters = ZERO_VARIANCES
    forecast: ForecastRecord = field(default_factory=lambda: ForecastRecord("N/A", 0.0, 0.0, 0.0, 0.0, 0.0, 0.0))
    direction: str = "stable"
    strength: str = "weak"
    uncertainty: str = "high"
    innovations: List[float] = field(default_factory=list)
    anomaly_indices: List[int] = field(default_factory=list)
    dates: List[str] = field(default_factory=list)
    slope_pct: float = 0.0

    @property
    def level(self) -> float:
        return self.mu_smoothed

    @property
    def slope(self) -> float:
        return self.beta_smoothed

    @property
    def next_period_label(self) -> str:
        return self.forecast.next_period_label

    @property
    def insufficient_data(self) -> bool:
        return not self.mu_series

    @property
    def trend(self) -> List[float]:
        return self.mu_series

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serialisable view using the field names the UI layer expects."""
        return {
            "mu_smoothed": self.mu_smoothed,
            "mu_ci_low": self.mu_ci_low,
            "mu_ci_high": self.mu_ci_high,
            "beta_smoothed": self.beta_smoothed,
            "beta_ci_low": self.beta_ci_low,
            "beta_ci_high": self.beta_ci_high,
            "muSeries": list(self.mu_series),
            "betaSeries": list(self.beta_series),
            **self.variances.to_dict(),
            "forecast": self.forecast.to_dict(),
            "direction": self.direction,
            "strength": self.strength,
            "uncertainty": self.uncertainty,
            "innovations": list(self.innovations),
            "anomalyIndices": list(self.anomaly_indices),
            "dates": list(self.dates),
        }


def default_result() -> STSResult:
    """Sentinel returned for series shorter than three observations."""
    return STSResult()


def confidence_interval(estimate: float, variance: float, z: float = Z_95) -> Tuple[float, float]:
    half_width = z * math.sqrt(max(variance, 0.0))
    return estimate - half_width, estimate + half_width


def classify_uncertainty(ci_low: float, ci_high: float, level: float) -> str:
    relative = (ci_high - ci_low) / max(abs(level), RATIO_FLOOR)
    if relative < LOW_UNCERTAINTY:
        return "low"
    if relative < MODERATE_UNCERTAINTY:
        return "moderate"
    return "high"


def detect_anomalies(innovations: Sequence[float], threshold: float = ANOMALY_THRESHOLD) -> List[int]:
    """Indices whose innovation exceeds ``threshold`` standard deviations.

    The standard deviation is floored so a flat innovation sequence flags
    nothing.
    """
    arr = np.asarray(innovations, dtype=float)
    if arr.size == 0:
        return []
    innov_std = max(float(np.std(arr)), RATIO_FLOOR)
    return [int(i) for i in np.flatnonzero(np.abs(arr) / innov_std > threshold)]


class StructuralTimeSeries:
    """Full Kalman filter + smoother trend estimator."""

    name = "sts"

    def __init__(self, variance_policy: VariancePolicy = heuristic_variances) -> None:
        self.variance_policy = variance_policy

    def analyze(
        self,
        series: SeriesInput,
        frequency: Optional[Union[str, Frequency]] = None,
    ) -> STSResult:
        observations = prepare_observations(series)
        n = len(observations)
        if n < MIN_OBSERVATIONS:
            logger.info("STS skipped: %d observations (need %d)", n, MIN_OBSERVATIONS)
            return default_result()

        y = np.array([obs.value for obs in observations], dtype=float)
        params = self.variance_policy(y)
        if params.is_degenerate:
            logger.info("STS on a constant series of %d points; bands collapse to zero width", n)
        logger.debug(
            "STS n=%d frequency=%s sigma2_epsilon=%.6g sigma2_eta=%.6g sigma2_zeta=%.6g",
            n,
            frequency,
            params.sigma2_epsilon,
            params.sigma2_eta,
            params.sigma2_zeta,
        )

        filtered = forward_filter(y, params)
        smoothed = backward_smooth(filtered, params)

        last_mu = float(smoothed.level[-1])
        last_beta = float(smoothed.slope[-1])
        last_p_level = float(filtered.p_level[-1])
        last_p_slope = float(filtered.p_slope[-1])

        mu_ci_low, mu_ci_high = confidence_interval(last_mu, last_p_level)
        beta_ci_low, beta_ci_high = confidence_interval(last_beta, last_p_slope)

        forecast_std = math.sqrt(max(last_p_level + last_p_slope + params.sigma2_epsilon, 0.0))
        forecast = ForecastRecord.from_distribution(
            next_period_label(observations[-1].date, frequency),
            last_mu + last_beta,
            forecast_std,
        )

        direction, strength, slope_pct = classify_trend(last_beta, y)
        innovations = filtered.innovations.tolist()

        return STSResult(
            mu_smoothed=last_mu,
            mu_ci_low=mu_ci_low,
            mu_ci_high=mu_ci_high,
            beta_smoothed=last_beta,
            beta_ci_low=beta_ci_low,
            beta_ci_high=beta_ci_high,
            mu_series=smoothed.level.tolist(),
            beta_series=smoothed.slope.tolist(),
            variances=params,
            forecast=forecast,
            direction=direction,
            strength=strength,
            uncertainty=classify_uncertainty(mu_ci_low, mu_ci_high, last_mu),
            innovations=innovations,
            anomaly_indices=detect_anomalies(innovations),
            dates=[obs.date.isoformat() for obs in observations],
            slope_pct=slope_pct,
        )


def run_structural_time_series(
    series: SeriesInput,
    frequency: Optional[Union[str, Frequency]] = None,
) -> STSResult:
    return StructuralTimeSeries().analyze(series, frequency)


__all__ = [
    "ForecastRecord",
    "STSResult",
    "StructuralTimeSeries",
    "classify_uncertainty",
    "confidence_interval",
    "default_result",
    "detect_anomalies",
    "run_structural_time_series",
]
