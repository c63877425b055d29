"""
Fixed-gain trend filter for call sites that only need a quick trend arrow.

No variance tracking, no smoothing pass and no percentile forecast: a single
gain drives both the level and the (damped) slope updates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

import numpy as np

from trend_explorer.analytics.base import (
    MIN_OBSERVATIONS,
    RATIO_FLOOR,
    SeriesInput,
    classify_trend,
    prepare_observations,
)
from trend_explorer.analytics.kalman import initial_slope
from trend_explorer.analytics.periods import Frequency, next_period_label
from trend_explorer.analytics.variance import OBSERVATION_NOISE_SCALE, population_std

logger = logging.getLogger(__name__)

FIXED_GAIN = 0.3
SLOPE_GAIN_FACTOR = 0.1
FORECAST_STD_SCALE = 1.5
Z_95 = 1.96


@dataclass
class SimpleForecast:
    value: float = 0.0
    lower: float = 0.0
    upper: float = 0.0
    confidence: float = 0.95

    def to_dict(self) -> Dict[str, float]:
        return {"value": self.value, "lower": self.lower, "upper": self.upper, "confidence": self.confidence}


@dataclass
class SimpleTrendResult:
    trend: List[float] = field(default_factory=list)
    level: float = 0.0
    slope: float = 0.0
    forecast: SimpleForecast = field(default_factory=SimpleForecast)
    direction: str = "stable"
    strength: str = "weak"
    uncertainty: str = "high"
    next_period_label: str = "N/A"
    percentage_change: float = 0.0

    @property
    def insufficient_data(self) -> bool:
        return not self.trend

    def to_dict(self) -> Dict[str, Any]:
        return {
            "trend": list(self.trend),
            "level": self.level,
            "slope": self.slope,
            "forecast": self.forecast.to_dict(),
            "direction": self.direction,
            "strength": self.strength,
            "uncertainty": self.uncertainty,
            "nextPeriodLabel": self.next_period_label,
            "percentageChange": self.percentage_change,
        }


def _forecast_uncertainty(forecast_std: float, forecast_value: float) -> str:
    cv = forecast_std / max(abs(forecast_value), RATIO_FLOOR) * 100
    if cv < 5:
        return "low"
    if cv < 15:
        return "moderate"
    return "high"


class SimpleKalmanTrend:
    name = "simple"

    def __init__(self, gain: float = FIXED_GAIN) -> None:
        self.gain = gain

    def analyze(
        self,
        series: SeriesInput,
        frequency: Optional[Union[str, Frequency]] = None,
    ) -> SimpleTrendResult:
        observations = prepare_observations(series)
        n = len(observations)
        if n < MIN_OBSERVATIONS:
            logger.info("Quick trend skipped: %d observations (need %d)", n, MIN_OBSERVATIONS)
            return SimpleTrendResult()

        y = np.array([obs.value for obs in observations], dtype=float)
        level = float(y[0])
        slope = initial_slope(y)
        sigma_obs = OBSERVATION_NOISE_SCALE * population_std(y)

        trend: List[float] = []
        for value in y.tolist():
            predicted = level + slope
            error = value - predicted
            level = predicted + self.gain * error
            slope = slope + self.gain * SLOPE_GAIN_FACTOR * error
            trend.append(level)

        forecast_value = level + slope
        forecast_std = FORECAST_STD_SCALE * sigma_obs
        direction, strength, _ = classify_trend(slope, y)

        last_value = float(y[-1])
        percentage_change = (forecast_value - last_value) / abs(last_value) * 100 if last_value != 0 else 0.0

        return SimpleTrendResult(
            trend=trend,
            level=level,
            slope=slope,
            forecast=SimpleForecast(
                value=forecast_value,
                lower=forecast_value - Z_95 * forecast_std,
                upper=forecast_value + Z_95 * forecast_std,
            ),
            direction=direction,
            strength=strength,
            uncertainty=_forecast_uncertainty(forecast_std, forecast_value),
            next_period_label=next_period_label(observations[-1].date, frequency),
            percentage_change=percentage_change,
        )


__all__ = ["SimpleForecast", "SimpleKalmanTrend", "SimpleTrendResult"]
