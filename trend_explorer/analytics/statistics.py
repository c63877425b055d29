"""
Descriptive statistics for indicator series shown alongside the trend model.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, List, Optional, Sequence, Union

import numpy as np

from trend_explorer.analytics.periods import Frequency, classify_frequency


@dataclass
class SeriesSummary:
    count: int = 0
    mean: float = 0.0
    std_dev: float = 0.0
    cv: float = 0.0  # percent
    minimum: float = 0.0
    maximum: float = 0.0
    slope: float = 0.0
    intercept: float = 0.0
    r2: float = 0.0
    trend: str = "stable"

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def linear_regression(x: Sequence[float], y: Sequence[float]) -> Dict[str, float]:
    """Least-squares fit of ``y`` on ``x`` with R²."""
    n = min(len(x), len(y))
    if n < 2:
        return {"slope": 0.0, "intercept": 0.0, "r2": 0.0}
    xs = np.asarray(x[:n], dtype=float)
    ys = np.asarray(y[:n], dtype=float)

    x_dev = xs - xs.mean()
    denom = float(np.sum(x_dev ** 2))
    if denom == 0:
        return {"slope": 0.0, "intercept": float(ys.mean()), "r2": 0.0}
    slope = float(np.sum(x_dev * (ys - ys.mean())) / denom)
    intercept = float(ys.mean() - slope * xs.mean())

    ss_res = float(np.sum((ys - (slope * xs + intercept)) ** 2))
    ss_tot = float(np.sum((ys - ys.mean()) ** 2))
    r2 = 0.0 if ss_tot == 0 else 1 - ss_res / ss_tot
    return {"slope": slope, "intercept": intercept, "r2": r2}


def moving_average(values: Sequence[float], window: int = 3) -> List[float]:
    """Trailing mean over ``window`` points; shorter at the start of the series."""
    if window < 1:
        raise ValueError("window must be >= 1")
    arr = np.asarray(values, dtype=float)
    out: List[float] = []
    for i in range(len(arr)):
        out.append(float(arr[max(0, i - window + 1): i + 1].mean()))
    return out


def describe_series(values: Sequence[float]) -> SeriesSummary:
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        return SeriesSummary()

    mean = float(arr.mean())
    std_dev = float(arr.std()) if arr.size >= 2 else 0.0
    fit = linear_regression(np.arange(arr.size), arr)
    if fit["slope"] > 0:
        trend = "up"
    elif fit["slope"] < 0:
        trend = "down"
    else:
        trend = "stable"

    return SeriesSummary(
        count=int(arr.size),
        mean=mean,
        std_dev=std_dev,
        cv=std_dev / abs(mean) * 100 if mean != 0 else 0.0,
        minimum=float(arr.min()),
        maximum=float(arr.max()),
        slope=fit["slope"],
        intercept=fit["intercept"],
        r2=fit["r2"],
        trend=trend,
    )


# trailing window per frequency for the overview moving average
MOVING_AVERAGE_WINDOWS = {
    Frequency.DAILY: 30,
    Frequency.MONTHLY: 12,
    Frequency.QUARTERLY: 4,
    Frequency.YEARLY: 5,
}
DEFAULT_MOVING_AVERAGE_WINDOW = 4
MA_NEAR_BAND = 0.02
LOW_VOLATILITY_CV = 15.0
MODERATE_VOLATILITY_CV = 30.0


def moving_average_window(frequency: Optional[Union[str, Frequency]]) -> int:
    return MOVING_AVERAGE_WINDOWS.get(classify_frequency(frequency), DEFAULT_MOVING_AVERAGE_WINDOW)


def position_to_moving_average(current: float, average: float) -> str:
    """``above``/``below`` when ``current`` is more than 2% off ``average``, else ``near``."""
    band = MA_NEAR_BAND * abs(average)
    if current > average + band:
        return "above"
    if current < average - band:
        return "below"
    return "near"


def classify_volatility(cv: float) -> str:
    if cv < LOW_VOLATILITY_CV:
        return "low"
    if cv < MODERATE_VOLATILITY_CV:
        return "moderate"
    return "high"


__all__ = [
    "MOVING_AVERAGE_WINDOWS",
    "SeriesSummary",
    "classify_volatility",
    "describe_series",
    "linear_regression",
    "moving_average",
    "moving_average_window",
    "position_to_moving_average",
]
