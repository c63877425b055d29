"""Local-level/local-trend Kalman filter with a backward smoothing pass."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from trend_explorer.analytics.variance import VarianceParameters

# Slope corrections are halved relative to the textbook gain so the slope
# does not oscillate on noisy series.
SLOPE_DAMPING = 0.5
INITIAL_SLOPE_WINDOW = 5


@dataclass
class FilterOutput:
    level: np.ndarray
    slope: np.ndarray
    p_level: np.ndarray
    p_slope: np.ndarray
    innovations: np.ndarray
    level_gain: np.ndarray
    slope_gain: np.ndarray

    def __len__(self) -> int:
        return len(self.level)


@dataclass
class SmootherOutput:
    level: np.ndarray
    slope: np.ndarray

    def __len__(self) -> int:
        return len(self.level)


def initial_slope(values: Sequence[float]) -> float:
    """Average increment over the first ``min(5, n - 1)`` steps."""
    n = len(values)
    if n <= 1:
        return 0.0
    window = min(INITIAL_SLOPE_WINDOW, n - 1)
    return (float(values[window]) - float(values[0])) / window


def forward_filter(values: Sequence[float], params: VarianceParameters) -> FilterOutput:
    """Run the forward Kalman recursion over ``values``.

    Parameters
    ----------
    values : sequence of float
        Observations in ascending time order, at least one element.
    params : VarianceParameters
        Observation, level-shock and slope-shock variances.

    Returns
    -------
    FilterOutput
        Filtered level and slope, their error variances, the one-step
        innovations and the gains applied at each step, all of length ``n``.

    With all variances at zero the innovation variance vanishes; the level
    gain is then taken as 1 and the slope gain as 0, so the filter follows
    the observations exactly.
    """
    y = np.asarray(values, dtype=float)
    n = len(y)

    level_out = np.zeros(n)
    slope_out = np.zeros(n)
    p_level_out = np.zeros(n)
    p_slope_out = np.zeros(n)
    innovations = np.zeros(n)
    level_gain = np.zeros(n)
    slope_gain = np.zeros(n)

    level = float(y[0]) if n else 0.0
    slope = initial_slope(y)
    p_level = params.sigma2_eta
    p_slope = params.sigma2_zeta

    for t in range(n):
        # Predict
        level_pred = level + slope
        slope_pred = slope
        p_level_pred = p_level + params.sigma2_eta
        p_slope_pred = p_slope + params.sigma2_zeta

        innovation = y[t] - level_pred
        f = p_level_pred + params.sigma2_epsilon

        if f > 0:
            k_level = p_level_pred / f
            k_slope = SLOPE_DAMPING * p_slope_pred / f
        else:
            k_level = 1.0
            k_slope = 0.0

        # Update
        level = level_pred + k_level * innovation
        slope = slope_pred + k_slope * innovation
        p_level = p_level_pred * (1 - k_level)
        p_slope = p_slope_pred * (1 - SLOPE_DAMPING * k_slope)

        level_out[t] = level
        slope_out[t] = slope
        p_level_out[t] = p_level
        p_slope_out[t] = p_slope
        innovations[t] = innovation
        level_gain[t] = k_level
        slope_gain[t] = k_slope

    return FilterOutput(
        level=level_out,
        slope=slope_out,
        p_level=p_level_out,
        p_slope=p_slope_out,
        innovations=innovations,
        level_gain=level_gain,
        slope_gain=slope_gain,
    )


def backward_smooth(filtered: FilterOutput, params: VarianceParameters) -> SmootherOutput:
    """Refine filtered states with later observations.

    A simplified fixed-interval pass: the filtered level plus slope stands in
    for the one-step prediction and a scalar gain replaces the smoother gain
    matrix. The final index is left equal to the filtered state.
    """
    n = len(filtered)
    level = np.array(filtered.level, dtype=float)
    slope = np.array(filtered.slope, dtype=float)
    if n == 0:
        return SmootherOutput(level=level, slope=slope)

    for t in range(n - 2, -1, -1):
        denom = filtered.p_level[t] + params.sigma2_eta
        gain = filtered.p_level[t] / denom if denom > 0 else 0.0
        level[t] = filtered.level[t] + gain * (level[t + 1] - filtered.level[t] - filtered.slope[t])
        slope[t] = filtered.slope[t] + SLOPE_DAMPING * gain * (slope[t + 1] - filtered.slope[t])

    return SmootherOutput(level=level, slope=slope)


__all__ = [
    "FilterOutput",
    "SmootherOutput",
    "initial_slope",
    "forward_filter",
    "backward_smooth",
]
