"""
Shared contract for trend estimators: input normalisation, trend
classification and the :class:`TrendEstimator` protocol.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from trend_explorer.analytics.periods import Frequency

MIN_OBSERVATIONS = 3
RATIO_FLOOR = 0.001
STABLE_SLOPE_PCT = 0.5
STRONG_SLOPE_PCT = 2.0

Direction = str  # "up" | "down" | "stable"
Strength = str  # "strong" | "moderate" | "weak"
Uncertainty = str  # "low" | "moderate" | "high"


@dataclass(frozen=True)
class Observation:
    date: pd.Timestamp
    value: float

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date.isoformat(), "value": self.value}


SeriesInput = Union[
    pd.DataFrame,
    Iterable[Union[Observation, Mapping[str, Any], Tuple[Any, Any]]],
]


def _as_pair(item: Any) -> Tuple[Any, Any]:
    if isinstance(item, Observation):
        return item.date, item.value
    if isinstance(item, Mapping):
        return item["date"], item["value"]
    date, value = item
    return date, value


def prepare_observations(series: SeriesInput) -> List[Observation]:
    """Normalise ``series`` into observations sorted by date.

    Accepts a DataFrame with ``date``/``value`` columns or an iterable of
    :class:`Observation`, ``{"date", "value"}`` mappings or ``(date, value)``
    pairs. The sort is stable, so repeated timestamps keep their input
    order. Parsing errors from pandas or ``float()`` propagate.
    """
    if isinstance(series, pd.DataFrame):
        pairs = list(zip(series["date"].tolist(), series["value"].tolist()))
    else:
        pairs = [_as_pair(item) for item in series]
    if not pairs:
        return []

    # per-element parsing so "2023-01" and "2023-02-01" can share a series
    dates = pd.to_datetime(pd.Series([d for d, _ in pairs]), format="mixed")
    values = [float(v) for _, v in pairs]
    order = np.argsort(dates.to_numpy(), kind="stable")
    return [Observation(date=dates.iloc[i], value=values[i]) for i in order]


def classify_trend(slope: float, values: Sequence[float]) -> Tuple[Direction, Strength, float]:
    """Classify ``slope`` relative to the mean level of ``values``.

    Returns ``(direction, strength, slope_pct)`` where ``slope_pct`` is the
    slope as a percentage of ``max(|mean|, 0.001)``.
    """
    mean = float(np.mean(values)) if len(values) else 0.0
    slope_pct = 100.0 * slope / max(abs(mean), RATIO_FLOOR)
    if abs(slope_pct) < STABLE_SLOPE_PCT:
        return "stable", "weak", slope_pct
    direction = "up" if slope_pct > 0 else "down"
    strength = "strong" if abs(slope_pct) > STRONG_SLOPE_PCT else "moderate"
    return direction, strength, slope_pct


class TrendEstimator(Protocol):
    """Anything that turns a dated series into a trend result.

    Results expose ``level``, ``slope``, ``direction``, ``strength``,
    ``uncertainty``, ``next_period_label``, ``insufficient_data`` and
    ``to_dict()``.
    """

    name: str

    def analyze(self, series: SeriesInput, frequency: Optional[Union[str, Frequency]] = None) -> Any:
        ...


__all__ = [
    "MIN_OBSERVATIONS",
    "RATIO_FLOOR",
    "Observation",
    "SeriesInput",
    "TrendEstimator",
    "classify_trend",
    "prepare_observations",
]
