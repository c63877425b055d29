from __future__ import annotations

import logging
from typing import Any, Optional, Tuple

import pandas as pd
import streamlit as st

from trend_explorer.analytics import get_estimator
from trend_explorer.analytics.periods import Frequency
from trend_explorer.config import DEFAULT_SETTINGS
from trend_explorer.data.series import to_observations

logger = logging.getLogger(__name__)


@st.cache_data(show_spinner=False, max_entries=DEFAULT_SETTINGS.analysis_cache_entries)
def cached_analysis(
    dates: Tuple[str, ...],
    values: Tuple[float, ...],
    frequency: str,
    estimator: str,
) -> Any:
    """Run ``estimator`` over the series, memoised on the full input tuple.

    Streamlit keeps at most ``analysis_cache_entries`` results; the
    estimators themselves hold no cache.
    """
    logger.debug("Cache miss: %s over %d points (%s)", estimator, len(values), frequency)
    return get_estimator(estimator).analyze(list(zip(dates, values)), frequency)


def run_analysis(series_df: pd.DataFrame, frequency: Frequency, estimator: str) -> Any:
    records = to_observations(series_df)
    dates = tuple(record["date"].isoformat() for record in records)
    values = tuple(record["value"] for record in records)
    return cached_analysis(dates, values, frequency.value, estimator)


def latest_and_previous(
    df: pd.DataFrame,
    value_col: str = "value",
) -> Tuple[Optional[float], Optional[float]]:
    if value_col not in df.columns or df.empty:
        return None, None
    values = pd.to_numeric(df[value_col], errors="coerce").dropna()
    if values.empty:
        return None, None
    latest = float(values.iloc[-1])
    previous = float(values.iloc[-2]) if len(values) > 1 else None
    return latest, previous


def pct_change(current: Optional[float], previous: Optional[float]) -> Optional[float]:
    if current is None or previous in (None, 0):
        return None
    try:
        return ((current - previous) / abs(previous)) * 100
    except ZeroDivisionError:
        return None
