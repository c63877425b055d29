"""
Filter utilities that narrow the indicator table down to the single series
handed to the trend estimators.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from trend_explorer.analytics.periods import Frequency, classify_frequency, detect_frequency


@dataclass
class SeriesFilters:
    indicator_code: Optional[str]
    date_range: Tuple[Optional[pd.Timestamp], Optional[pd.Timestamp]]
    frequency_override: Optional[str]
    estimator: str


DEFAULT_FILTERS = SeriesFilters(
    indicator_code=None,
    date_range=(None, None),
    frequency_override=None,
    estimator="sts",
)

CATALOG_COLUMNS = [
    "indicator_code",
    "indicator_name",
    "category",
    "unit",
    "frequency",
    "observations",
    "first_date",
    "last_date",
]


def _first_valid(series: pd.Series) -> Optional[str]:
    cleaned = series.dropna()
    if cleaned.empty:
        return None
    return str(cleaned.iloc[0])


def indicator_catalog(df: pd.DataFrame) -> pd.DataFrame:
    """One row per indicator with its metadata and coverage."""
    if df.empty or "indicator_code" not in df:
        return pd.DataFrame(columns=CATALOG_COLUMNS)

    records: List[Dict[str, Any]] = []
    for code, group in df.groupby("indicator_code", sort=True):
        records.append(
            {
                "indicator_code": code,
                "indicator_name": _first_valid(group["indicator_name"]) or str(code),
                "category": _first_valid(group["category"]) if "category" in group else None,
                "unit": _first_valid(group["unit"]) if "unit" in group else None,
                "frequency": _first_valid(group["frequency"]) if "frequency" in group else None,
                "observations": int(len(group)),
                "first_date": group["reference_date"].min(),
                "last_date": group["reference_date"].max(),
            }
        )
    return pd.DataFrame(records, columns=CATALOG_COLUMNS)


def select_series(df: pd.DataFrame, filters: SeriesFilters) -> pd.DataFrame:
    """Rows of the selected indicator inside the date range, oldest first."""
    if df.empty or filters.indicator_code is None:
        return df.iloc[0:0]

    selected = df[df["indicator_code"] == filters.indicator_code]
    start, end = filters.date_range
    if start is not None:
        selected = selected[selected["reference_date"] >= start]
    if end is not None:
        selected = selected[selected["reference_date"] <= end]
    return selected.sort_values("reference_date", kind="stable").reset_index(drop=True)


def to_observations(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """``{date, value}`` records in the shape the estimators accept."""
    if df.empty:
        return []
    return [
        {"date": date, "value": float(value)}
        for date, value in zip(df["reference_date"], df["value"])
    ]


def resolve_frequency(df: pd.DataFrame, filters: SeriesFilters) -> Frequency:
    """Pick the frequency for a series: user override, declared tag, then density."""
    if filters.frequency_override:
        return classify_frequency(filters.frequency_override)

    if "frequency" in df and not df.empty:
        declared = classify_frequency(_first_valid(df["frequency"]))
        if declared is not Frequency.UNKNOWN:
            return declared

    if len(df) < 2:
        return Frequency.UNKNOWN
    return detect_frequency(len(df), df["reference_date"].min(), df["reference_date"].max())


def serialize_filters(filters: SeriesFilters) -> Dict[str, Any]:
    """
    Convert the SeriesFilters dataclass to a JSON-serialisable dictionary to be
    stored in session_state or used for logging/debugging.
    """
    return {
        "indicator_code": filters.indicator_code,
        "date_range": tuple(
            v.isoformat() if hasattr(v, "isoformat") else v for v in filters.date_range
        ),
        "frequency_override": filters.frequency_override,
        "estimator": filters.estimator,
    }
