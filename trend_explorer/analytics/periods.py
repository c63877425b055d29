"""
Frequency classification and period labelling for indicator series.

Labels follow the Brazilian conventions used across the dashboard
(``Jun/2023``, ``2º tri 2023``, ``14/06/2023``).
"""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Optional, Union

import pandas as pd

DateLike = Union[str, pd.Timestamp, dt.date, dt.datetime]

MONTH_ABBREVIATIONS = [
    "Jan", "Fev", "Mar", "Abr", "Mai", "Jun",
    "Jul", "Ago", "Set", "Out", "Nov", "Dez",
]


class Frequency(str, Enum):
    DAILY = "daily"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"
    UNKNOWN = "unknown"


FREQUENCY_ALIASES = {
    "daily": Frequency.DAILY,
    "diaria": Frequency.DAILY,
    "diária": Frequency.DAILY,
    "monthly": Frequency.MONTHLY,
    "mensal": Frequency.MONTHLY,
    "quarterly": Frequency.QUARTERLY,
    "trimestral": Frequency.QUARTERLY,
    "yearly": Frequency.YEARLY,
    "annual": Frequency.YEARLY,
    "anual": Frequency.YEARLY,
}

# one calendar step per frequency; unknown advances like monthly
_PERIOD_OFFSETS = {
    Frequency.DAILY: pd.DateOffset(days=1),
    Frequency.MONTHLY: pd.DateOffset(months=1),
    Frequency.QUARTERLY: pd.DateOffset(months=3),
    Frequency.YEARLY: pd.DateOffset(years=1),
    Frequency.UNKNOWN: pd.DateOffset(months=1),
}


def classify_frequency(tag: Optional[Union[str, Frequency]]) -> Frequency:
    """Map a free-form frequency tag onto :class:`Frequency`.

    Matching is case-insensitive; ``None`` and unrecognised tags give
    ``Frequency.UNKNOWN``, which every formatter treats like monthly.
    """
    if isinstance(tag, Frequency):
        return tag
    if tag is None:
        return Frequency.UNKNOWN
    return FREQUENCY_ALIASES.get(str(tag).strip().lower(), Frequency.UNKNOWN)


def _to_timestamp(value: DateLike) -> Optional[pd.Timestamp]:
    ts = pd.to_datetime(value, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    return pd.Timestamp(ts)


def _quarter(ts: pd.Timestamp) -> int:
    return (ts.month - 1) // 3 + 1


def format_period_label(
    date: DateLike,
    frequency: Optional[Union[str, Frequency]],
    abbreviated: bool = False,
) -> str:
    """Render ``date`` as a period label for ``frequency``.

    ``abbreviated`` switches monthly labels from ``6/2023`` to ``Jun/2023``,
    the form used for forecast periods. Dates that cannot be parsed are
    echoed back unchanged.
    """
    ts = _to_timestamp(date)
    if ts is None:
        return str(date)

    freq = classify_frequency(frequency)
    if freq is Frequency.YEARLY:
        return str(ts.year)
    if freq is Frequency.QUARTERLY:
        return f"{_quarter(ts)}º tri {ts.year}"
    if freq is Frequency.DAILY:
        return ts.strftime("%d/%m/%Y")
    if freq is Frequency.MONTHLY and abbreviated:
        return f"{MONTH_ABBREVIATIONS[ts.month - 1]}/{ts.year}"
    return f"{ts.month}/{ts.year}"


def format_axis_label(date: DateLike, frequency: Optional[Union[str, Frequency]]) -> str:
    """Compact label for chart x-axes (two-digit years)."""
    ts = _to_timestamp(date)
    if ts is None:
        return str(date)

    freq = classify_frequency(frequency)
    short_year = str(ts.year)[-2:]
    if freq is Frequency.YEARLY:
        return str(ts.year)
    if freq is Frequency.QUARTERLY:
        return f"{_quarter(ts)}ºT/{short_year}"
    if freq is Frequency.DAILY:
        return f"{ts.day}/{ts.month}"
    return f"{ts.month}/{short_year}"


def next_period_date(last_date: DateLike, frequency: Optional[Union[str, Frequency]]) -> pd.Timestamp:
    """Advance ``last_date`` by one period of ``frequency``.

    Month arithmetic clamps to the end of shorter months.
    """
    ts = _to_timestamp(last_date)
    if ts is None:
        raise ValueError(f"Cannot parse date: {last_date!r}")
    return ts + _PERIOD_OFFSETS[classify_frequency(frequency)]


def next_period_label(last_date: DateLike, frequency: Optional[Union[str, Frequency]]) -> str:
    return format_period_label(next_period_date(last_date, frequency), frequency, abbreviated=True)


def _months_between(start: pd.Timestamp, end: pd.Timestamp) -> int:
    return (end.year - start.year) * 12 + (end.month - start.month)


def detect_frequency(count: int, start_date: DateLike, end_date: DateLike) -> Frequency:
    """Guess the sampling cadence from the average number of records per month.

    A density heuristic that assumes roughly evenly spaced records; it is
    not a period-detection algorithm.
    """
    start = _to_timestamp(start_date)
    end = _to_timestamp(end_date)
    if start is None or end is None:
        return Frequency.UNKNOWN

    avg_per_month = count / max(_months_between(start, end), 1)
    if avg_per_month > 20:
        return Frequency.DAILY
    if avg_per_month > 0.75:
        return Frequency.MONTHLY
    if avg_per_month > 0.3:
        return Frequency.QUARTERLY
    return Frequency.YEARLY


__all__ = [
    "Frequency",
    "MONTH_ABBREVIATIONS",
    "classify_frequency",
    "format_period_label",
    "format_axis_label",
    "next_period_date",
    "next_period_label",
    "detect_frequency",
]
