"""
Layout helpers for the Streamlit application (page setup and sidebar).
"""

from __future__ import annotations

import datetime as dt
import math
from typing import List, Optional, Tuple

import pandas as pd
import streamlit as st

from trend_explorer.config import ESTIMATOR_LABELS, FREQUENCY_OPTIONS
from trend_explorer.data.series import DEFAULT_FILTERS, SeriesFilters, indicator_catalog

DATE_PRESETS = ["All", "10Y", "5Y", "3Y", "1Y", "YTD", "Custom"]
ALL_CATEGORIES = "All"


def setup_page() -> None:
    """Set Streamlit page configuration and top-level styling."""
    st.set_page_config(
        page_title="Indicator Trend Explorer",
        layout="wide",
        page_icon=":chart_with_upwards_trend:",
    )
    # Reset buttons are rendered as PRIMARY and shown in red in the sidebar
    _inject_sidebar_primary_button_red()


def _as_date(value, fallback_ts: pd.Timestamp) -> dt.date:
    """Return a datetime.date from various input types, with a Timestamp fallback.

    Handles pd.Timestamp, datetime.datetime, datetime.date, strings, and None.
    """
    if isinstance(value, pd.Timestamp):
        return value.date()
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return fallback_ts.date()
    parsed = pd.to_datetime(value, errors="coerce")
    if pd.isna(parsed):
        return fallback_ts.date()
    return parsed.date()


def _derive_date_range(date_series: pd.Series) -> Tuple[Optional[pd.Timestamp], Optional[pd.Timestamp]]:
    if date_series.empty:
        return None, None

    start_default = date_series.min()
    end_default = date_series.max()

    preset = st.sidebar.selectbox(
        "Date Preset",
        DATE_PRESETS,
        index=0,
        key="sa_date_preset",
        help="Choose a preset or select Custom to use the date range below.",
    )

    start_input = None
    end_input = None
    if preset == "Custom":
        col_start, col_end = st.sidebar.columns(2)
        with col_start:
            start_input = st.date_input(
                "Start",
                value=_as_date(st.session_state.get("sa_date_start"), start_default),
                key="sa_date_start",
            )
        with col_end:
            end_input = st.date_input(
                "End",
                value=_as_date(st.session_state.get("sa_date_end"), end_default),
                key="sa_date_end",
            )

    # Presets count back from the last observation, not from today
    end = end_default
    start = start_default
    if preset == "10Y":
        start = end - pd.DateOffset(years=10)
    elif preset == "5Y":
        start = end - pd.DateOffset(years=5)
    elif preset == "3Y":
        start = end - pd.DateOffset(years=3)
    elif preset == "1Y":
        start = end - pd.DateOffset(years=1)
    elif preset == "YTD":
        start = pd.Timestamp(year=end.year, month=1, day=1)
    elif preset == "Custom":
        start = pd.to_datetime(start_input)
        end = pd.to_datetime(end_input)

    if start is not None and end is not None and start > end:
        st.sidebar.warning("Start date must be before or equal to End date. Adjusting range.")
        start, end = end, start

    return start, end


def _indicator_options(catalog: pd.DataFrame, category: str) -> List[str]:
    if category != ALL_CATEGORIES:
        catalog = catalog[catalog["category"] == category]
    return catalog["indicator_code"].tolist()


def sidebar_filters_ui(
    df: pd.DataFrame, defaults: SeriesFilters = DEFAULT_FILTERS
) -> SeriesFilters:
    """
    Render the sidebar filter controls and return the selected values.
    """
    st.sidebar.header("Series Selection")
    catalog = indicator_catalog(df)
    names = dict(zip(catalog["indicator_code"], catalog["indicator_name"]))
    counts = dict(zip(catalog["indicator_code"], catalog["observations"]))

    with st.sidebar.expander("Indicator", expanded=True):
        categories = sorted(catalog["category"].dropna().unique().tolist())
        category = st.selectbox(
            "Category",
            options=[ALL_CATEGORIES] + categories,
            key="sa_category",
        )

        options = _indicator_options(catalog, category)
        if not options:
            st.info("No indicators available for this category.")
            indicator_code = None
        else:
            default_index = options.index(defaults.indicator_code) if defaults.indicator_code in options else 0
            indicator_code = st.selectbox(
                "Indicator",
                options=options,
                index=default_index,
                key="sa_indicator",
                format_func=lambda code: f"{names.get(code, code)} ({int(counts.get(code, 0))})",
            )

        if indicator_code is not None:
            date_series = df.loc[df["indicator_code"] == indicator_code, "reference_date"].dropna().sort_values()
        else:
            date_series = pd.Series(dtype="datetime64[ns]")
        date_range = _derive_date_range(date_series)

    with st.sidebar.expander("Model", expanded=True):
        frequency_labels = list(FREQUENCY_OPTIONS.keys())
        frequency_values = list(FREQUENCY_OPTIONS.values())
        frequency_label = st.selectbox(
            "Frequency",
            frequency_labels,
            index=frequency_values.index(defaults.frequency_override)
            if defaults.frequency_override in frequency_values
            else 0,
            key="sa_frequency",
            help="Auto uses the indicator's declared frequency, or infers it from the dates.",
        )

        estimator_keys = list(ESTIMATOR_LABELS.keys())
        estimator = st.radio(
            "Estimator",
            options=estimator_keys,
            index=estimator_keys.index(defaults.estimator) if defaults.estimator in estimator_keys else 0,
            key="sa_estimator",
            format_func=lambda key: ESTIMATOR_LABELS[key],
        )

        if st.button("Reset Selection", key="sa_reset_selection", type="primary"):
            _clear_state_prefixes([
                "sa_category",
                "sa_indicator",
                "sa_date_preset",
                "sa_date_start",
                "sa_date_end",
                "sa_frequency",
                "sa_estimator",
            ])
            st.rerun()

    return SeriesFilters(
        indicator_code=indicator_code,
        date_range=date_range,
        frequency_override=FREQUENCY_OPTIONS[frequency_label],
        estimator=estimator,
    )


def _clear_state_prefixes(prefixes: List[str]) -> None:
    for prefix in prefixes:
        for key in list(st.session_state.keys()):
            if key.startswith(prefix):
                del st.session_state[key]


def _inject_sidebar_primary_button_red() -> None:
    """Style PRIMARY buttons in the sidebar as red so reset actions stand out."""
    st.sidebar.markdown(
        """
        <style>
        div[data-testid="stSidebar"] button[kind="primary"],
        div[data-testid="stSidebar"] button[data-testid="baseButton-primary"] {
            background-color: #e53935 !important; /* red 600 */
            border-color: #e53935 !important;
            color: #ffffff !important;
        }
        div[data-testid="stSidebar"] button[kind="primary"]:hover,
        div[data-testid="stSidebar"] button[data-testid="baseButton-primary"]:hover {
            background-color: #c62828 !important; /* red 800 */
            border-color: #c62828 !important;
            color: #ffffff !important;
        }
        </style>
        """,
        unsafe_allow_html=True,
    )
