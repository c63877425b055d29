import trend_explorer.bootstrap_env  # must be first to set env/secrets
import logging

import streamlit as st

from trend_explorer.analytics.periods import format_period_label
from trend_explorer.config import ESTIMATOR_LABELS, TABS, configure_logging
from trend_explorer.data.loader import load_indicators
from trend_explorer.data.series import indicator_catalog, resolve_frequency, select_series, serialize_filters
from trend_explorer.ui.components.formatting import format_number
from trend_explorer.ui.layout import setup_page, sidebar_filters_ui
from trend_explorer.ui.pages import data_quality, data_table, overview, trend_analysis
from trend_explorer.ui.pages.context import PageContext
from trend_explorer.ui.pages.helpers import run_analysis

logger = logging.getLogger(__name__)

PAGE_RENDERERS = {
    "overview": overview.render,
    "trend_analysis": trend_analysis.render,
    "data_table": data_table.render,
    "data_quality": data_quality.render,
}


def _active_filter_summary(filters, series_df, frequency) -> None:
    badges = [f"Model: {ESTIMATOR_LABELS.get(filters.estimator, filters.estimator)}"]
    badges.append(f"Frequency: {frequency.value}" + (" (override)" if filters.frequency_override else ""))
    if not series_df.empty:
        first = format_period_label(series_df["reference_date"].iloc[0], frequency)
        last = format_period_label(series_df["reference_date"].iloc[-1], frequency)
        badges.append(f"Period: {first} – {last}")
    st.markdown("**" + " | ".join(badges) + "**")
    st.caption(f"Showing {format_number(len(series_df), 0)} observations after filters.")


def main() -> None:
    configure_logging()
    setup_page()
    st.title("Indicator Trend Explorer")

    if st.sidebar.button("🔄 Refresh Data"):
        st.cache_data.clear()

    raw_df = load_indicators()
    if raw_df.empty:
        st.warning("No indicator data loaded. Check the configured spreadsheet, CSV path or credentials.")
        return

    filters = sidebar_filters_ui(raw_df)
    series_df = select_series(raw_df, filters)
    frequency = resolve_frequency(series_df, filters)
    st.session_state["sa_active_filters"] = serialize_filters(filters)

    catalog = indicator_catalog(raw_df).set_index("indicator_code")
    meta = catalog.loc[filters.indicator_code] if filters.indicator_code in catalog.index else None

    result = None
    if not series_df.empty:
        result = run_analysis(series_df, frequency, filters.estimator)
        logger.info(
            "Analysed %s with %s: %d observations, frequency %s",
            filters.indicator_code,
            filters.estimator,
            len(series_df),
            frequency.value,
        )

    _active_filter_summary(filters, series_df, frequency)

    context = PageContext(
        raw_df=raw_df,
        series_df=series_df,
        filters=filters,
        frequency=frequency,
        unit=meta["unit"] if meta is not None else None,
        indicator_name=meta["indicator_name"] if meta is not None else "No indicator selected",
        result=result,
    )

    tab_labels = [tab.label for tab in TABS]
    streamlit_tabs = st.tabs(tab_labels)

    for streamlit_tab, tab_config in zip(streamlit_tabs, TABS):
        renderer = PAGE_RENDERERS.get(tab_config.key)
        if renderer is None:
            continue
        with streamlit_tab:
            renderer(series_df, context)


if __name__ == "__main__":
    main()
