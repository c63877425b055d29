from __future__ import annotations

import pandas as pd
import streamlit as st

from trend_explorer.analytics.periods import format_period_label
from trend_explorer.ui.components.tables import render_table
from trend_explorer.ui.pages.context import PageContext


def _prepare_display(df: pd.DataFrame, context: PageContext) -> pd.DataFrame:
    display = pd.DataFrame(
        {
            "Period": [format_period_label(d, context.frequency) for d in df["reference_date"]],
            "Date": df["reference_date"].dt.date,
            "Value": df["value"].astype(float),
        }
    )
    display["Change %"] = display["Value"].pct_change() * 100
    result = context.result
    if result is not None and not result.insufficient_data:
        display["Trend Level"] = result.trend
        flagged = set(getattr(result, "anomaly_indices", []))
        display["Anomaly"] = ["yes" if i in flagged else "" for i in range(len(display))]
    display["Source"] = df["data_source"].tolist()
    return display


def render(df: pd.DataFrame, context: PageContext) -> None:
    st.subheader("Observations")
    if df.empty:
        st.info("No observations to display.")
        return

    display = _prepare_display(df, context)
    highlight = [i for i, flag in enumerate(display.get("Anomaly", [])) if flag]
    render_table(
        display,
        column_config={
            "Value": {"type": "indicator", "unit": context.unit},
            "Trend Level": {"type": "indicator", "unit": context.unit},
            "Change %": {"type": "percent", "decimals": 2},
        },
        height=480,
        export_file_name=f"{context.filters.indicator_code or 'indicator'}.csv",
        highlight_rows=highlight,
    )
    st.caption("Rows flagged as anomalies are highlighted; the CSV export keeps raw numbers.")
