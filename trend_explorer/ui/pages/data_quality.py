from __future__ import annotations

from typing import List

import pandas as pd
import streamlit as st

from trend_explorer.config import DEFAULT_SETTINGS
from trend_explorer.data.series import indicator_catalog
from trend_explorer.ui.components.kpi import KpiCard, render_kpi_cards
from trend_explorer.ui.components.tables import render_table
from trend_explorer.ui.pages.context import PageContext


def _compute_quality_metrics(raw_df: pd.DataFrame) -> List[KpiCard]:
    diagnostics = raw_df.attrs.get("diagnostics", {})
    raw_rows = int(diagnostics.get("raw_row_count", len(raw_df)))
    dropped = int(diagnostics.get("dropped_rows", 0))
    dropped_pct = dropped / raw_rows * 100 if raw_rows else 0.0
    missing_unit = float(raw_df["unit"].isna().mean() * 100) if not raw_df.empty else 0.0
    return [
        KpiCard(label="Indicators", value=float(raw_df["indicator_code"].nunique()), decimals=0),
        KpiCard(label="Observations", value=float(len(raw_df)), decimals=0),
        KpiCard(label="Dropped Rows", value=dropped_pct, value_display=f"{dropped_pct:.1f}%"),
        KpiCard(label="Missing Unit", value=missing_unit, value_display=f"{missing_unit:.1f}%"),
    ]


def render(df: pd.DataFrame, context: PageContext) -> None:
    st.subheader("Data Quality & Definitions")
    raw_df = context.raw_df
    if raw_df.empty:
        st.info("No diagnostics available yet.")
        return

    render_kpi_cards(_compute_quality_metrics(raw_df), columns=4)

    st.markdown("#### Diagnostics Summary")
    diagnostics = raw_df.attrs.get("diagnostics", {})
    if diagnostics:
        for key, value in diagnostics.items():
            st.write(f"- **{key.replace('_', ' ').title()}**: {value}")
    else:
        st.info("No diagnostics metadata available.")

    st.markdown("#### Indicator Catalogue")
    catalog = indicator_catalog(raw_df)
    render_table(
        catalog,
        column_config={"observations": {"type": "number"}},
        height=320,
        export_file_name="indicator_catalog.csv",
    )

    settings = DEFAULT_SETTINGS
    st.markdown("#### Model Definitions")
    st.write(
        f"""
        - **Trend level (μt)**: smoothed local level from the Kalman filter and backward smoother.
        - **Slope (βt)**: smoothed change per period; stable below {settings.stable_slope_pct}% of the
          series mean, strong above {settings.strong_slope_pct}%.
        - **Uncertainty**: width of the 95% level band relative to the level; low below
          {settings.low_uncertainty_band:.0%}, moderate below {settings.moderate_uncertainty_band:.0%}.
        - **Anomaly**: one-step innovation larger than {settings.anomaly_z:g} standard deviations.
        - **Quick trend**: fixed gain {settings.simple_gain} on level and slope, no smoothing pass.
        """
    )

    st.markdown("#### Current Assumptions")
    st.write(
        f"""
        - At least {settings.min_observations} observations are required before a model runs.
        - Variances are heuristic: observation (0.5σ)², level (0.1σ)², slope (0.05σ)².
        - Frequency comes from the sidebar override, then the indicator's declared frequency,
          then the observation density.
        - Up to {settings.analysis_cache_entries} model runs are cached per session.
        """
    )
