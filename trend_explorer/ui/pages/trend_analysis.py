from __future__ import annotations

from typing import List

import pandas as pd
import streamlit as st

from trend_explorer.analytics.base import MIN_OBSERVATIONS
from trend_explorer.analytics.periods import format_period_label, next_period_date
from trend_explorer.analytics.simple import SimpleTrendResult
from trend_explorer.analytics.sts import STSResult
from trend_explorer.ui.components.charts import bar_chart, line_chart, render_plotly, trend_band_chart
from trend_explorer.ui.components.formatting import (
    format_indicator_value,
    period_noun,
    slope_unit_suffix,
    trend_description,
    uncertainty_bar_width,
    uncertainty_label,
)
from trend_explorer.ui.components.kpi import KpiCard, render_kpi_cards
from trend_explorer.ui.components.tables import render_table
from trend_explorer.ui.pages.context import PageContext


def _slope_display(slope: float, context: PageContext) -> str:
    suffix = slope_unit_suffix(context.unit)
    unit_part = f" {suffix}" if suffix else ""
    return f"{slope:+.3f}{unit_part}/{period_noun(context.frequency)}"


def _render_uncertainty(tier: str) -> None:
    st.markdown(f"**Uncertainty:** {uncertainty_label(tier)}")
    st.progress(uncertainty_bar_width(tier) / 100)


def _forecast_table(result: STSResult) -> pd.DataFrame:
    forecast = result.forecast
    rows = [
        ("P5", forecast.p05),
        ("P25", forecast.p25),
        ("Median", forecast.p50),
        ("P75", forecast.p75),
        ("P95", forecast.p95),
    ]
    return pd.DataFrame(rows, columns=["Percentile", "Forecast"])


def _anomaly_table(df: pd.DataFrame, result: STSResult, context: PageContext) -> pd.DataFrame:
    records: List[dict] = []
    for idx in result.anomaly_indices:
        records.append(
            {
                "Period": format_period_label(df["reference_date"].iloc[idx], context.frequency),
                "Observed": float(df["value"].iloc[idx]),
                "Trend Level": result.mu_series[idx],
                "Innovation": result.innovations[idx],
            }
        )
    return pd.DataFrame(records, columns=["Period", "Observed", "Trend Level", "Innovation"])


def _render_sts(df: pd.DataFrame, result: STSResult, context: PageContext) -> None:
    cards = [
        KpiCard(
            label="Trend Level (μt)",
            value=result.mu_smoothed,
            unit=context.unit,
            help_text=(
                "95% CI: "
                f"{format_indicator_value(result.mu_ci_low, context.unit)} – "
                f"{format_indicator_value(result.mu_ci_high, context.unit)}"
            ),
        ),
        KpiCard(
            label="Slope (βt)",
            value=result.beta_smoothed,
            value_display=_slope_display(result.beta_smoothed, context),
            help_text=f"95% CI: {result.beta_ci_low:+.3f} – {result.beta_ci_high:+.3f}",
        ),
        KpiCard(
            label="Trend",
            value_display=trend_description(result.direction, result.strength),
            help_text=f"Slope is {result.slope_pct:+.2f}% of the series mean per {period_noun(context.frequency)}.",
        ),
    ]
    render_kpi_cards(cards, columns=3)
    _render_uncertainty(result.uncertainty)

    st.markdown(f"### Forecast for {result.next_period_label}")
    forecast_col, chart_col = st.columns([1, 2])
    with forecast_col:
        render_table(
            _forecast_table(result),
            column_config={"Forecast": {"type": "indicator", "unit": context.unit}},
            height=230,
            export_file_name="forecast.csv",
        )
        st.caption(
            "50% range "
            f"{format_indicator_value(result.forecast.p25, context.unit)} – "
            f"{format_indicator_value(result.forecast.p75, context.unit)}; 90% range "
            f"{format_indicator_value(result.forecast.p05, context.unit)} – "
            f"{format_indicator_value(result.forecast.p95, context.unit)}."
        )
    with chart_col:
        dates = df["reference_date"].tolist()
        fig = trend_band_chart(
            dates,
            df["value"].astype(float).tolist(),
            result.mu_series,
            anomaly_indices=result.anomaly_indices,
            forecast_date=next_period_date(dates[-1], context.frequency),
            forecast=result.forecast.percentiles(),
            title="Observed vs. Smoothed Level",
            yaxis_title=context.unit or "Value",
            frequency=context.frequency,
        )
        render_plotly(fig)

    st.markdown("### Model Components")
    components = pd.DataFrame(
        {
            "reference_date": df["reference_date"],
            "Slope (βt)": result.beta_series,
            "Innovation": result.innovations,
        }
    )
    slope_col, innov_col = st.columns(2)
    with slope_col:
        render_plotly(
            line_chart(
                components,
                x="reference_date",
                y="Slope (βt)",
                title="Smoothed Slope",
                markers=False,
                frequency=context.frequency,
            )
        )
    with innov_col:
        render_plotly(
            bar_chart(
                components,
                x="reference_date",
                y="Innovation",
                title="One-step Innovations",
                frequency=context.frequency,
            )
        )

    st.markdown("### Anomalies")
    anomalies = _anomaly_table(df, result, context)
    if anomalies.empty:
        st.info("No observation deviates more than two standard deviations from the filter's prediction.")
    else:
        render_table(
            anomalies,
            column_config={
                "Observed": {"type": "indicator", "unit": context.unit},
                "Trend Level": {"type": "indicator", "unit": context.unit},
                "Innovation": {"type": "number", "decimals": 3},
            },
            height=240,
            export_file_name="anomalies.csv",
        )

    with st.expander("Model variances", expanded=False):
        st.json(result.variances.to_dict())
        st.caption("Heuristic variances derived from the series' standard deviation.")


def _render_simple(df: pd.DataFrame, result: SimpleTrendResult, context: PageContext) -> None:
    forecast = result.forecast
    cards = [
        KpiCard(label="Level", value=result.level, unit=context.unit),
        KpiCard(
            label="Slope",
            value=result.slope,
            value_display=_slope_display(result.slope, context),
        ),
        KpiCard(
            label=f"Forecast ({result.next_period_label})",
            value=forecast.value,
            unit=context.unit,
            help_text=(
                f"{forecast.confidence:.0%} band: "
                f"{format_indicator_value(forecast.lower, context.unit)} – "
                f"{format_indicator_value(forecast.upper, context.unit)}"
            ),
        ),
        KpiCard(
            label="Trend",
            value_display=trend_description(result.direction, result.strength, result.percentage_change),
        ),
    ]
    render_kpi_cards(cards, columns=4)
    _render_uncertainty(result.uncertainty)

    chart_df = pd.DataFrame(
        {
            "reference_date": df["reference_date"],
            "Observed": df["value"].astype(float),
            "Filtered Level": result.trend,
        }
    ).melt(id_vars="reference_date", var_name="Series", value_name="Value")
    render_plotly(
        line_chart(
            chart_df,
            x="reference_date",
            y="Value",
            color="Series",
            title="Quick Trend",
            frequency=context.frequency,
        )
    )


def render(df: pd.DataFrame, context: PageContext) -> None:
    st.subheader("Trend Analysis")
    result = context.result
    if result is None or df.empty:
        st.info("Select an indicator to run the trend model.")
        return
    if result.insufficient_data:
        st.info(f"At least {MIN_OBSERVATIONS} observations are needed; this selection has {len(df)}.")
        return

    if isinstance(result, STSResult):
        _render_sts(df, result, context)
    else:
        _render_simple(df, result, context)
