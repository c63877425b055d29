from __future__ import annotations

from typing import List, Optional

import pandas as pd
import streamlit as st

from trend_explorer.analytics.statistics import (
    SeriesSummary,
    classify_volatility,
    describe_series,
    moving_average,
    moving_average_window,
    position_to_moving_average,
)
from trend_explorer.ui.components.charts import render_plotly, trend_with_ma
from trend_explorer.ui.components.formatting import format_indicator_value, period_noun
from trend_explorer.ui.components.kpi import KpiCard, render_kpi_cards
from trend_explorer.ui.pages.context import PageContext
from trend_explorer.ui.pages.helpers import latest_and_previous, pct_change

POSITION_LABELS = {"above": "ACIMA", "below": "ABAIXO", "near": "PRÓXIMO"}
VOLATILITY_LABELS = {"low": "baixa", "moderate": "moderada", "high": "alta"}
VOLATILITY_ADVICE = {
    "low": "Previsões tendem a ser mais confiáveis.",
    "moderate": "Previsões devem considerar margem de erro.",
    "high": "Previsões devem ser interpretadas com cautela.",
}


def build_suggestions(
    summary: SeriesSummary,
    current: float,
    average: float,
    window: int,
    unit: Optional[str],
    noun: str,
    direction: Optional[str] = None,
) -> List[str]:
    """Plain-language reading of the moving average and volatility."""
    position = position_to_moving_average(current, average)
    volatility = classify_volatility(summary.cv)
    suggestions = [
        f"A média móvel de {window} {noun}(s) é {format_indicator_value(average, unit)}; "
        f"o valor atual está {POSITION_LABELS[position]} dela.",
    ]
    if direction is not None:
        consistent = (
            position == "near"
            or (position == "above" and direction == "up")
            or (position == "below" and direction == "down")
        )
        suggestions.append(
            "Consistente com a tendência identificada pelo modelo."
            if consistent
            else "Pode indicar reversão ou ajuste de curto prazo."
        )
    suggestions.append(
        f"Coeficiente de variação de {summary.cv:.1f}%: volatilidade {VOLATILITY_LABELS[volatility]}. "
        + VOLATILITY_ADVICE[volatility]
    )
    suggestions.append(
        "Oscilações típicas entre "
        f"{format_indicator_value(summary.mean - summary.std_dev, unit)} e "
        f"{format_indicator_value(summary.mean + summary.std_dev, unit)}."
    )
    return suggestions


def render(df: pd.DataFrame, context: PageContext) -> None:
    st.subheader(context.indicator_name)
    if df.empty:
        st.info("No observations for the current selection.")
        return

    values = df["value"].astype(float).tolist()
    summary = describe_series(values)
    latest, previous = latest_and_previous(df)
    window = moving_average_window(context.frequency)
    average = moving_average(values, window)[-1]

    cards: List[KpiCard] = [
        KpiCard(
            label="Latest Value",
            value=latest,
            unit=context.unit,
            delta=pct_change(latest, previous),
            help_text=f"Change vs. previous observation ({len(values)} observations).",
        ),
        KpiCard(label=f"Moving Average ({window})", value=average, unit=context.unit),
        KpiCard(label="Mean", value=summary.mean, unit=context.unit),
        KpiCard(label="Std. Deviation", value=summary.std_dev, unit=context.unit),
        KpiCard(label="Minimum", value=summary.minimum, unit=context.unit),
        KpiCard(label="Maximum", value=summary.maximum, unit=context.unit),
    ]
    render_kpi_cards(cards, columns=3)

    st.markdown("### History")
    fig = trend_with_ma(
        df,
        x="reference_date",
        y="value",
        window=min(window, len(values)),
        title=context.indicator_name,
        yaxis_title=context.unit or "Value",
    )
    render_plotly(fig)
    st.caption(
        f"Linear fit: slope {summary.slope:+.4f} per {period_noun(context.frequency)}, R² {summary.r2:.2f}."
    )

    st.markdown("### Reading the Series")
    direction = getattr(context.result, "direction", None)
    if getattr(context.result, "insufficient_data", True):
        direction = None
    for line in build_suggestions(
        summary,
        current=latest if latest is not None else summary.mean,
        average=average,
        window=window,
        unit=context.unit,
        noun=period_noun(context.frequency),
        direction=direction,
    ):
        st.write(f"- {line}")
