"""
Plotly chart factory functions with consistent styling for the dashboard.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Union

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from trend_explorer.analytics.periods import Frequency, format_axis_label


DEFAULT_TEMPLATE = "plotly_white"
DEFAULT_COLOR_SEQUENCE = [
    "#1f77b4",  # blue for observed values
    "#17becf",  # cyan for model level
    "#2ca02c",  # green for upward moves
    "#d62728",  # red for anomalies/downward moves
    "#9467bd",
    "#8c564b",
]
FORECAST_BAND_OUTER = "rgba(23, 190, 207, 0.15)"
FORECAST_BAND_INNER = "rgba(23, 190, 207, 0.35)"
MAX_PERIOD_TICKS = 12


def _configure_layout(
    fig: go.Figure,
    title: Optional[str] = None,
    yaxis_title: Optional[str] = None,
    yaxis_tickformat: Optional[str] = None,
    legend_title: Optional[str] = None,
) -> go.Figure:
    fig.update_layout(
        template=DEFAULT_TEMPLATE,
        colorway=DEFAULT_COLOR_SEQUENCE,
        title=title,
        legend_title=legend_title,
        hovermode="x unified",
        margin=dict(l=40, r=20, t=60, b=40),
    )
    if yaxis_title:
        fig.update_yaxes(title=yaxis_title)
    if yaxis_tickformat:
        fig.update_yaxes(tickformat=yaxis_tickformat)
    fig.update_xaxes(showgrid=False)
    fig.update_yaxes(showgrid=True, zeroline=True)
    return fig


def _apply_period_ticks(
    fig: go.Figure,
    dates: Sequence,
    frequency: Optional[Union[str, Frequency]],
) -> go.Figure:
    """Label the x-axis with compact period names, at most ``MAX_PERIOD_TICKS`` of them."""
    dates = list(dates)
    if frequency is None or not dates:
        return fig
    step = -(-len(dates) // MAX_PERIOD_TICKS)
    ticks = dates[::step]
    fig.update_xaxes(
        tickmode="array",
        tickvals=ticks,
        ticktext=[format_axis_label(d, frequency) for d in ticks],
    )
    return fig


def render_plotly(fig: go.Figure) -> None:
    st.plotly_chart(fig, use_container_width=True, config={"displayModeBar": False})


def line_chart(
    df: pd.DataFrame,
    x: str,
    y: str,
    color: Optional[str] = None,
    title: Optional[str] = None,
    yaxis_title: Optional[str] = None,
    yaxis_tickformat: Optional[str] = None,
    markers: bool = True,
    category_orders: Optional[Dict[str, List[str]]] = None,
    hover_data: Optional[List[str]] = None,
    frequency: Optional[Union[str, Frequency]] = None,
) -> go.Figure:
    fig = px.line(
        df,
        x=x,
        y=y,
        color=color,
        markers=markers,
        category_orders=category_orders,
        hover_data=hover_data,
    )
    fig = _configure_layout(fig, title, yaxis_title, yaxis_tickformat)
    return _apply_period_ticks(fig, df[x].drop_duplicates(), frequency)


def bar_chart(
    df: pd.DataFrame,
    x: str,
    y: str,
    color: Optional[str] = None,
    barmode: str = "group",
    orientation: str = "v",
    title: Optional[str] = None,
    yaxis_title: Optional[str] = None,
    yaxis_tickformat: Optional[str] = None,
    category_orders: Optional[Dict[str, List[str]]] = None,
    text_auto: bool = False,
    frequency: Optional[Union[str, Frequency]] = None,
) -> go.Figure:
    fig = px.bar(
        df,
        x=x,
        y=y,
        color=color,
        barmode=barmode,
        orientation=orientation,
        category_orders=category_orders,
        text_auto=text_auto,
    )
    fig = _configure_layout(fig, title, yaxis_title, yaxis_tickformat)
    if text_auto:
        fig.update_traces(textposition="outside", cliponaxis=False)
    return _apply_period_ticks(fig, df[x].drop_duplicates(), frequency)


def trend_with_ma(
    df: pd.DataFrame,
    x: str,
    y: str,
    window: int = 3,
    title: Optional[str] = None,
    yaxis_title: Optional[str] = None,
    yaxis_tickformat: Optional[str] = None,
) -> go.Figure:
    line = px.line(df, x=x, y=y)
    line = _configure_layout(line, title, yaxis_title, yaxis_tickformat)
    rolling = df[[x, y]].dropna().copy()
    rolling["ma"] = rolling[y].rolling(window=window).mean()
    if not rolling["ma"].dropna().empty:
        line.add_trace(
            go.Scatter(
                x=rolling[x],
                y=rolling["ma"],
                mode="lines",
                name=f"{window}-period MA",
                line=dict(dash="dash"),
            )
        )
    return line


def trend_band_chart(
    dates: Sequence,
    observed: Sequence[float],
    level: Sequence[float],
    anomaly_indices: Sequence[int] = (),
    forecast_date=None,
    forecast: Optional[Dict[str, float]] = None,
    title: Optional[str] = None,
    yaxis_title: Optional[str] = None,
    frequency: Optional[Union[str, Frequency]] = None,
) -> go.Figure:
    """Observed series, model level, flagged anomalies and the forecast fan.

    ``forecast`` holds ``p05``/``p25``/``p50``/``p75``/``p95``; the fan is
    drawn from the last level to ``forecast_date``. With ``frequency`` the
    x-axis ticks (forecast date included) use compact period labels.
    """
    dates = list(dates)
    fig = go.Figure()
    fig.add_trace(go.Scatter(x=dates, y=list(observed), mode="lines+markers", name="Observed"))
    fig.add_trace(go.Scatter(x=dates, y=list(level), mode="lines", name="Trend level (μt)", line=dict(width=3)))

    if anomaly_indices:
        fig.add_trace(
            go.Scatter(
                x=[dates[i] for i in anomaly_indices],
                y=[observed[i] for i in anomaly_indices],
                mode="markers",
                name="Anomaly",
                marker=dict(color=DEFAULT_COLOR_SEQUENCE[3], size=12, symbol="x"),
            )
        )

    if forecast and forecast_date is not None and dates:
        anchor_x = [dates[-1], forecast_date]
        anchor = level[-1]
        for low_key, high_key, fill, name in (
            ("p05", "p95", FORECAST_BAND_OUTER, "Forecast 5–95%"),
            ("p25", "p75", FORECAST_BAND_INNER, "Forecast 25–75%"),
        ):
            fig.add_trace(
                go.Scatter(x=anchor_x, y=[anchor, forecast[high_key]], mode="lines", line=dict(width=0), showlegend=False)
            )
            fig.add_trace(
                go.Scatter(
                    x=anchor_x,
                    y=[anchor, forecast[low_key]],
                    mode="lines",
                    line=dict(width=0),
                    fill="tonexty",
                    fillcolor=fill,
                    name=name,
                )
            )
        fig.add_trace(
            go.Scatter(
                x=anchor_x,
                y=[anchor, forecast["p50"]],
                mode="lines+markers",
                name="Forecast median",
                line=dict(dash="dash"),
            )
        )

    fig = _configure_layout(fig, title, yaxis_title)
    tick_dates = dates + [forecast_date] if forecast and forecast_date is not None and dates else dates
    return _apply_period_ticks(fig, tick_dates, frequency)
