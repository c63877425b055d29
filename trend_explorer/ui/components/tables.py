"""
Reusable helpers for rendering data tables with consistent configuration.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pandas as pd
import streamlit as st

from trend_explorer.ui.components.formatting import format_indicator_value, format_number, format_percent


def format_table(df: pd.DataFrame, column_config: Optional[Dict[str, Dict[str, Any]]] = None) -> pd.DataFrame:
    """Return a display copy with configured columns rendered as strings.

    Column types: ``indicator`` (uses the config's ``unit``), ``percent`` and
    ``number``.
    """
    formatted_df = df.copy()
    for column, config in (column_config or {}).items():
        if column not in formatted_df.columns:
            continue
        fmt_type = config.get("type")
        if fmt_type == "indicator":
            unit = config.get("unit")
            formatted_df[column] = formatted_df[column].apply(lambda v: format_indicator_value(v, unit))
        elif fmt_type == "percent":
            decimals = int(config.get("decimals", 1))
            formatted_df[column] = formatted_df[column].apply(
                lambda v: format_percent(v, decimals=decimals)
            )
        elif fmt_type == "number":
            decimals = int(config.get("decimals", 0))
            formatted_df[column] = formatted_df[column].apply(
                lambda v: format_number(v, decimals=decimals)
            )
    return formatted_df


def render_table(
    df: pd.DataFrame,
    column_config: Optional[Dict[str, Dict[str, Any]]] = None,
    height: int = 400,
    show_index: bool = False,
    export_file_name: str = "export.csv",
    highlight_rows: Optional[List[int]] = None,
) -> None:
    if df.empty:
        st.info("No data to display.")
        return

    formatted_df = format_table(df, column_config)
    dataframe_obj: Any = formatted_df
    if highlight_rows:
        flagged = set(highlight_rows)

        def _style_row(row: pd.Series) -> List[str]:
            style = "background-color: rgba(214, 39, 40, 0.15);" if row.name in flagged else ""
            return [style] * len(row)

        dataframe_obj = formatted_df.style.apply(_style_row, axis=1)

    st.dataframe(
        dataframe_obj,
        use_container_width=True,
        height=height,
        hide_index=not show_index,
    )

    csv_bytes = df.to_csv(index=show_index).encode("utf-8")
    st.download_button(
        "Download CSV",
        data=csv_bytes,
        file_name=export_file_name,
        mime="text/csv",
    )
