import dataclasses

import pandas as pd
import pytest

from trend_explorer.analytics import get_estimator
from trend_explorer.analytics.periods import Frequency
from trend_explorer.analytics.statistics import describe_series
from trend_explorer.data.series import DEFAULT_FILTERS, select_series, to_observations
from trend_explorer.ui.components.tables import format_table
from trend_explorer.ui.pages.helpers import latest_and_previous, pct_change, run_analysis
from trend_explorer.ui.pages.overview import build_suggestions


def test_format_table_column_types():
    df = pd.DataFrame({"Value": [1234.5], "Share": [12.345], "Count": [1500.0], "Other": ["x"]})
    formatted = format_table(
        df,
        {
            "Value": {"type": "indicator", "unit": "R$"},
            "Share": {"type": "percent", "decimals": 1},
            "Count": {"type": "number"},
            "Missing": {"type": "number"},
        },
    )
    assert formatted.loc[0, "Value"] == "R$ 1.234,50"
    assert formatted.loc[0, "Share"] == "12.3%"
    assert formatted.loc[0, "Count"] == "1,500"
    assert formatted.loc[0, "Other"] == "x"
    assert df.loc[0, "Value"] == 1234.5


def test_latest_and_previous():
    df = pd.DataFrame({"value": [1.0, 2.0, 4.0]})
    assert latest_and_previous(df) == (4.0, 2.0)
    assert latest_and_previous(df.head(1)) == (1.0, None)
    assert latest_and_previous(pd.DataFrame()) == (None, None)


def test_pct_change():
    assert pct_change(110.0, 100.0) == pytest.approx(10.0)
    assert pct_change(-90.0, -100.0) == pytest.approx(10.0)
    assert pct_change(1.0, 0) is None
    assert pct_change(None, 1.0) is None


def test_build_suggestions_flags_reversal():
    summary = describe_series([100.0, 105.0, 110.0, 115.0, 120.0])
    lines = build_suggestions(summary, current=90.0, average=110.0, window=12, unit=None, noun="mês", direction="up")
    assert "ABAIXO" in lines[0]
    assert lines[1] == "Pode indicar reversão ou ajuste de curto prazo."
    assert "volatilidade baixa" in lines[2]


def test_build_suggestions_without_model():
    summary = describe_series([10.0, 30.0, 10.0, 30.0])
    lines = build_suggestions(summary, current=20.0, average=20.0, window=4, unit="%", noun="trimestre")
    assert len(lines) == 3
    assert "PRÓXIMO" in lines[0]
    assert "volatilidade alta" in lines[1]


def test_run_analysis_matches_direct_estimate(indicator_frame):
    filters = dataclasses.replace(DEFAULT_FILTERS, indicator_code="PIB")
    selected = select_series(indicator_frame, filters)
    result = run_analysis(selected, Frequency.QUARTERLY, "sts")
    direct = get_estimator("sts").analyze(to_observations(selected), "quarterly")
    assert result.to_dict() == direct.to_dict()
    assert result.forecast.next_period_label == "1º tri 2023"
