import pandas as pd
import pytest


@pytest.fixture
def monthly_ramp():
    """Five monthly points rising by 5 each month."""
    return [
        {"date": "2023-01-01", "value": 100.0},
        {"date": "2023-02-01", "value": 105.0},
        {"date": "2023-03-01", "value": 110.0},
        {"date": "2023-04-01", "value": 115.0},
        {"date": "2023-05-01", "value": 120.0},
    ]


@pytest.fixture
def spike_series():
    """Ten flat monthly points with a single spike at index 2."""
    dates = pd.date_range("2022-01-01", periods=10, freq="MS")
    values = [100.0] * 10
    values[2] = 500.0
    return [{"date": d, "value": v} for d, v in zip(dates, values)]


@pytest.fixture
def indicator_frame():
    """Normalised indicator table with one monthly and one quarterly series."""
    monthly_dates = pd.date_range("2023-01-01", periods=12, freq="MS")
    quarterly_dates = pd.date_range("2021-01-01", periods=8, freq="QS")
    rows = []
    for i, d in enumerate(monthly_dates):
        rows.append(
            {
                "indicator_code": "IPCA",
                "indicator_name": "IPCA mensal",
                "category": "Inflação",
                "unit": "%",
                "frequency": "mensal",
                "reference_date": d,
                "value": 0.4 + 0.01 * i,
                "data_source": "indicator_values",
            }
        )
    for i, d in enumerate(quarterly_dates):
        rows.append(
            {
                "indicator_code": "PIB",
                "indicator_name": "PIB trimestral",
                "category": "Atividade",
                "unit": "R$ mi",
                "frequency": None,
                "reference_date": d,
                "value": 2000.0 + 25.0 * i,
                "data_source": "indicator_values",
            }
        )
    return pd.DataFrame(rows)
