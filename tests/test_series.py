import pandas as pd

from trend_explorer.analytics.periods import Frequency
from trend_explorer.data.series import (
    DEFAULT_FILTERS,
    SeriesFilters,
    indicator_catalog,
    resolve_frequency,
    select_series,
    serialize_filters,
    to_observations,
)


def _filters(code, start=None, end=None, override=None):
    return SeriesFilters(indicator_code=code, date_range=(start, end), frequency_override=override, estimator="sts")


def test_indicator_catalog(indicator_frame):
    catalog = indicator_catalog(indicator_frame)
    assert catalog["indicator_code"].tolist() == ["IPCA", "PIB"]
    ipca = catalog.set_index("indicator_code").loc["IPCA"]
    assert ipca["observations"] == 12
    assert ipca["unit"] == "%"
    assert ipca["first_date"] == pd.Timestamp("2023-01-01")
    assert pd.isna(catalog.set_index("indicator_code").loc["PIB", "frequency"])


def test_indicator_catalog_empty():
    assert indicator_catalog(pd.DataFrame()).empty


def test_select_series_filters_code_and_dates(indicator_frame):
    selected = select_series(
        indicator_frame,
        _filters("IPCA", pd.Timestamp("2023-03-01"), pd.Timestamp("2023-05-01")),
    )
    assert len(selected) == 3
    assert set(selected["indicator_code"]) == {"IPCA"}
    assert selected["reference_date"].is_monotonic_increasing
    assert list(selected.index) == [0, 1, 2]


def test_select_series_without_indicator(indicator_frame):
    assert select_series(indicator_frame, DEFAULT_FILTERS).empty


def test_to_observations(indicator_frame):
    selected = select_series(indicator_frame, _filters("PIB"))
    records = to_observations(selected)
    assert len(records) == 8
    assert records[0] == {"date": pd.Timestamp("2021-01-01"), "value": 2000.0}


def test_resolve_frequency_order(indicator_frame):
    ipca = select_series(indicator_frame, _filters("IPCA"))
    pib = select_series(indicator_frame, _filters("PIB"))
    # override wins over the declared tag
    assert resolve_frequency(ipca, _filters("IPCA", override="yearly")) is Frequency.YEARLY
    # declared tag
    assert resolve_frequency(ipca, _filters("IPCA")) is Frequency.MONTHLY
    # no tag: inferred from density
    assert resolve_frequency(pib, _filters("PIB")) is Frequency.QUARTERLY


def test_resolve_frequency_single_point(indicator_frame):
    one = select_series(indicator_frame, _filters("PIB")).head(1)
    assert resolve_frequency(one, _filters("PIB")) is Frequency.UNKNOWN


def test_serialize_filters():
    payload = serialize_filters(_filters("IPCA", pd.Timestamp("2023-01-01"), None, "monthly"))
    assert payload == {
        "indicator_code": "IPCA",
        "date_range": ("2023-01-01T00:00:00", None),
        "frequency_override": "monthly",
        "estimator": "sts",
    }
