import datetime as dt

import pandas as pd
import pytest

from trend_explorer.analytics.periods import (
    Frequency,
    classify_frequency,
    detect_frequency,
    format_axis_label,
    format_period_label,
    next_period_date,
    next_period_label,
)


@pytest.mark.parametrize(
    "tag, expected",
    [
        ("monthly", Frequency.MONTHLY),
        ("Mensal", Frequency.MONTHLY),
        ("TRIMESTRAL", Frequency.QUARTERLY),
        ("annual", Frequency.YEARLY),
        ("anual", Frequency.YEARLY),
        ("diária", Frequency.DAILY),
        (" daily ", Frequency.DAILY),
        ("weekly", Frequency.UNKNOWN),
        (None, Frequency.UNKNOWN),
        (Frequency.QUARTERLY, Frequency.QUARTERLY),
    ],
)
def test_classify_frequency(tag, expected):
    assert classify_frequency(tag) is expected


def test_format_period_label_per_frequency():
    date = "2023-06-14"
    assert format_period_label(date, "yearly") == "2023"
    assert format_period_label(date, "quarterly") == "2º tri 2023"
    assert format_period_label(date, "monthly") == "6/2023"
    assert format_period_label(date, "daily") == "14/06/2023"


def test_unknown_frequency_formats_like_monthly():
    assert format_period_label("2023-06-14", None) == "6/2023"
    assert format_period_label("2023-06-14", "weekly") == "6/2023"


def test_abbreviated_monthly_label():
    assert format_period_label(dt.date(2023, 6, 1), "monthly", abbreviated=True) == "Jun/2023"
    assert format_period_label(pd.Timestamp("2023-02-01"), "mensal", abbreviated=True) == "Fev/2023"


def test_unparsable_date_is_echoed():
    assert format_period_label("not a date", "monthly") == "not a date"


def test_axis_labels_are_compact():
    assert format_axis_label("2023-06-14", "monthly") == "6/23"
    assert format_axis_label("2023-06-14", "quarterly") == "2ºT/23"
    assert format_axis_label("2023-06-14", "daily") == "14/6"
    assert format_axis_label("2023-06-14", "yearly") == "2023"


def test_next_period_date_advances_one_step():
    assert next_period_date("2023-05-01", "monthly") == pd.Timestamp("2023-06-01")
    assert next_period_date("2023-01-01", "quarterly") == pd.Timestamp("2023-04-01")
    assert next_period_date("2023-01-01", "yearly") == pd.Timestamp("2024-01-01")
    assert next_period_date("2023-12-31", "daily") == pd.Timestamp("2024-01-01")


def test_next_period_date_clamps_month_end():
    assert next_period_date("2023-01-31", "monthly") == pd.Timestamp("2023-02-28")


def test_next_period_date_rejects_garbage():
    with pytest.raises(ValueError):
        next_period_date("garbage", "monthly")


def test_next_period_label_examples():
    assert next_period_label("2023-05-01", "monthly") == "Jun/2023"
    assert next_period_label("2023-12-01", "monthly") == "Jan/2024"
    assert next_period_label("2023-07-01", "quarterly") == "4º tri 2023"
    assert next_period_label("2023-01-01", "yearly") == "2024"


@pytest.mark.parametrize("frequency", ["daily", "monthly", "quarterly", "yearly", None])
def test_next_period_label_matches_formatted_next_date(frequency):
    last = "2023-11-30"
    expected = format_period_label(next_period_date(last, frequency), frequency, abbreviated=True)
    assert next_period_label(last, frequency) == expected


def test_detect_frequency_daily_and_monthly_over_one_year():
    assert detect_frequency(365, "2023-01-01", "2023-12-31") is Frequency.DAILY
    assert detect_frequency(12, "2023-01-01", "2023-12-31") is Frequency.MONTHLY


def test_detect_frequency_sparse_series():
    assert detect_frequency(8, "2021-01-01", "2022-10-01") is Frequency.QUARTERLY
    assert detect_frequency(5, "2019-01-01", "2023-01-01") is Frequency.YEARLY


def test_detect_frequency_same_month_floors_to_one():
    assert detect_frequency(25, "2023-03-01", "2023-03-28") is Frequency.DAILY


def test_detect_frequency_unparsable_bounds():
    assert detect_frequency(10, None, "2023-01-01") is Frequency.UNKNOWN
