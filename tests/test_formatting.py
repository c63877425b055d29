import pytest

from trend_explorer.ui.components.formatting import (
    format_indicator_value,
    format_number,
    format_percent,
    period_noun,
    slope_unit_suffix,
    trend_description,
    uncertainty_bar_width,
    uncertainty_label,
)


@pytest.mark.parametrize(
    "value, unit, expected",
    [
        (12.3456, "%", "12.35%"),
        (0.5, "% a.m.", "0.50%"),
        (10.0, "a.a.", "10.00%"),
        (1234.56, "R$", "R$ 1.234,56"),
        (1500.0, "R$ mil", "R$ 1.500,00"),
        (2.5, "BRL", "R$ 2,50"),
        (1234.5, None, "1.234,5"),
        (1000.0, "índice", "1.000"),
        (None, "%", "–"),
        ("abc", "%", "–"),
    ],
)
def test_format_indicator_value(value, unit, expected):
    assert format_indicator_value(value, unit) == expected


def test_format_number_and_percent():
    assert format_number(1234567.0) == "1,234,567"
    assert format_number(None) == "–"
    assert format_percent(12.345) == "12.3%"
    assert format_percent(None) == "–"


def test_trend_description():
    assert trend_description("up", "strong", 1.23) == "Alta forte (+1.2%)"
    assert trend_description("down", "moderate") == "Baixa moderada"
    assert trend_description("stable", "weak", 0.1) == "Tendência estável"


def test_uncertainty_helpers():
    assert uncertainty_label("low") == "Baixa"
    assert uncertainty_label("other") == "N/A"
    assert [uncertainty_bar_width(t) for t in ("low", "moderate", "high")] == [33, 66, 100]
    assert uncertainty_bar_width("other") == 50


def test_slope_unit_suffix():
    assert slope_unit_suffix("% a.a.") == "pp"
    assert slope_unit_suffix("R$") == "R$"
    assert slope_unit_suffix(None) == ""


def test_period_noun():
    assert period_noun("monthly") == "mês"
    assert period_noun("trimestral") == "trimestre"
    assert period_noun(None) == "período"
