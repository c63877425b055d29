import pytest

from trend_explorer.analytics.simple import FIXED_GAIN, SimpleKalmanTrend, SimpleTrendResult


def test_simple_trend_on_ramp(monthly_ramp):
    result = SimpleKalmanTrend().analyze(monthly_ramp, "monthly")
    assert result.direction == "up"
    assert len(result.trend) == len(monthly_ramp)
    assert result.trend[-1] == result.level
    assert result.next_period_label == "Jun/2023"
    assert result.percentage_change > 0


def test_simple_forecast_band(monthly_ramp):
    forecast = SimpleKalmanTrend().analyze(monthly_ramp, "monthly").forecast
    assert forecast.lower < forecast.value < forecast.upper
    assert forecast.confidence == 0.95
    assert forecast.value - forecast.lower == pytest.approx(forecast.upper - forecast.value)


def test_flat_series_keeps_level():
    series = [("2023-01-01", 10.0), ("2023-02-01", 10.0), ("2023-03-01", 10.0)]
    result = SimpleKalmanTrend(gain=FIXED_GAIN).analyze(series, "monthly")
    assert result.trend == pytest.approx([10.0, 10.0, 10.0])
    assert result.slope == pytest.approx(0.0)
    assert result.direction == "stable"
    assert result.forecast.lower == result.forecast.upper == pytest.approx(10.0)


def test_short_series_returns_empty_result():
    result = SimpleKalmanTrend().analyze([("2023-01-01", 1.0), ("2023-02-01", 2.0)], "monthly")
    assert result == SimpleTrendResult()
    assert result.insufficient_data
    assert result.next_period_label == "N/A"
    assert result.direction == "stable"
    assert result.uncertainty == "high"


def test_to_dict_shape(monthly_ramp):
    payload = SimpleKalmanTrend().analyze(monthly_ramp, "monthly").to_dict()
    assert set(payload) == {
        "trend",
        "level",
        "slope",
        "forecast",
        "direction",
        "strength",
        "uncertainty",
        "nextPeriodLabel",
        "percentageChange",
    }
    assert set(payload["forecast"]) == {"value", "lower", "upper", "confidence"}


def test_result_holds_plain_floats(monthly_ramp):
    result = SimpleKalmanTrend().analyze(monthly_ramp, "monthly")
    forecast = result.forecast
    numbers = [result.level, result.slope, result.percentage_change, forecast.value, forecast.lower, forecast.upper]
    assert all(type(x) is float for x in numbers + result.trend)
