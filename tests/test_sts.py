import pytest

from trend_explorer.analytics.sts import (
    STSResult,
    StructuralTimeSeries,
    classify_uncertainty,
    confidence_interval,
    default_result,
    detect_anomalies,
    run_structural_time_series,
)
from trend_explorer.analytics.variance import ZERO_VARIANCES


def test_monthly_ramp_forecast(monthly_ramp):
    result = run_structural_time_series(monthly_ramp, "monthly")
    assert result.direction == "up"
    assert result.forecast.mean == pytest.approx(125, abs=3)
    assert result.forecast.next_period_label == "Jun/2023"
    assert result.next_period_label == "Jun/2023"


def test_spike_is_flagged_as_anomaly(spike_series):
    result = run_structural_time_series(spike_series, "monthly")
    assert 2 in result.anomaly_indices


@pytest.mark.parametrize("size", [0, 1, 2])
def test_short_series_returns_default(size, monthly_ramp):
    result = run_structural_time_series(monthly_ramp[:size], "monthly")
    assert result == default_result()
    assert result.insufficient_data
    assert result.direction == "stable"
    assert result.uncertainty == "high"
    assert result.next_period_label == "N/A"
    assert result.mu_smoothed == 0.0 and result.beta_smoothed == 0.0


def test_three_points_run_the_model(monthly_ramp):
    result = run_structural_time_series(monthly_ramp[:3], "monthly")
    assert not result.insufficient_data
    assert len(result.mu_series) == 3


def test_forecast_percentiles_are_ordered(monthly_ramp):
    forecast = run_structural_time_series(monthly_ramp, "monthly").forecast
    assert forecast.p05 <= forecast.p25 <= forecast.p50 <= forecast.p75 <= forecast.p95
    assert forecast.p50 == forecast.mean


def test_confidence_bands_contain_estimates(spike_series):
    result = run_structural_time_series(spike_series, "monthly")
    assert result.mu_ci_low <= result.mu_smoothed <= result.mu_ci_high
    assert result.beta_ci_low <= result.beta_smoothed <= result.beta_ci_high


def test_series_lengths_match_input(spike_series):
    result = run_structural_time_series(spike_series, "monthly")
    n = len(spike_series)
    assert len(result.mu_series) == n
    assert len(result.beta_series) == n
    assert len(result.innovations) == n
    assert len(result.dates) == n
    assert result.mu_series[-1] == result.mu_smoothed


def test_input_order_does_not_matter(monthly_ramp):
    ordered = run_structural_time_series(monthly_ramp, "monthly")
    shuffled = run_structural_time_series(list(reversed(monthly_ramp)), "monthly")
    assert shuffled.to_dict() == ordered.to_dict()


def test_constant_series_collapses_bands():
    series = [{"date": f"2023-0{m}-01", "value": 50.0} for m in range(1, 7)]
    result = run_structural_time_series(series, "monthly")
    assert result.mu_smoothed == pytest.approx(50.0)
    assert result.beta_smoothed == pytest.approx(0.0)
    assert result.mu_series == pytest.approx([50.0] * 6)
    assert result.beta_series == pytest.approx([0.0] * 6)
    assert result.mu_ci_low == result.mu_ci_high == pytest.approx(50.0)
    assert result.forecast.p05 == result.forecast.p95 == pytest.approx(50.0)
    assert result.direction == "stable"
    assert result.uncertainty == "low"
    assert result.anomaly_indices == []
    assert result.variances == ZERO_VARIANCES


def test_custom_variance_policy(monthly_ramp):
    estimator = StructuralTimeSeries(variance_policy=lambda values: ZERO_VARIANCES)
    result = estimator.analyze(monthly_ramp, "monthly")
    assert result.mu_series == pytest.approx([100.0, 105.0, 110.0, 115.0, 120.0])


def test_unknown_frequency_labels_like_monthly(monthly_ramp):
    result = run_structural_time_series(monthly_ramp, None)
    assert result.next_period_label == "6/2023"


def test_to_dict_shape(monthly_ramp):
    payload = run_structural_time_series(monthly_ramp, "monthly").to_dict()
    for key in (
        "mu_smoothed",
        "mu_ci_low",
        "mu_ci_high",
        "beta_smoothed",
        "beta_ci_low",
        "beta_ci_high",
        "muSeries",
        "betaSeries",
        "sigma2_epsilon",
        "sigma2_eta",
        "sigma2_zeta",
        "forecast",
        "direction",
        "strength",
        "uncertainty",
        "innovations",
        "anomalyIndices",
    ):
        assert key in payload
    assert set(payload["forecast"]) == {"nextPeriod", "mean", "p05", "p25", "p50", "p75", "p95"}


def test_default_result_to_dict():
    payload = STSResult().to_dict()
    assert payload["forecast"]["nextPeriod"] == "N/A"
    assert payload["muSeries"] == []
    assert payload["anomalyIndices"] == []


def test_confidence_interval_is_symmetric():
    low, high = confidence_interval(10.0, 4.0)
    assert low == pytest.approx(10.0 - 1.96 * 2)
    assert high == pytest.approx(10.0 + 1.96 * 2)


def test_confidence_interval_ignores_negative_variance():
    assert confidence_interval(1.0, -1e-12) == (1.0, 1.0)


@pytest.mark.parametrize(
    "low, high, level, expected",
    [
        (95.0, 105.0, 100.0, "moderate"),
        (98.0, 102.0, 100.0, "low"),
        (80.0, 120.0, 100.0, "high"),
        (-0.001, 0.001, 0.0, "high"),
    ],
)
def test_classify_uncertainty(low, high, level, expected):
    assert classify_uncertainty(low, high, level) == expected


def test_detect_anomalies_flat_innovations():
    assert detect_anomalies([0.0, 0.0, 0.0]) == []
    assert detect_anomalies([]) == []


def test_month_precision_dates(monthly_ramp):
    series = [{"date": r["date"][:7], "value": r["value"]} for r in monthly_ramp]
    series[1]["date"] = "2023-02-01"
    result = run_structural_time_series(series, "monthly")
    assert result.next_period_label == "Jun/2023"
    assert result.to_dict() == run_structural_time_series(monthly_ramp, "monthly").to_dict()
