"""Quick validation script for the trend estimators.

Run with `python scripts/validate_trend_engine.py` to check the structural
model and the quick trend on a small monthly series.
"""

from __future__ import annotations

import pandas as pd

from trend_explorer.analytics import get_estimator, next_period_label


def main() -> None:
    sample = pd.DataFrame(
        {
            "date": pd.date_range("2023-01-01", periods=5, freq="MS"),
            "value": [100.0, 105.0, 110.0, 115.0, 120.0],
        }
    )

    sts = get_estimator("sts").analyze(sample, "monthly")
    if sts.insufficient_data:
        raise SystemExit("Structural model returned the insufficient-data sentinel for 5 points")

    forecast = sts.forecast
    ordered = [forecast.p05, forecast.p25, forecast.p50, forecast.p75, forecast.p95]
    assert ordered == sorted(ordered), "Forecast percentiles must be non-decreasing"
    assert sts.mu_ci_low <= sts.mu_smoothed <= sts.mu_ci_high, "Level must sit inside its band"
    assert sts.direction == "up", f"Expected an upward trend, got {sts.direction}"
    assert forecast.next_period_label == next_period_label(sample["date"].iloc[-1], "monthly")

    simple = get_estimator("simple").analyze(sample, "monthly")
    assert simple.forecast.lower <= simple.forecast.value <= simple.forecast.upper

    print(
        "Trend engine validation passed.",
        f"STS forecast {forecast.next_period_label}: {forecast.mean:.2f}",
        f"(P5 {forecast.p05:.2f}, P95 {forecast.p95:.2f});",
        f"quick trend {simple.direction}/{simple.strength}.",
    )


if __name__ == "__main__":
    main()
