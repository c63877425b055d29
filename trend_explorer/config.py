"""
Application-wide configuration constants and helper utilities.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Dict, List, Optional

from trend_explorer.analytics.base import MIN_OBSERVATIONS, STABLE_SLOPE_PCT, STRONG_SLOPE_PCT
from trend_explorer.analytics.simple import FIXED_GAIN
from trend_explorer.analytics.sts import ANOMALY_THRESHOLD, LOW_UNCERTAINTY, MODERATE_UNCERTAINTY

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class TabConfig:
    key: str
    label: str


# Ordered tab definitions for the dashboard
TABS: List[TabConfig] = [
    TabConfig("overview", "Overview"),
    TabConfig("trend_analysis", "Trend Analysis (STS)"),
    TabConfig("data_table", "Data Table"),
    TabConfig("data_quality", "Data Quality"),
]

ESTIMATOR_LABELS: Dict[str, str] = {
    "sts": "Structural model (Kalman + smoother)",
    "simple": "Quick trend (fixed gain)",
}

FREQUENCY_OPTIONS: Dict[str, Optional[str]] = {
    "Auto": None,
    "Daily": "daily",
    "Monthly": "monthly",
    "Quarterly": "quarterly",
    "Yearly": "yearly",
}


@dataclass(frozen=True)
class EstimatorSettings:
    """Thresholds used by the estimators, surfaced on the Data Quality tab."""

    min_observations: int = MIN_OBSERVATIONS
    stable_slope_pct: float = STABLE_SLOPE_PCT
    strong_slope_pct: float = STRONG_SLOPE_PCT
    low_uncertainty_band: float = LOW_UNCERTAINTY
    moderate_uncertainty_band: float = MODERATE_UNCERTAINTY
    anomaly_z: float = ANOMALY_THRESHOLD
    simple_gain: float = FIXED_GAIN
    analysis_cache_entries: int = 64


DEFAULT_SETTINGS = EstimatorSettings()


def get_setting(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    return value if value else default


def configure_logging(level: Optional[str] = None) -> None:
    """Attach a single stream handler to the root logger.

    Level comes from ``level`` or the LOG_LEVEL env var (default INFO).
    Safe to call on every Streamlit rerun.
    """
    level_name = (level or get_setting("LOG_LEVEL", "INFO") or "INFO").upper()
    root = logging.getLogger()
    root.setLevel(getattr(logging, level_name, logging.INFO))
    if any(getattr(h, "_trend_explorer", False) for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._trend_explorer = True  # type: ignore[attr-defined]
    root.addHandler(handler)
