"""
Utility helpers for formatting indicator values, percentages and the
Portuguese trend/uncertainty labels shown next to model output.
"""

from __future__ import annotations

from typing import Optional

from trend_explorer.analytics.periods import Frequency, classify_frequency

PERCENT_UNIT_MARKERS = ("%", "a.m.", "a.a.")
CURRENCY_UNIT_MARKERS = ("r$", "mil", "reais")

DIRECTION_LABELS = {"up": "Alta", "down": "Baixa", "stable": "Estável"}
STRENGTH_LABELS = {"strong": "forte", "moderate": "moderada", "weak": "fraca"}
UNCERTAINTY_LABELS = {"low": "Baixa", "moderate": "Moderada", "high": "Alta"}
UNCERTAINTY_BAR_WIDTHS = {"low": 33, "moderate": 66, "high": 100}
PERIOD_NOUNS = {
    Frequency.DAILY: "dia",
    Frequency.MONTHLY: "mês",
    Frequency.QUARTERLY: "trimestre",
    Frequency.YEARLY: "ano",
}


def format_number(value: Optional[float], decimals: int = 0) -> str:
    if value is None:
        return "–"
    try:
        return f"{value:,.{decimals}f}"
    except (TypeError, ValueError):
        return "–"


def format_percent(value: Optional[float], decimals: int = 1) -> str:
    if value is None:
        return "–"
    try:
        return f"{value:.{decimals}f}%"
    except (TypeError, ValueError):
        return "–"


def _br_number(value: float, decimals: int = 2, trim: bool = False) -> str:
    """``1234.5`` -> ``1.234,50`` (or ``1.234,5`` with ``trim``)."""
    text = f"{value:,.{decimals}f}"
    if trim and "." in text:
        text = text.rstrip("0").rstrip(".")
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


def format_indicator_value(value: Optional[float], unit: Optional[str]) -> str:
    """Render a model output in the indicator's unit (percent, BRL or plain)."""
    if value is None:
        return "–"
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return "–"

    u = (unit or "").strip().lower()
    if any(marker in u for marker in PERCENT_UNIT_MARKERS):
        return f"{numeric:.2f}%"
    if any(marker in u for marker in CURRENCY_UNIT_MARKERS) or u == "brl":
        return f"R$ {_br_number(numeric, 2)}"
    return _br_number(numeric, 2, trim=True)


def trend_description(direction: str, strength: str, percentage_change: Optional[float] = None) -> str:
    if direction == "stable":
        return "Tendência estável"
    label = f"{DIRECTION_LABELS.get(direction, direction)} {STRENGTH_LABELS.get(strength, strength)}"
    if percentage_change is None:
        return label
    return f"{label} ({percentage_change:+.1f}%)"


def uncertainty_label(tier: str) -> str:
    return UNCERTAINTY_LABELS.get(tier, "N/A")


def uncertainty_bar_width(tier: str) -> int:
    return UNCERTAINTY_BAR_WIDTHS.get(tier, 50)


def slope_unit_suffix(unit: Optional[str]) -> str:
    """Slopes of percentage indicators are changes in percentage points."""
    if unit and "%" in unit:
        return "pp"
    return unit or ""


def period_noun(frequency) -> str:
    return PERIOD_NOUNS.get(classify_frequency(frequency), "período")
