"""
Indicator loading from Google Sheets (or a local CSV for development).

Every source is normalised into one long-format table with the columns in
``INDICATOR_COLUMNS``; diagnostics about the load are attached to
``df.attrs["diagnostics"]``.
"""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from typing import Any, Dict, List, Optional, Set, Tuple

import gspread
import pandas as pd
import streamlit as st
from google.oauth2.service_account import Credentials

logger = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets.readonly",
    "https://www.googleapis.com/auth/drive.readonly",
]
DEFAULT_SHEET_NAMES = ["indicator_values"]

SENTINELS: Set[str] = {"", "None", "none", "N/A", "n/a", "NA", "na", "null", "Null", "-", "—", "..."}
DATE_PATTERNS: List[str] = [
    "%Y-%m-%d",
    "%d/%m/%Y",
    "%Y-%m",
    "%m/%Y",  # monthly series exported as 06/2023
    "%Y",
]

INDICATOR_COLUMNS = [
    "indicator_code",
    "indicator_name",
    "category",
    "unit",
    "frequency",
    "reference_date",
    "value",
    "data_source",
]

COLUMN_ALIASES: Dict[str, str] = {
    "code": "indicator_code",
    "indicator": "indicator_name",
    "name": "indicator_name",
    "date": "reference_date",
    "period": "reference_date",
    "periodicity": "frequency",
    "unidade": "unit",
    "valor": "value",
    "data": "reference_date",
}


def _apply_aliases(df: pd.DataFrame) -> pd.DataFrame:
    """Rename alias headers onto canonical names, first match wins."""
    mapping: Dict[str, str] = {}
    taken = set(df.columns)
    for alias, canonical in COLUMN_ALIASES.items():
        if alias in df.columns and canonical not in taken:
            mapping[alias] = canonical
            taken.add(canonical)
    return df.rename(columns=mapping)


def _normalize_sentinels(df: pd.DataFrame) -> pd.DataFrame:
    """Replace sentinel string tokens with None (in-place) and record counts in df.attrs.

    Adds / updates:
        df.attrs['sentinel_replacements'] = {column: count_replaced, ...}
    """
    replacements = {}
    for col in df.columns:
        if pd.api.types.is_object_dtype(df[col]) or pd.api.types.is_string_dtype(df[col]):
            mask = df[col].apply(lambda v: isinstance(v, str) and v.strip() in SENTINELS)
            count = int(mask.sum())
            if count:
                replacements[col] = count
                df.loc[mask, col] = None
    if replacements:
        existing = df.attrs.get("sentinel_replacements", {})
        existing.update(replacements)
        df.attrs["sentinel_replacements"] = existing
    return df


def _multi_parse_dates(series: pd.Series, patterns: List[str]) -> pd.Series:
    """Parse with each explicit pattern in turn, then fall back to ISO 8601.

    Explicit day-first patterns run before the generic parser so that
    ``03/04/2023`` reads as 3 April.
    """
    raw = series.map(lambda v: None if pd.isna(v) else str(v).strip())
    parsed = pd.Series(pd.NaT, index=raw.index, dtype="datetime64[ns]")
    remaining_mask = raw.notna()

    for fmt in patterns:
        if not remaining_mask.any():
            break
        attempt = pd.to_datetime(raw[remaining_mask], format=fmt, errors="coerce")
        success = attempt.dropna()
        parsed.loc[success.index] = success
        remaining_mask = parsed.isna() & raw.notna()

    if remaining_mask.any():
        attempt = pd.to_datetime(raw[remaining_mask], format="ISO8601", errors="coerce", utc=True)
        success = attempt.dropna().dt.tz_localize(None)
        parsed.loc[success.index] = success
    return parsed


# "1.234" / "1.234.567": dots grouping thousands with no decimal comma
DOT_THOUSANDS = re.compile(r"^-?[1-9]\d{0,2}(\.\d{3})+$")


def _parse_number(value: Any) -> Optional[float]:
    """Parse numbers written either as ``1,234.5`` or Brazilian ``1.234,5``.

    A dot followed by exact groups of three digits (``1.234.567``) is read
    as a Brazilian thousands separator.
    """
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    text = re.sub(r"[^\d,.\-eE]", "", str(value))
    if not text:
        return None
    if "," in text and "." in text:
        if text.rfind(",") > text.rfind("."):
            text = text.replace(".", "").replace(",", ".")
        else:
            text = text.replace(",", "")
    elif "," in text:
        text = text.replace(",", ".")
    elif DOT_THOUSANDS.match(text):
        text = text.replace(".", "")
    try:
        return float(text)
    except ValueError:
        return None


def normalize_indicators(df: pd.DataFrame, source: str) -> pd.DataFrame:
    """Coerce a raw sheet/CSV frame into the long indicator table.

    Rows without a parsable date or value are dropped and counted in the
    diagnostics rather than raised.
    """
    if df.empty:
        return pd.DataFrame(columns=INDICATOR_COLUMNS)

    working = _apply_aliases(df.rename(columns=lambda c: str(c).strip().lower()).copy())
    missing = [col for col in ("reference_date", "value") if col not in working.columns]
    if missing:
        raise ValueError(f"Indicator source {source!r} is missing required columns: {missing}")

    working = _normalize_sentinels(working)
    raw_rows = int(len(working))

    if "indicator_name" not in working and "indicator_code" not in working:
        working["indicator_name"] = source
    if "indicator_code" not in working:
        working["indicator_code"] = working["indicator_name"]
    if "indicator_name" not in working:
        working["indicator_name"] = working["indicator_code"]
    for col in ("category", "unit", "frequency"):
        if col not in working:
            working[col] = None

    working["reference_date"] = _multi_parse_dates(working["reference_date"], DATE_PATTERNS)
    working["value"] = pd.to_numeric(working["value"].map(_parse_number), errors="coerce")
    working["data_source"] = working.get("data_source", source)

    unusable = working["reference_date"].isna() | working["value"].isna() | working["indicator_code"].isna()
    dropped = int(unusable.sum())
    if dropped:
        logger.info("Dropped %d of %d rows from %s without date, value or indicator", dropped, raw_rows, source)
    result = working.loc[~unusable, INDICATOR_COLUMNS].sort_values(
        ["indicator_code", "reference_date"], kind="stable"
    )
    result = result.reset_index(drop=True)
    result.attrs["diagnostics"] = {
        "raw_row_count": raw_rows,
        "dataframe_row_count": int(len(result)),
        "dropped_rows": dropped,
        "sentinel_replacements": working.attrs.get("sentinel_replacements", {}),
        "indicator_count": int(result["indicator_code"].nunique()),
        "sources": [source],
    }
    return result


def _get_secret(name: str, default: Optional[str] = None) -> Optional[str]:
    """Try env first, then st.secrets (if available)."""
    val = os.getenv(name)
    if val:
        return val
    try:
        sec = getattr(st, "secrets", None)
        if sec:
            v = sec.get(name)  # type: ignore[index]
            return str(v) if v is not None else default
    except Exception:
        # no secrets.toml outside Streamlit Cloud
        return default
    return default


def _parse_list(raw: Any) -> Optional[List[str]]:
    """Accept a TOML array, JSON array string or comma-separated string."""
    if raw is None:
        return None
    if isinstance(raw, list):
        return [str(x).strip() for x in raw if str(x).strip()] or None
    s = str(raw).strip()
    if not s:
        return None
    if s.startswith("[") and s.endswith("]"):
        try:
            return [str(x).strip() for x in json.loads(s) if str(x).strip()] or None
        except ValueError:
            pass
    return [item.strip() for item in s.split(",") if item.strip()] or None


def _get_list_secret(name: str, fallback_name: Optional[str] = None) -> Optional[List[str]]:
    for key in filter(None, (name, fallback_name)):
        values = _parse_list(os.getenv(key))
        if values:
            return values
        try:
            sec = getattr(st, "secrets", None)
            values = _parse_list(sec.get(key)) if sec else None  # type: ignore[union-attr]
        except Exception:
            values = None
        if values:
            return values
    return None


def _materialize_creds_if_inline(path_or_json: str) -> str:
    """If GOOGLE_APPLICATION_CREDENTIALS holds JSON content, write it to a temp file."""
    if os.path.exists(path_or_json):
        return path_or_json
    text = path_or_json.strip()
    if not (text.startswith("{") and text.endswith("}")):
        return path_or_json
    tmp_path = os.path.join(tempfile.gettempdir(), "trend-explorer-google-credentials.json")
    with open(tmp_path, "w", encoding="utf-8") as f:
        f.write(text)
    return tmp_path


def _available_secret_keys() -> List[str]:
    try:
        sec = getattr(st, "secrets", None)
        keys = list(sec.to_dict().keys()) if sec else []  # type: ignore[attr-defined]
    except Exception:
        keys = []
    return sorted(set(str(k) for k in keys))


def load_indicators() -> pd.DataFrame:
    """Resolve configuration and call the cached loader for the configured source."""
    from trend_explorer.bootstrap_env import ensure_env

    ensure_env()

    csv_path = _get_secret("INDICATORS_CSV")
    if csv_path:
        if not os.path.exists(csv_path):
            raise FileNotFoundError(f"INDICATORS_CSV file not found: {csv_path}")
        logger.info("Loading indicators from CSV %s", csv_path)
        return _load_csv_impl(csv_path)

    spreadsheet_id = _get_secret("SPREADSHEET_ID")
    sheet_names = _get_list_secret("SHEET_NAMES", fallback_name="SHEET_NAME") or DEFAULT_SHEET_NAMES
    if not spreadsheet_id:
        raise RuntimeError(
            "Neither INDICATORS_CSV nor SPREADSHEET_ID is configured (env or secrets). "
            f"Secrets keys: {_available_secret_keys()}"
        )

    service_account_raw = _get_secret("GOOGLE_APPLICATION_CREDENTIALS", "google-credentials.json")
    service_account_file = _materialize_creds_if_inline(service_account_raw or "")
    if not os.path.exists(service_account_file):
        raise FileNotFoundError(f"Service account file not found: {service_account_file}")

    logger.info("Loading indicators from spreadsheet %s tabs %s", spreadsheet_id, sheet_names)
    return _load_sheets_impl(spreadsheet_id, tuple(sheet_names), service_account_file)


@st.cache_data(show_spinner=False, ttl=600)
def _load_csv_impl(csv_path: str) -> pd.DataFrame:
    raw = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
    return normalize_indicators(raw, os.path.basename(csv_path))


@st.cache_data(show_spinner=False, ttl=600)
def _load_sheets_impl(spreadsheet_id: str, sheet_names: Tuple[str, ...], service_account_file: str) -> pd.DataFrame:
    """Load and normalise one or more sheet tabs.
    Cached by spreadsheet_id, sheet_names, and service_account_file.
    """
    credentials = Credentials.from_service_account_file(service_account_file, scopes=SCOPES)
    client = gspread.authorize(credentials)
    ss = client.open_by_key(spreadsheet_id)

    frames: List[pd.DataFrame] = []
    diagnostics: Dict[str, Any] = {
        "raw_row_count": 0,
        "dataframe_row_count": 0,
        "dropped_rows": 0,
        "sentinel_replacements": {},
        "sources": [],
    }
    for name in sheet_names:
        rows = ss.worksheet(name).get_all_records()
        frame = normalize_indicators(pd.DataFrame(rows), name)
        if frame.empty:
            continue
        part = frame.attrs["diagnostics"]
        for key in ("raw_row_count", "dataframe_row_count", "dropped_rows"):
            diagnostics[key] += part[key]
        diagnostics["sentinel_replacements"].update(part["sentinel_replacements"])
        diagnostics["sources"].append(name)
        frames.append(frame)

    if not frames:
        return pd.DataFrame(columns=INDICATOR_COLUMNS)

    df = pd.concat(frames, ignore_index=True)
    diagnostics["indicator_count"] = int(df["indicator_code"].nunique())
    df.attrs["diagnostics"] = diagnostics
    logger.info("Loaded %d observations for %d indicators", len(df), diagnostics["indicator_count"])
    return df
