import logging
import os

from trend_explorer.bootstrap_env import _bridge_secrets_to_env, _flatten_secrets, _inline_credentials
from trend_explorer.config import DEFAULT_SETTINGS, TABS, configure_logging, get_setting


def test_tabs_cover_all_pages():
    assert [tab.key for tab in TABS] == ["overview", "trend_analysis", "data_table", "data_quality"]


def test_settings_mirror_estimator_constants():
    assert DEFAULT_SETTINGS.min_observations == 3
    assert DEFAULT_SETTINGS.stable_slope_pct == 0.5
    assert DEFAULT_SETTINGS.strong_slope_pct == 2.0
    assert DEFAULT_SETTINGS.analysis_cache_entries == 64


def test_get_setting(monkeypatch):
    monkeypatch.setenv("TREND_EXPLORER_TEST", "value")
    monkeypatch.delenv("TREND_EXPLORER_MISSING", raising=False)
    assert get_setting("TREND_EXPLORER_TEST") == "value"
    assert get_setting("TREND_EXPLORER_MISSING", "fallback") == "fallback"


def test_configure_logging_is_idempotent():
    root = logging.getLogger()
    configure_logging("DEBUG")
    configure_logging("WARNING")
    marked = [h for h in root.handlers if getattr(h, "_trend_explorer", False)]
    assert len(marked) == 1
    assert root.level == logging.WARNING


def test_flatten_secrets_nested_keys():
    flat = dict(_flatten_secrets("google", {"sheet-id": "abc", "tabs": {"main": "values"}}))
    assert flat == {"GOOGLE_SHEET_ID": "abc", "GOOGLE_TABS_MAIN": "values"}


def test_bridge_secrets_does_not_override_env(monkeypatch):
    monkeypatch.setenv("SPREADSHEET_ID", "from-env")
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    _bridge_secrets_to_env({"SPREADSHEET_ID": "from-secrets", "LOG_LEVEL": "DEBUG"})
    assert os.environ["SPREADSHEET_ID"] == "from-env"
    assert os.environ["LOG_LEVEL"] == "DEBUG"


def test_inline_credentials():
    assert _inline_credentials({}) is None
    assert _inline_credentials({"GOOGLE_CREDENTIALS_JSON": "not json"}) is None
    assert _inline_credentials({"GOOGLE_CREDENTIALS_JSON": {"type": "service_account"}}) == '{"type": "service_account"}'
