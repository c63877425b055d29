"""
Bootstrap environment for Streamlit Cloud & local dev:
- Copy st.secrets into uppercase os.environ keys (nested -> PREFIX_CHILD)
- If the Google service account JSON arrives inline through secrets, write it
  to a temp file and point GOOGLE_APPLICATION_CREDENTIALS at it
- Finally, load .env (without overriding existing env vars)
"""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from typing import Any, Dict, Iterator, Optional, Tuple

import streamlit as st
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

CREDENTIALS_FILENAME = "trend-explorer-google-credentials.json"


def _sanitize_key(key: str) -> str:
    return re.sub(r"[^A-Za-z0-9_]", "_", key.upper())


def _flatten_secrets(prefix: str, val: Any) -> Iterator[Tuple[str, str]]:
    if isinstance(val, dict):
        for k, v in val.items():
            yield from _flatten_secrets(f"{prefix}_{k}", v)
    else:
        yield _sanitize_key(prefix), str(val)


def _secrets_dict() -> Dict[str, Any]:
    # st.secrets raises outside the Streamlit runtime or without secrets.toml
    try:
        secrets = getattr(st, "secrets", None)
        if not secrets:
            return {}
        try:
            return secrets.to_dict()  # type: ignore[attr-defined]
        except AttributeError:
            return dict(secrets)
    except Exception:
        return {}


def _bridge_secrets_to_env(secrets: Dict[str, Any]) -> None:
    for key, value in secrets.items():
        # credentials JSON is handled separately; flattening it would spray keys
        if key == "GOOGLE_CREDENTIALS_JSON":
            continue
        for flat_k, flat_v in _flatten_secrets(key, value):
            os.environ.setdefault(flat_k, flat_v)


def _inline_credentials(secrets: Dict[str, Any]) -> Optional[str]:
    creds = secrets.get("GOOGLE_CREDENTIALS_JSON")
    if not creds:
        return None
    if isinstance(creds, dict):
        return json.dumps(creds)
    try:
        json.loads(str(creds))
    except ValueError:
        logger.warning("GOOGLE_CREDENTIALS_JSON secret is not valid JSON; ignoring it")
        return None
    return str(creds)


def _materialize_google_credentials(secrets: Dict[str, Any]) -> None:
    """Write inline service-account JSON to a temp file if no file is configured."""
    existing_path = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
    if existing_path and os.path.exists(existing_path):
        return

    json_text = _inline_credentials(secrets)
    if not json_text:
        return
    tmp_path = os.path.join(tempfile.gettempdir(), CREDENTIALS_FILENAME)
    with open(tmp_path, "w", encoding="utf-8") as f:
        f.write(json_text)
    os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = tmp_path
    logger.info("Google credentials materialised from secrets to %s", tmp_path)


def ensure_env() -> None:
    """Idempotent: make sure env vars and creds are available.
    Safe to call multiple times, both inside and outside Streamlit runtime.
    """
    secrets = _secrets_dict()
    _bridge_secrets_to_env(secrets)
    _materialize_google_credentials(secrets)
    # load_dotenv does not override existing env vars by default
    load_dotenv()


# Execute on import for Streamlit main process, but also allow explicit calls elsewhere.
ensure_env()
