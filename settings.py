# settings.py — env / Streamlit secrets config for the PlayMax client
from __future__ import annotations

import os
from typing import Any, Dict, Optional

import streamlit as st

from errors import SettingsError


def _get_secret(name: str, default: Any = None) -> Any:
    """Read from env var or Streamlit secrets."""
    v = os.getenv(name)
    if v:
        return v
    try:
        if name in st.secrets:
            v2 = st.secrets[name]
            if v2:
                return v2
    except Exception:
        # no secrets.toml outside of `streamlit run`
        pass
    return default


def _as_float(name: str, default: float) -> float:
    raw = _get_secret(name, default)
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise SettingsError(f"{name} must be a number, got {raw!r}")
    if value <= 0:
        raise SettingsError(f"{name} must be positive, got {raw!r}")
    return value


# ---------------- Environments ----------------
BASE_URLS: Dict[str, Dict[str, str]] = {
    "prod": {
        "apis": "https://apis.playmaxx.club/api/apis/",
        "app": "https://apis.playmaxx.club/api/app/",
        "cdn": "https://www.playmaxx.club/UploadsFiles/",
    },
    "uat": {
        "apis": "https://uat-apis.playmaxx.club/api/apis/",
        "app": "https://uat-apis.playmaxx.club/api/app/",
        "cdn": "https://uat-site.playmaxx.club/UploadsFiles/",
    },
}


def app_env() -> str:
    env = str(_get_secret("PLAYMAX_ENV", "uat")).lower().strip()
    if env not in BASE_URLS:
        raise SettingsError(f"PLAYMAX_ENV must be one of {sorted(BASE_URLS)}, got {env!r}")
    return env


def is_uat() -> bool:
    return app_env() == "uat"


def base_urls() -> Dict[str, str]:
    return BASE_URLS[app_env()]


def admin_id() -> int:
    raw = _get_secret("PLAYMAX_ADMIN_ID", 1)
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise SettingsError(f"PLAYMAX_ADMIN_ID must be an integer, got {raw!r}")


def store_path() -> Optional[str]:
    """
    Session file for a single-user install. Unset means every browser session
    keeps its records in memory, so two visitors never share tokens.
    """
    raw = _get_secret("PLAYMAX_STORE_PATH")
    return os.path.expanduser(str(raw)) if raw else None


def http_timeout() -> float:
    return _as_float("PLAYMAX_HTTP_TIMEOUT", 20.0)


def banner_seconds() -> float:
    return _as_float("PLAYMAX_BANNER_SECONDS", 4.0)
