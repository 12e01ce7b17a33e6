"""
Environment-driven settings shared by the status service and the client.

Every value is read lazily so tests can override it with monkeypatch.setenv.
"""

from __future__ import annotations

import os

DEFAULT_API_BASE_URL = "http://practice.local"
DEFAULT_MONGO_URI = "mongodb://mongo_db:27017/devops_app"
DEFAULT_STATUS_VERSION = "version 2"


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str) -> float | None:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def api_base_url() -> str:
    return _env_str("API_BASE_URL", DEFAULT_API_BASE_URL)


def api_timeout_s() -> float | None:
    """
    Default per-request timeout for the client. Unset means no timeout.
    """
    return _env_float("API_TIMEOUT_S")


def auth_token_file() -> str | None:
    return os.environ.get("AUTH_TOKEN_FILE", "").strip() or None


def download_dir() -> str:
    return _env_str("DOWNLOAD_DIR", ".")


def mongo_uri() -> str:
    return _env_str("MONGO_URI", DEFAULT_MONGO_URI)


def mongo_timeout_ms() -> int:
    return _env_int("MONGO_TIMEOUT_MS", 2000)


def status_version() -> str:
    return _env_str("STATUS_VERSION", DEFAULT_STATUS_VERSION)


def cors_origins() -> list[str]:
    raw = _env_str("CORS_ORIGINS", "*")
    origins = [item.strip() for item in raw.split(",") if item.strip()]
    return origins or ["*"]


def log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO").upper()
