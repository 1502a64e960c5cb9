from __future__ import annotations

import os
from pathlib import Path


DEFAULT_API_BASE_URL = "http://localhost:8086"
DEFAULT_API_TIMEOUT = 20.0
DEFAULT_PORT = 8000
DEFAULT_PDF_CACHE_TTL = 300
SUPPORTED_LOCALES = ("en", "de")
DEFAULT_LOG_FILE = "billdesk.log"
# httpx logs every request line at INFO.
DEFAULT_LOG_LEVELS = {"httpx": "WARNING"}
_LOG_LEVEL_NAMES = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _int_env(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid {name} value: {raw}") from exc


def _float_env(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid {name} value: {raw}") from exc


def is_debug() -> bool:
    return os.getenv("BD_DEBUG") == "1"


def api_base_url() -> str:
    url = (os.getenv("BD_API_BASE_URL") or "").strip() or DEFAULT_API_BASE_URL
    return url.rstrip("/")


def api_timeout() -> float:
    return _float_env("BD_API_TIMEOUT", DEFAULT_API_TIMEOUT)


def app_port() -> int:
    return _int_env("BD_PORT", DEFAULT_PORT)


def pdf_cache_ttl() -> int:
    return _int_env("BD_PDF_CACHE_TTL", DEFAULT_PDF_CACHE_TTL)


def currency() -> str:
    return (os.getenv("BD_CURRENCY") or "").strip().upper() or "EUR"


def locale() -> str:
    value = (os.getenv("BD_LOCALE") or "").strip().lower() or "en"
    if value not in SUPPORTED_LOCALES:
        raise ValueError(f"Invalid BD_LOCALE value: {value}")
    return value


def log_dir() -> Path:
    return Path((os.getenv("BD_LOG_DIR") or "").strip() or "./data/logs")


def log_file_name() -> str:
    return (os.getenv("BD_LOG_FILE") or "").strip() or DEFAULT_LOG_FILE


def log_levels() -> dict[str, str]:
    """Per-logger levels from BD_LOG_LEVELS, e.g. ``httpx=INFO,billdesk.pages=DEBUG``."""
    levels = dict(DEFAULT_LOG_LEVELS)
    raw = (os.getenv("BD_LOG_LEVELS") or "").strip()
    for entry in filter(None, (part.strip() for part in raw.split(","))):
        name, sep, level = entry.partition("=")
        name, level = name.strip(), level.strip().upper()
        if not sep or not name or level not in _LOG_LEVEL_NAMES:
            raise ValueError(f"Invalid BD_LOG_LEVELS entry: {entry}")
        levels[name] = level
    return levels


def storage_secret() -> str:
    secret = (os.getenv("BD_STORAGE_SECRET") or "").strip()
    if secret:
        return secret
    if is_debug():
        return "billdesk-dev-secret"
    raise RuntimeError("BD_STORAGE_SECRET must be set (or BD_DEBUG=1 for local development)")
