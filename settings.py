from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


DEFAULT_ENDPOINT_URL = (
    "https://script.google.com/macros/s/"
    "AKfycbzbKmO_4sx-0X6JuMeDkRaTu--xAp1RhHXBaz8xgL6qdM81seRB3SF5AUB9NAm4GP4P/exec"
)

_ENDPOINT_URL_ENV = "DASHBOARD_ENDPOINT_URL"
_POLL_INTERVAL_ENV = "DASHBOARD_POLL_INTERVAL"
_CLOCK_INTERVAL_ENV = "DASHBOARD_CLOCK_INTERVAL"
_REQUEST_TIMEOUT_ENV = "DASHBOARD_REQUEST_TIMEOUT"
_TIMEZONE_ENV = "DASHBOARD_TIMEZONE"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    endpoint_url: str
    poll_interval: float
    clock_interval: float
    request_timeout: float
    timezone: Optional[str]
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_timezone(name: str) -> Optional[str]:
    candidate = _read_optional_env(name, None)
    if candidate is None:
        return None
    try:
        ZoneInfo(candidate)
    except (ZoneInfoNotFoundError, ValueError):
        return None
    return candidate


def _read_seconds(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        endpoint_url=_read_str_env(_ENDPOINT_URL_ENV, DEFAULT_ENDPOINT_URL),
        poll_interval=_read_seconds(_POLL_INTERVAL_ENV, 300.0),
        clock_interval=_read_seconds(_CLOCK_INTERVAL_ENV, 60.0),
        request_timeout=_read_seconds(_REQUEST_TIMEOUT_ENV, 15.0),
        timezone=_read_timezone(_TIMEZONE_ENV),
        log_level=_read_log_level("INFO"),
    )
