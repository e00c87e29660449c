from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_BASE_URL = "http://localhost:8000"


@dataclass(frozen=True)
class CLIConfig:
    """Where the dashboard service lives and how patiently to wait on it."""

    base_url: str = DEFAULT_BASE_URL
    poll_interval: float = 0.5
    poll_timeout: float = 30.0


def _env_seconds(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def load_config(
    base_url: Optional[str] = None,
    poll_interval: Optional[float] = None,
    poll_timeout: Optional[float] = None,
) -> CLIConfig:
    """Explicit options win over ``DASHBOARD_BASE_URL`` / ``CLI_POLL_*`` variables."""
    defaults = CLIConfig()
    url = base_url or os.getenv("DASHBOARD_BASE_URL") or defaults.base_url
    return CLIConfig(
        base_url=url.rstrip("/"),
        poll_interval=(
            poll_interval
            if poll_interval is not None
            else _env_seconds("CLI_POLL_INTERVAL", defaults.poll_interval)
        ),
        poll_timeout=(
            poll_timeout
            if poll_timeout is not None
            else _env_seconds("CLI_POLL_TIMEOUT", defaults.poll_timeout)
        ),
    )
