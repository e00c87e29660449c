from __future__ import annotations

import logging
from datetime import timedelta

from cli.config import load_config
from logging_config import ContextualFormatter
from services.dashboard import build_default_controller, local_clock
from settings import DEFAULT_ENDPOINT_URL, get_settings


def test_environment_overrides_apply(monkeypatch) -> None:
    monkeypatch.setenv("DASHBOARD_ENDPOINT_URL", "https://sensors.example/exec")
    monkeypatch.setenv("DASHBOARD_POLL_INTERVAL", "120")
    monkeypatch.setenv("DASHBOARD_CLOCK_INTERVAL", "15")
    monkeypatch.setenv("DASHBOARD_REQUEST_TIMEOUT", "4.5")
    monkeypatch.setenv("DASHBOARD_TIMEZONE", "Asia/Tokyo")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    get_settings.cache_clear()
    build_default_controller.cache_clear()

    try:
        settings = get_settings()
        controller = build_default_controller()

        assert settings.endpoint_url == "https://sensors.example/exec"
        assert settings.request_timeout == 4.5
        assert settings.timezone == "Asia/Tokyo"
        assert settings.log_level == "DEBUG"
        assert controller.feed.endpoint_url == "https://sensors.example/exec"
        assert controller.poll_interval == 120.0
        assert controller.clock_interval == 15.0
        assert controller.snapshot().clock.utcoffset() == timedelta(hours=9)
    finally:
        build_default_controller.cache_clear()
        get_settings.cache_clear()


def test_invalid_values_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("DASHBOARD_ENDPOINT_URL", "   ")
    monkeypatch.setenv("DASHBOARD_POLL_INTERVAL", "soon")
    monkeypatch.setenv("DASHBOARD_CLOCK_INTERVAL", "-1")
    monkeypatch.setenv("DASHBOARD_TIMEZONE", "")
    get_settings.cache_clear()

    try:
        settings = get_settings()

        assert settings.endpoint_url == DEFAULT_ENDPOINT_URL
        assert settings.poll_interval == 300.0
        assert settings.clock_interval == 60.0
        assert settings.timezone is None
    finally:
        get_settings.cache_clear()


def test_unknown_timezone_falls_back_to_local_time(monkeypatch) -> None:
    monkeypatch.setenv("DASHBOARD_TIMEZONE", "Mars/Base")
    get_settings.cache_clear()
    build_default_controller.cache_clear()

    try:
        assert get_settings().timezone is None
        assert build_default_controller().snapshot().clock.tzinfo is not None
    finally:
        build_default_controller.cache_clear()
        get_settings.cache_clear()


def test_local_clock_is_timezone_aware() -> None:
    assert local_clock()().tzinfo is not None
    assert local_clock("UTC")().utcoffset() == timedelta(0)


def test_cli_config_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("DASHBOARD_BASE_URL", "http://dash.local:8080/")
    monkeypatch.setenv("CLI_POLL_INTERVAL", "2")
    monkeypatch.setenv("CLI_POLL_TIMEOUT", "zero")

    config = load_config()

    assert config.base_url == "http://dash.local:8080"
    assert config.poll_interval == 2.0
    assert config.poll_timeout == 30.0


def test_contextual_formatter_appends_extra_keys() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")
    record = logging.LogRecord("feed", logging.INFO, __file__, 1, "Feed responded", None, None)
    record.endpoint = "https://feed.test/exec"
    record.status_code = 200
    record.reason = None

    assert formatter.format(record) == "Feed responded | endpoint=https://feed.test/exec status_code=200"
