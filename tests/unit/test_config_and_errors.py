# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import pytest

from upcheck import config
from upcheck.config import DEFAULT_USER_AGENT, parse_duration
from upcheck.errors import NotFoundError, UpcheckError, ValidationError


def test_monitor_settings_env_overrides(monkeypatch):
    monkeypatch.setenv("UPCHECK_CACHE_TTL", "5")
    monkeypatch.setenv("UPCHECK_CIRCUIT_FAILURE_THRESHOLD", "4")
    monkeypatch.setenv("UPCHECK_CIRCUIT_OPEN_DURATION", "2m")
    monkeypatch.setenv("UPCHECK_RETRY_BASE_BACKOFF", "50ms")
    monkeypatch.setenv("UPCHECK_SCHEDULER_INTERVAL", "10s")
    monkeypatch.setenv("UPCHECK_MAX_BODY_PREVIEW_CHARS", "128")

    settings = config.load_monitor_settings()

    assert settings.cache_ttl == 5.0
    assert settings.circuit_failure_threshold == 4
    assert settings.circuit_open_duration == 120.0
    assert settings.retry_base_backoff == pytest.approx(0.05)
    assert settings.scheduler_interval == 10.0
    assert settings.max_body_preview_chars == 128


def test_monitor_settings_invalid_env_fall_back(monkeypatch):
    monkeypatch.setenv("UPCHECK_CACHE_TTL", "not-a-duration")
    monkeypatch.setenv("UPCHECK_CIRCUIT_FAILURE_THRESHOLD", "0")
    monkeypatch.setenv("UPCHECK_SCHEDULER_INTERVAL", "0")
    monkeypatch.setenv("UPCHECK_MAX_BODY_PREVIEW_CHARS", "-5")

    settings = config.load_monitor_settings()

    assert settings.cache_ttl == config.MonitorSettings.cache_ttl
    assert settings.circuit_failure_threshold == config.MonitorSettings.circuit_failure_threshold
    assert settings.scheduler_interval == config.MonitorSettings.scheduler_interval
    assert settings.max_body_preview_chars == config.MonitorSettings.max_body_preview_chars


def test_http_settings_env_overrides(monkeypatch):
    monkeypatch.setenv("UPCHECK_USER_AGENT", "CustomAgent/1.0")
    monkeypatch.setenv("UPCHECK_HTTP_REDIRECTS", "false")
    monkeypatch.setenv("UPCHECK_HTTP_VERIFY_SSL", "0")
    monkeypatch.setenv("UPCHECK_HTTP_MAX_BODY_BYTES", "-1")

    settings = config.load_http_settings()

    assert settings.user_agent == "CustomAgent/1.0"
    assert settings.allow_redirects is False
    assert settings.verify_ssl is False
    assert settings.max_body_bytes == config.HttpSettings.max_body_bytes


def test_load_settings_reads_env_at_call_time(monkeypatch):
    monkeypatch.setenv("UPCHECK_CACHE_TTL", "7")
    assert config.load_monitor_settings().cache_ttl == 7.0
    monkeypatch.setenv("UPCHECK_CACHE_TTL", "8")
    assert config.load_monitor_settings().cache_ttl == 8.0
    monkeypatch.delenv("UPCHECK_USER_AGENT", raising=False)
    assert config.load_http_settings().user_agent == DEFAULT_USER_AGENT


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(3, 3.0), (0.25, 0.25), ("3", 3.0), ("3s", 3.0), ("250ms", 0.25), ("1m", 60.0), ("1h", 3600.0), (" 2S ", 2.0)],
)
def test_parse_duration(raw, expected):
    assert parse_duration(raw) == pytest.approx(expected)


@pytest.mark.parametrize("raw", ["", "fast", "-1s", "1d", None, True])
def test_parse_duration_rejects_garbage(raw):
    with pytest.raises(ValueError):
        parse_duration(raw)


def test_error_taxonomy():
    missing = NotFoundError("abc")
    assert isinstance(missing, UpcheckError)
    assert isinstance(missing, LookupError)
    assert missing.target_id == "abc"
    assert "abc" in str(missing)

    invalid = ValidationError("url", "bad")
    assert isinstance(invalid, ValueError)
    assert str(invalid) == "url: bad"
