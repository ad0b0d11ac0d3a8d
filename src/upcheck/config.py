# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for Upcheck."""

import os
import re
from dataclasses import dataclass

from .version import __version__

DEFAULT_USER_AGENT = f"Upcheck/{__version__} (+https://github.com/theori-io/upcheck)"

_DURATION_RE = re.compile(r"^\s*(?P<value>\d+(?:\.\d+)?)\s*(?P<unit>ms|s|m|h)?\s*$", re.IGNORECASE)
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def parse_duration(value: object) -> float:
    """
    Parse a duration into seconds.

    Accepts plain numbers (seconds) or strings such as ``"500ms"``, ``"3s"``, ``"1m"``.
    Raises ValueError for anything else.
    """
    if isinstance(value, bool):
        raise ValueError(f"invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    match = _DURATION_RE.match(str(value or ""))
    if not match:
        raise ValueError(f"invalid duration: {value!r}")
    unit = (match.group("unit") or "s").lower()
    return float(match.group("value")) * _DURATION_UNITS[unit]


def _duration_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return parse_duration(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class HttpSettings:
    """HTTP transport defaults."""

    user_agent: str = DEFAULT_USER_AGENT
    allow_redirects: bool = True
    verify_ssl: bool = True
    max_body_bytes: int = 16 * 1024 * 1024

    @classmethod
    def from_env(cls) -> "HttpSettings":
        """Create settings from environment variables (evaluated at call time)."""
        max_body_bytes = _int_env("UPCHECK_HTTP_MAX_BODY_BYTES", cls.max_body_bytes)
        if max_body_bytes <= 0:
            max_body_bytes = cls.max_body_bytes
        return cls(
            user_agent=os.getenv("UPCHECK_USER_AGENT", cls.user_agent),
            allow_redirects=_bool_env("UPCHECK_HTTP_REDIRECTS", cls.allow_redirects),
            verify_ssl=_bool_env("UPCHECK_HTTP_VERIFY_SSL", cls.verify_ssl),
            max_body_bytes=max_body_bytes,
        )


@dataclass
class MonitorSettings:
    """Probe engine knobs: caching, circuit breaking, retry backoff and scheduling."""

    cache_ttl: float = 15.0
    circuit_failure_threshold: int = 3
    circuit_open_duration: float = 30.0
    retry_base_backoff: float = 0.2
    scheduler_interval: float = 30.0
    max_body_preview_chars: int = 2048

    @classmethod
    def from_env(cls) -> "MonitorSettings":
        """Create settings from environment variables (evaluated at call time)."""
        threshold = _int_env("UPCHECK_CIRCUIT_FAILURE_THRESHOLD", cls.circuit_failure_threshold)
        if threshold <= 0:
            threshold = cls.circuit_failure_threshold
        preview_chars = _int_env("UPCHECK_MAX_BODY_PREVIEW_CHARS", cls.max_body_preview_chars)
        if preview_chars < 0:
            preview_chars = cls.max_body_preview_chars
        interval = _duration_env("UPCHECK_SCHEDULER_INTERVAL", cls.scheduler_interval)
        if interval <= 0:
            interval = cls.scheduler_interval
        return cls(
            cache_ttl=_duration_env("UPCHECK_CACHE_TTL", cls.cache_ttl),
            circuit_failure_threshold=threshold,
            circuit_open_duration=_duration_env("UPCHECK_CIRCUIT_OPEN_DURATION", cls.circuit_open_duration),
            retry_base_backoff=_duration_env("UPCHECK_RETRY_BASE_BACKOFF", cls.retry_base_backoff),
            scheduler_interval=interval,
            max_body_preview_chars=preview_chars,
        )


def load_http_settings() -> HttpSettings:
    """Load HTTP settings from environment with sensible defaults."""
    return HttpSettings.from_env()


def load_monitor_settings() -> MonitorSettings:
    """Load probe engine settings from environment with sensible defaults."""
    return MonitorSettings.from_env()
