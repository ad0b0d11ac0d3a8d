# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Health check result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class HealthStatus(str, Enum):
    UP = "UP"
    DEGRADED = "DEGRADED"
    DOWN = "DOWN"
    UNKNOWN = "UNKNOWN"


class ErrorCategory(str, Enum):
    NONE = "NONE"
    TIMEOUT = "TIMEOUT"
    DNS_FAILURE = "DNS_FAILURE"
    TLS_ERROR = "TLS_ERROR"
    CONNECTION_FAILURE = "CONNECTION_FAILURE"
    HTTP_ERROR = "HTTP_ERROR"
    AUTH_FAILURE = "AUTH_FAILURE"
    RATE_LIMIT = "RATE_LIMIT"
    INVALID_JSON = "INVALID_JSON"
    SLOW_RESPONSE = "SLOW_RESPONSE"
    CIRCUIT_OPEN = "CIRCUIT_OPEN"
    UNKNOWN = "UNKNOWN"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class HealthCheckResult:
    """
    Outcome of one ``check_target`` call.

    Results are never mutated; cache reads derive a copy via ``dataclasses.replace`` with
    ``from_cache``/``cached_at`` filled in, leaving the stored original untouched.
    """

    target_id: str
    status: HealthStatus = HealthStatus.UNKNOWN
    error_category: ErrorCategory = ErrorCategory.UNKNOWN
    error_message: str | None = None
    http_status: int | None = None
    latency_ms: int = 0
    response_body_preview: str | None = None
    response_headers: dict[str, str] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=utcnow)
    attempts: int = 0
    from_cache: bool = False
    cached_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "target_id": self.target_id,
            "status": self.status.value,
            "error_category": self.error_category.value,
            "error_message": self.error_message,
            "http_status": self.http_status,
            "latency_ms": self.latency_ms,
            "response_body_preview": self.response_body_preview,
            "response_headers": dict(self.response_headers),
            "timestamp": _isoformat(self.timestamp),
            "attempts": self.attempts,
            "from_cache": self.from_cache,
            "cached_at": _isoformat(self.cached_at),
        }


@dataclass(frozen=True)
class HealthSummary:
    """Counts of last results per status; statuses with no results are omitted."""

    status_counts: dict[HealthStatus, int]
    computed_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "status_counts": {status.value: count for status, count in self.status_counts.items()},
            "computed_at": _isoformat(self.computed_at),
        }


__all__ = [
    "ErrorCategory",
    "HealthCheckResult",
    "HealthStatus",
    "HealthSummary",
    "utcnow",
]
