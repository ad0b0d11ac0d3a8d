# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Outcome classification.

Maps one transport outcome (a response or a TransportFailure) plus the target's
thresholds to exactly one ``(status, category, message)`` triple. Response checks are
ordered and the first match wins:

1. latency above the slow threshold -> DEGRADED / SLOW_RESPONSE
2. 401 or 403 -> DOWN / AUTH_FAILURE
3. 429 -> DOWN / RATE_LIMIT
4. status outside the inclusive expected range -> DOWN / HTTP_ERROR
5. required substring missing from the body -> DOWN / HTTP_ERROR
6. body not JSON when JSON is expected -> DOWN / INVALID_JSON
7. otherwise UP / NONE

Every failure-path classification is DOWN.
"""

from __future__ import annotations

import json
from typing import NamedTuple

from ..errors import FailureKind, OtherTransportFailure, TransportFailure
from ..http.models import TransportResponse
from ..models.result import ErrorCategory, HealthStatus
from ..models.target import Target

MSG_SLOW = "Response exceeded slow threshold"
MSG_AUTH = "Authentication failed"
MSG_RATE_LIMIT = "Rate limited"
MSG_HTTP_STATUS = "Unexpected HTTP status"
MSG_BODY_MISSING = "Response body missing expected content"
MSG_INVALID_JSON = "Invalid JSON response"
MSG_TIMEOUT = "Request timed out"
MSG_DNS = "DNS resolution failed"
MSG_TLS = "TLS handshake failed"
MSG_CONNECTION = "Connection failed"
MSG_CIRCUIT_OPEN = "Circuit breaker open"

_FAILURE_CATEGORIES: dict[FailureKind, tuple[ErrorCategory, str]] = {
    FailureKind.TIMEOUT: (ErrorCategory.TIMEOUT, MSG_TIMEOUT),
    FailureKind.DNS: (ErrorCategory.DNS_FAILURE, MSG_DNS),
    FailureKind.TLS: (ErrorCategory.TLS_ERROR, MSG_TLS),
    FailureKind.CONNECTION: (ErrorCategory.CONNECTION_FAILURE, MSG_CONNECTION),
}

RETRYABLE_CATEGORIES = frozenset(
    {
        ErrorCategory.TIMEOUT,
        ErrorCategory.CONNECTION_FAILURE,
        ErrorCategory.DNS_FAILURE,
        ErrorCategory.TLS_ERROR,
        ErrorCategory.RATE_LIMIT,
    }
)


class Classification(NamedTuple):
    status: HealthStatus
    category: ErrorCategory
    message: str | None = None


UP = Classification(HealthStatus.UP, ErrorCategory.NONE, None)


def _is_json(body: str | None) -> bool:
    if body is None:
        return False
    try:
        json.loads(body)
    except ValueError:
        return False
    return True


def classify_response(target: Target, response: TransportResponse) -> Classification:
    """Classify a completed HTTP exchange against the target's expectations."""
    status_code = response.status_code

    if response.elapsed_ms > target.slow_threshold_ms:
        return Classification(HealthStatus.DEGRADED, ErrorCategory.SLOW_RESPONSE, MSG_SLOW)
    if status_code in (401, 403):
        return Classification(HealthStatus.DOWN, ErrorCategory.AUTH_FAILURE, MSG_AUTH)
    if status_code == 429:
        return Classification(HealthStatus.DOWN, ErrorCategory.RATE_LIMIT, MSG_RATE_LIMIT)
    if not target.expected_status_min <= status_code <= target.expected_status_max:
        return Classification(HealthStatus.DOWN, ErrorCategory.HTTP_ERROR, MSG_HTTP_STATUS)
    if target.expected_body_contains is not None and target.expected_body_contains not in (response.body or ""):
        return Classification(HealthStatus.DOWN, ErrorCategory.HTTP_ERROR, MSG_BODY_MISSING)
    if target.expect_json and not _is_json(response.body):
        return Classification(HealthStatus.DOWN, ErrorCategory.INVALID_JSON, MSG_INVALID_JSON)
    return UP


def classify_failure(failure: TransportFailure) -> Classification:
    """Classify a transport exchange that produced no response."""
    mapped = _FAILURE_CATEGORIES.get(failure.kind)
    if mapped is not None:
        category, message = mapped
        return Classification(HealthStatus.DOWN, category, message)
    if isinstance(failure, OtherTransportFailure):
        return Classification(HealthStatus.DOWN, ErrorCategory.UNKNOWN, failure.describe())
    return Classification(HealthStatus.DOWN, ErrorCategory.UNKNOWN, f"{type(failure).__name__}: {failure.detail}")


def circuit_open() -> Classification:
    return Classification(HealthStatus.DOWN, ErrorCategory.CIRCUIT_OPEN, MSG_CIRCUIT_OPEN)


def is_retryable(category: ErrorCategory, http_status: int | None = None) -> bool:
    """HTTP_ERROR is retried only for 5xx and 408; see RETRYABLE_CATEGORIES for the rest."""
    if category in RETRYABLE_CATEGORIES:
        return True
    if category is ErrorCategory.HTTP_ERROR and http_status is not None:
        return http_status >= 500 or http_status == 408
    return False


__all__ = [
    "Classification",
    "RETRYABLE_CATEGORIES",
    "circuit_open",
    "classify_failure",
    "classify_response",
    "is_retryable",
]
