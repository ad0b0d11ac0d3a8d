# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Retry/backoff loop around single probe attempts."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import datetime

from ..errors import OtherTransportFailure, TransportFailure
from ..http.client import Transport
from ..models.result import HealthCheckResult, HealthStatus, utcnow
from ..models.target import Target
from .classifier import classify_failure, classify_response, is_retryable

logger = logging.getLogger(__name__)


def truncate_body(body: str | None, limit: int) -> str | None:
    """Plain character prefix of at most ``limit`` characters."""
    if body is None:
        return None
    return body[: max(0, limit)]


class RetryController:
    """
    Drives up to ``max_retries + 1`` attempts for a target.

    Stops on the first UP result or the first non-retryable category. Between attempts it
    sleeps ``base_backoff * 2 ** attempt_index`` seconds on the calling thread; there is no
    jitter, cap, or overall deadline. The returned result carries the total attempt count
    and the latency of the final attempt only.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        base_backoff: float,
        max_body_preview_chars: int,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.transport = transport
        self.base_backoff = base_backoff
        self.max_body_preview_chars = max_body_preview_chars
        self._clock = clock or utcnow

    def backoff_delay(self, attempt_index: int) -> float:
        return self.base_backoff * (2**attempt_index)

    def run(self, target: Target) -> HealthCheckResult:
        max_attempts = max(1, target.max_retries + 1)
        index = 0
        result = self.attempt(target, attempts=1)
        while True:
            if result.status is HealthStatus.UP:
                return result
            if not is_retryable(result.error_category, result.http_status):
                return result
            if index + 1 >= max_attempts:
                return result
            delay = self.backoff_delay(index)
            logger.debug(
                "attempt %d/%d for %s failed with %s; retrying in %.3fs",
                index + 1,
                max_attempts,
                target.id,
                result.error_category.value,
                delay,
            )
            time.sleep(delay)
            index += 1
            result = self.attempt(target, attempts=index + 1)

    def attempt(self, target: Target, *, attempts: int = 1) -> HealthCheckResult:
        """Run exactly one transport exchange and classify it; never raises for network problems."""
        start = time.monotonic()
        try:
            response = self.transport.execute(target)
        except TransportFailure as failure:
            return self._failure_result(target, failure, start=start, attempts=attempts)
        except Exception as exc:  # noqa: BLE001
            # Transports outside the TransportFailure union still must not escape.
            failure = OtherTransportFailure.from_exception(exc)
            return self._failure_result(target, failure, start=start, attempts=attempts)

        classification = classify_response(target, response)
        return HealthCheckResult(
            target_id=target.id,
            status=classification.status,
            error_category=classification.category,
            error_message=classification.message,
            http_status=response.status_code,
            latency_ms=response.elapsed_ms,
            response_body_preview=truncate_body(response.body, self.max_body_preview_chars),
            response_headers=dict(response.headers),
            timestamp=self._clock(),
            attempts=attempts,
        )

    def _failure_result(
        self,
        target: Target,
        failure: TransportFailure,
        *,
        start: float,
        attempts: int,
    ) -> HealthCheckResult:
        classification = classify_failure(failure)
        return HealthCheckResult(
            target_id=target.id,
            status=classification.status,
            error_category=classification.category,
            error_message=classification.message,
            latency_ms=int((time.monotonic() - start) * 1000),
            timestamp=self._clock(),
            attempts=attempts,
        )


__all__ = ["RetryController", "truncate_body"]
