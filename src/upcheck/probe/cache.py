# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Last-result store doubling as a short-lived response cache."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timedelta

from ..models.result import HealthCheckResult, utcnow

logger = logging.getLogger(__name__)


def _detached(result: HealthCheckResult, **changes) -> HealthCheckResult:
    # Header dicts are never shared between the stored result and what callers receive.
    return replace(result, response_headers=dict(result.response_headers), **changes)


class ResultCache:
    """
    Holds the most recent result per target.

    Stored results never carry cache metadata; ``get`` builds a fresh copy with
    ``from_cache=True`` and ``cached_at`` set to the original timestamp. A result is fresh
    while its age is strictly less than ``ttl`` seconds.
    """

    def __init__(self, ttl: float, clock: Callable[[], datetime] | None = None) -> None:
        self.ttl = timedelta(seconds=ttl)
        self._clock = clock or utcnow
        self._lock = threading.Lock()
        self._results: dict[str, HealthCheckResult] = {}

    def get(self, target_id: str, *, force: bool = False) -> HealthCheckResult | None:
        """Return a cached copy when fresh, or None when the caller must probe."""
        if force:
            return None
        with self._lock:
            stored = self._results.get(target_id)
        if stored is None:
            return None
        age = self._clock() - stored.timestamp
        if age >= self.ttl:
            return None
        logger.debug("cache hit for %s (age %.3fs)", target_id, age.total_seconds())
        return _detached(stored, from_cache=True, cached_at=stored.timestamp)

    def put(self, result: HealthCheckResult) -> HealthCheckResult:
        """Store ``result`` as the latest for its target, dropping any cache metadata."""
        if result.from_cache or result.cached_at is not None:
            result = replace(result, from_cache=False, cached_at=None)
        with self._lock:
            self._results[result.target_id] = _detached(result)
        return result

    def latest(self, target_id: str) -> HealthCheckResult | None:
        with self._lock:
            stored = self._results.get(target_id)
        return None if stored is None else _detached(stored)

    def snapshot(self) -> dict[str, HealthCheckResult]:
        with self._lock:
            stored = dict(self._results)
        return {target_id: _detached(result) for target_id, result in stored.items()}


__all__ = ["ResultCache"]
