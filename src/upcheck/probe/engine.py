# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Probe orchestration.

``check_target`` walks a fixed pipeline per call::

    cache hit ──────────────────────────────────────────────► return cached copy
    cache miss / forced ─► breaker open ─► store CIRCUIT_OPEN result ─► return
                         └► breaker closed ─► retry loop ─► store result
                                                         ─► update breaker ─► return

The cache is consulted before the breaker, so an open breaker never hides a fresh cached
result. The circuit-open path does not touch the breaker's counters. Concurrent checks of
the same target are not serialized; the last writer wins for both the stored result and
the breaker update.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable
from datetime import datetime

from ..config import MonitorSettings, load_monitor_settings
from ..errors import NotFoundError
from ..http.client import Transport
from ..models.result import HealthCheckResult, HealthStatus, HealthSummary, utcnow
from ..store import TargetStore
from .cache import ResultCache
from .circuit import CircuitBreakerRegistry
from .classifier import circuit_open
from .retry import RetryController

logger = logging.getLogger(__name__)


class ProbeEngine:
    """Cache → circuit breaker → retry → classifier, for one target at a time."""

    def __init__(
        self,
        store: TargetStore,
        transport: Transport,
        settings: MonitorSettings | None = None,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store
        self.transport = transport
        self.settings = settings or load_monitor_settings()
        self._clock = clock or utcnow
        self.cache = ResultCache(self.settings.cache_ttl, clock=self._clock)
        self.breakers = CircuitBreakerRegistry(clock=self._clock)
        self.retry = RetryController(
            transport,
            base_backoff=self.settings.retry_base_backoff,
            max_body_preview_chars=self.settings.max_body_preview_chars,
            clock=self._clock,
        )

    def check_target(self, target_id: str, force: bool = False) -> HealthCheckResult:
        """
        Return the latest health of a target, probing when the cache cannot answer.

        Raises NotFoundError for unknown ids without touching any state. Network problems
        never raise; they come back as DOWN results.
        """
        target = self.store.get(target_id)

        cached = self.cache.get(target.id, force=force)
        if cached is not None:
            return cached

        breaker = self.breakers.get(target.id)
        if breaker.is_open():
            classification = circuit_open()
            result = HealthCheckResult(
                target_id=target.id,
                status=classification.status,
                error_category=classification.category,
                error_message=classification.message,
                timestamp=self._clock(),
            )
            logger.debug("circuit open for %s; skipping probe", target.id)
            return self.cache.put(result)

        result = self.cache.put(self.retry.run(target))
        if result.status is HealthStatus.UP:
            breaker.record_success()
        else:
            breaker.record_failure(
                self.settings.circuit_failure_threshold,
                self.settings.circuit_open_duration,
            )
        return result

    def check_all(self) -> int:
        """
        Check every registered target with ``force=False``, sequentially.

        Targets deleted after the id snapshot are skipped. Returns the number of targets
        actually checked.
        """
        checked = 0
        for target_id in self.store.ids():
            try:
                self.check_target(target_id, force=False)
            except NotFoundError:
                logger.debug("target %s removed before scheduled check; skipping", target_id)
                continue
            checked += 1
        return checked

    def last_results(self) -> dict[str, HealthCheckResult]:
        return self.cache.snapshot()

    def summary(self) -> HealthSummary:
        counts = Counter(result.status for result in self.cache.snapshot().values())
        return HealthSummary(status_counts=dict(counts), computed_at=self._clock())


__all__ = ["ProbeEngine"]
