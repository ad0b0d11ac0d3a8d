# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Per-target circuit breaker.

States::

    CLOSED ──(threshold consecutive failures)──► OPEN ──(open_until passes)──► usable
       ▲                                                                        │
       └──────────────────────────(any success)─────────────────────────────────┘

Expiry is evaluated lazily on query; nothing runs in the background. The failure counter
is only reset by a success, so after expiry a single further failure re-opens the breaker.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any

from ..models.result import utcnow

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class CircuitBreaker:
    """Consecutive-failure counter plus an optional open-until timestamp."""

    def __init__(self, name: str = "", clock: Clock | None = None) -> None:
        self.name = name
        self._clock = clock or utcnow
        self._lock = threading.Lock()
        self._consecutive_failures = 0
        self._open_until: datetime | None = None

    @property
    def consecutive_failures(self) -> int:
        return self._consecutive_failures

    @property
    def open_until(self) -> datetime | None:
        return self._open_until

    def is_open(self) -> bool:
        with self._lock:
            return self._open_until is not None and self._clock() < self._open_until

    def record_failure(self, threshold: int, open_duration: float) -> None:
        """Count a failure; reaching ``threshold`` opens the breaker for ``open_duration`` seconds."""
        with self._lock:
            self._consecutive_failures += 1
            if self._consecutive_failures >= threshold:
                self._open_until = self._clock() + timedelta(seconds=open_duration)
                logger.warning(
                    "[%s] Circuit breaker OPEN until %s (%d consecutive failures)",
                    self.name,
                    self._open_until.isoformat(),
                    self._consecutive_failures,
                )

    def record_success(self) -> None:
        with self._lock:
            was_tripped = self._open_until is not None or self._consecutive_failures > 0
            self._consecutive_failures = 0
            self._open_until = None
        if was_tripped:
            logger.info("[%s] Circuit breaker reset (success)", self.name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "open": self.is_open(),
            "consecutive_failures": self._consecutive_failures,
            "open_until": self._open_until.isoformat() if self._open_until else None,
        }


class CircuitBreakerRegistry:
    """Lazily creates one breaker per target id (insert-if-absent)."""

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._breakers: dict[str, CircuitBreaker] = {}

    def get(self, target_id: str) -> CircuitBreaker:
        with self._lock:
            breaker = self._breakers.get(target_id)
            if breaker is None:
                breaker = CircuitBreaker(target_id, clock=self._clock)
                self._breakers[target_id] = breaker
            return breaker

    def peek(self, target_id: str) -> CircuitBreaker | None:
        with self._lock:
            return self._breakers.get(target_id)

    def snapshot(self) -> dict[str, CircuitBreaker]:
        with self._lock:
            return dict(self._breakers)


__all__ = ["CircuitBreaker", "CircuitBreakerRegistry"]
