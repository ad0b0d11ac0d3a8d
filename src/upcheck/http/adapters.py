# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Programmable Transport for tests and dry runs."""

from __future__ import annotations

import threading
from collections import deque

from ..models.target import Target
from .client import Transport
from .models import TransportResponse

Outcome = TransportResponse | BaseException


class StubTransport(Transport):
    """
    Deterministic, programmable Transport.

    Outcomes are queued per target id and consumed in order; an exception outcome is
    raised instead of returned. When a target's queue is empty ``default`` is returned.
    """

    def __init__(self, default: TransportResponse | None = None):
        self.default = default or TransportResponse(status_code=200, body="{}", elapsed_ms=50)
        self._outcomes: dict[str, deque[Outcome]] = {}
        self._lock = threading.Lock()
        self.calls: list[Target] = []

    def enqueue(self, target_id: str, *outcomes: Outcome) -> None:
        with self._lock:
            self._outcomes.setdefault(target_id, deque()).extend(outcomes)

    def call_count(self, target_id: str | None = None) -> int:
        if target_id is None:
            return len(self.calls)
        return sum(1 for target in self.calls if target.id == target_id)

    def execute(self, target: Target) -> TransportResponse:
        with self._lock:
            self.calls.append(target)
            queue = self._outcomes.get(target.id)
            outcome = queue.popleft() if queue else self.default
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def close(self) -> None:
        return None
