# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-memory target registry."""

from __future__ import annotations

import threading

from .errors import NotFoundError
from .models.target import Target, TargetConfig, TargetUpdate


class TargetStore:
    """
    Lock-guarded mapping of target id to an immutable Target snapshot.

    Insertion order is preserved for ``list``. Updates swap the whole snapshot, so
    readers never observe a half-applied change.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._targets: dict[str, Target] = {}

    def create(self, config: TargetConfig) -> Target:
        target = config.build()
        return self.put(target)

    def put(self, target: Target) -> Target:
        with self._lock:
            self._targets[target.id] = target
        return target

    def get(self, target_id: str) -> Target:
        with self._lock:
            target = self._targets.get(target_id)
        if target is None:
            raise NotFoundError(target_id)
        return target

    def list(self) -> list[Target]:
        with self._lock:
            return list(self._targets.values())

    def ids(self) -> list[str]:
        with self._lock:
            return list(self._targets)

    def update(self, target_id: str, update: TargetUpdate) -> Target:
        with self._lock:
            current = self._targets.get(target_id)
            if current is None:
                raise NotFoundError(target_id)
            updated = update.apply(current)
            self._targets[target_id] = updated
        return updated

    def delete(self, target_id: str) -> bool:
        with self._lock:
            return self._targets.pop(target_id, None) is not None

    def __contains__(self, target_id: object) -> bool:
        with self._lock:
            return target_id in self._targets

    def __len__(self) -> int:
        with self._lock:
            return len(self._targets)


__all__ = ["TargetStore"]
