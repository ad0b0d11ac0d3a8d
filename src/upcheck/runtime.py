# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level Upcheck facade over the target store and probe engine."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from contextlib import suppress
from datetime import datetime
from typing import Any

from .config import HttpSettings, MonitorSettings, load_http_settings, load_monitor_settings
from .http.client import Transport, create_default_transport
from .models import HealthCheckResult, HealthSummary, Target, TargetConfig, TargetUpdate
from .probe.engine import ProbeEngine
from .scheduler import PeriodicChecker
from .store import TargetStore


class Upcheck:
    """
    Convenience wrapper that wires one transport, target store and probe engine together.

    This is the surface the API layer, CLI and scheduler consume. Unknown ids raise
    NotFoundError and malformed configuration raises ValidationError; nothing else does.
    """

    def __init__(
        self,
        transport: Transport | None = None,
        *,
        settings: MonitorSettings | None = None,
        http_settings: HttpSettings | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.settings = settings or load_monitor_settings()
        self.http_settings = http_settings or load_http_settings()
        self.transport = transport or create_default_transport(self.http_settings)
        self.store = TargetStore()
        self.engine = ProbeEngine(self.store, self.transport, self.settings, clock=clock)
        self._scheduler: PeriodicChecker | None = None

    def create_target(self, config: TargetConfig | Mapping[str, Any]) -> Target:
        if not isinstance(config, TargetConfig):
            config = TargetConfig.from_mapping(config)
        return self.store.create(config)

    def get_target(self, target_id: str) -> Target:
        return self.store.get(target_id)

    def list_targets(self) -> list[Target]:
        return self.store.list()

    def update_target(self, target_id: str, update: TargetUpdate | Mapping[str, Any]) -> Target:
        if not isinstance(update, TargetUpdate):
            update = TargetUpdate.from_mapping(update)
        return self.store.update(target_id, update)

    def delete_target(self, target_id: str) -> bool:
        # Cached results and breaker state stay behind keyed by the dead id.
        return self.store.delete(target_id)

    def check_target(self, target_id: str, force: bool = False) -> HealthCheckResult:
        return self.engine.check_target(target_id, force=force)

    def check_all(self) -> int:
        return self.engine.check_all()

    def get_last_results(self) -> dict[str, HealthCheckResult]:
        return self.engine.last_results()

    def get_summary(self) -> HealthSummary:
        return self.engine.summary()

    def start_scheduler(self, interval: float | None = None) -> PeriodicChecker:
        if self._scheduler is None:
            self._scheduler = PeriodicChecker(self.check_all, interval or self.settings.scheduler_interval)
        self._scheduler.start()
        return self._scheduler

    def stop_scheduler(self) -> None:
        if self._scheduler is not None:
            self._scheduler.stop()
            self._scheduler = None

    def close(self) -> None:
        self.stop_scheduler()
        with suppress(Exception):
            if hasattr(self.transport, "close"):
                self.transport.close()

    def __enter__(self) -> Upcheck:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()


__all__ = ["Upcheck"]
