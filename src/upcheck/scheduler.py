# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Periodic background trigger for bulk checks."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


class PeriodicChecker:
    """
    Calls ``run`` on a daemon thread with a fixed delay between the end of one run and
    the start of the next. A failing run is logged and does not stop the loop.
    """

    def __init__(self, run: Callable[[], object], interval: float, *, name: str = "upcheck-scheduler") -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._run = run
        self.interval = interval
        self._name = name
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name=self._name, daemon=True)
        self._thread.start()
        logger.info("scheduler started (interval %.1fs)", self.interval)

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        self._thread = None

    def run_once(self) -> None:
        try:
            self._run()
        except Exception:
            logger.exception("scheduled check run failed")

    def _loop(self) -> None:
        while not self._stop.wait(self.interval):
            self.run_once()

    def __enter__(self) -> PeriodicChecker:
        self.start()
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.stop()


__all__ = ["PeriodicChecker"]
