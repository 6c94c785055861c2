"""
Monitor service running the evaluation cycle on a fixed period and holding the snapshot handed to renderers.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from __future__ import annotations

import asyncio
import contextlib
import logging
import random
import time
from collections import deque
from typing import Deque, List, Optional

from api.responses import Alert, CycleError, Snapshot
from config import settings
from datasources.base import SampleSource
from datasources.data_config import DataSourceSettings
from datasources.exceptions import SourceUnavailable
from datasources.factory import DataSourceFactory
from engine.cycle import CycleOrchestrator
from engine.escalation import LoggingAlertSink

log = logging.getLogger(__name__)


class RecentAlertSink(LoggingAlertSink):
    """Keeps the most recent alerts for the renderer and logs each one."""

    def __init__(self, maxlen: Optional[int] = None) -> None:
        self._alerts: Deque[Alert] = deque(maxlen=maxlen or settings.alert_history_size)

    def emit(self, alert: Alert) -> None:
        super().emit(alert)
        self._alerts.append(alert)

    def recent(self) -> List[Alert]:
        return list(reversed(self._alerts))

    def clear(self) -> None:
        self._alerts.clear()


class MonitorService:

    def __init__(
        self,
        orchestrator: CycleOrchestrator,
        interval: Optional[float] = None,
        alerts: Optional[RecentAlertSink] = None,
    ) -> None:
        self.orchestrator = orchestrator
        self.interval = interval if interval is not None else settings.cycle_interval_seconds
        self.alerts = alerts if alerts is not None else RecentAlertSink()
        self.last_error: Optional[CycleError] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def snapshot(self) -> Optional[Snapshot]:
        return self.orchestrator.snapshot

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def trigger(self) -> Snapshot:
        try:
            snapshot = await self.orchestrator.run_cycle()
        except SourceUnavailable as exc:
            self.last_error = CycleError(timestamp=time.time(), message=str(exc))
            log.warning("cycle failed: %s", exc)
            raise
        except Exception as exc:
            self.last_error = CycleError(timestamp=time.time(), message=f"cycle evaluation failed: {exc}")
            log.exception("cycle evaluation failed")
            raise
        self.last_error = None
        return snapshot

    async def tick(self) -> Optional[Snapshot]:
        if self.orchestrator.in_flight:
            log.debug("tick skipped: cycle already in flight")
            return None
        try:
            return await self.trigger()
        except Exception:
            # recorded in last_error by trigger
            return None

    async def _loop(self) -> None:
        while True:
            await self.tick()
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop())
        log.info("monitor loop started (interval=%.1fs)", self.interval)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        log.info("monitor loop stopped")

    async def aclose(self) -> None:
        await self.stop()
        await self.orchestrator.source.aclose()


def build_monitor(source: Optional[SampleSource] = None) -> MonitorService:
    rng = random.Random(settings.random_seed) if settings.random_seed is not None else random.Random()
    if source is None:
        source = DataSourceFactory.create_source(DataSourceSettings(), rng=rng)
    alerts = RecentAlertSink()
    orchestrator = CycleOrchestrator(source, alert_sink=alerts, rng=rng)
    return MonitorService(orchestrator, alerts=alerts)


_monitor: Optional[MonitorService] = None


def get_monitor() -> MonitorService:
    global _monitor
    if _monitor is None:
        _monitor = build_monitor()
    return _monitor


def set_monitor(monitor: Optional[MonitorService]) -> None:
    global _monitor
    _monitor = monitor
