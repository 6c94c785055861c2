"""
Test cases for the monitor service, including manual triggers, scheduled ticks, loop start/stop and the recent alert buffer.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import asyncio
import random

import pytest

from api.responses import Alert
from config import settings
from datasources.exceptions import SourceUnavailable
from datasources.synthetic import SyntheticSampleSource
from engine.classify import ThresholdClassificationPolicy
from engine.cycle import CycleOrchestrator
from engine.enums import Metric
from engine.escalation import EscalationPolicy
from services import monitor_service
from services.monitor_service import MonitorService, RecentAlertSink, build_monitor

from conftest import NOW, StubSource


def _service(source, interval=0.01):
    orch = CycleOrchestrator(
        source,
        escalation=EscalationPolicy(enabled=False),
        rng=random.Random(0),
        clock=lambda: NOW,
    )
    return MonitorService(orch, interval=interval)


@pytest.mark.asyncio
async def test_trigger_returns_snapshot_and_clears_error():
    source = StubSource()
    svc = _service(source)
    source.error = RuntimeError("down")
    with pytest.raises(SourceUnavailable):
        await svc.trigger()
    assert svc.last_error is not None
    assert "down" in svc.last_error.message

    source.error = None
    snap = await svc.trigger()
    assert svc.snapshot is snap
    assert svc.last_error is None


@pytest.mark.asyncio
async def test_tick_swallows_source_errors():
    svc = _service(StubSource(error=RuntimeError("nope")))
    assert await svc.tick() is None
    assert svc.snapshot is None
    assert svc.last_error is not None


@pytest.mark.asyncio
async def test_tick_skips_while_cycle_in_flight():
    source = StubSource(delay=0.05)
    svc = _service(source)
    running = asyncio.create_task(svc.trigger())
    await asyncio.sleep(0.01)
    assert await svc.tick() is None
    await running
    assert source.calls == 1


@pytest.mark.asyncio
async def test_loop_runs_until_stopped():
    source = StubSource()
    svc = _service(source, interval=0.01)
    svc.start()
    svc.start()  # idempotent
    assert svc.running
    await asyncio.sleep(0.05)
    await svc.stop()
    assert not svc.running
    assert source.calls >= 2
    assert svc.snapshot is not None

    calls = source.calls
    await asyncio.sleep(0.03)
    assert source.calls == calls


@pytest.mark.asyncio
async def test_loop_survives_failing_source():
    source = StubSource(error=RuntimeError("flaky"))
    svc = _service(source, interval=0.01)
    svc.start()
    await asyncio.sleep(0.05)
    assert svc.running
    await svc.stop()
    assert source.calls >= 2
    assert svc.snapshot is None


class ExplodingClassification:
    def evaluate(self, metric, current, previous):
        raise ZeroDivisionError("policy bug")


@pytest.mark.asyncio
async def test_loop_survives_failing_policy(caplog):
    source = StubSource()
    orch = CycleOrchestrator(
        source,
        classification=ExplodingClassification(),
        escalation=EscalationPolicy(enabled=False),
        rng=random.Random(0),
        clock=lambda: NOW,
    )
    svc = MonitorService(orch, interval=0.01)
    svc.start()
    await asyncio.sleep(0.05)
    assert svc.running
    await svc.stop()

    assert source.calls >= 2
    assert svc.snapshot is None
    assert "policy bug" in svc.last_error.message
    assert "cycle evaluation failed" in caplog.text


@pytest.mark.asyncio
async def test_tick_clears_error_after_recovery():
    source = StubSource()
    orch = CycleOrchestrator(
        source,
        classification=ExplodingClassification(),
        escalation=EscalationPolicy(enabled=False),
        rng=random.Random(0),
        clock=lambda: NOW,
    )
    svc = MonitorService(orch, interval=0.01)
    with pytest.raises(ZeroDivisionError):
        await svc.trigger()
    assert svc.last_error.message == "cycle evaluation failed: policy bug"

    assert await svc.tick() is None
    assert svc.last_error is not None

    orch.classification = ThresholdClassificationPolicy()
    assert await svc.tick() is not None
    assert svc.last_error is None


@pytest.mark.asyncio
async def test_aclose_stops_loop_and_closes_source():
    source = StubSource()
    svc = _service(source)
    svc.start()
    await svc.aclose()
    assert not svc.running
    assert source.closed


@pytest.mark.asyncio
async def test_stop_without_start_is_noop():
    svc = _service(StubSource())
    await svc.stop()
    assert not svc.running


def test_recent_alert_sink_keeps_newest_first():
    sink = RecentAlertSink(maxlen=2)
    for i, metric in enumerate([Metric.response_time, Metric.error_rate, Metric.request_rate]):
        sink.emit(Alert(timestamp=NOW + i, metric=metric, message=f"a{i}"))
    assert [a.message for a in sink.recent()] == ["a2", "a1"]
    sink.clear()
    assert sink.recent() == []


def test_recent_alert_sink_default_size(monkeypatch):
    monkeypatch.setattr(settings, "alert_history_size", 3)
    sink = RecentAlertSink()
    for i in range(5):
        sink.emit(Alert(timestamp=NOW + i, metric=Metric.error_rate, message=str(i)))
    assert len(sink.recent()) == 3


def test_build_monitor_shares_alert_sink(monkeypatch):
    monkeypatch.setattr(settings, "random_seed", 11)
    svc = build_monitor()
    assert isinstance(svc.orchestrator.source, SyntheticSampleSource)
    assert svc.orchestrator.alert_sink is svc.alerts
    assert svc.interval == settings.cycle_interval_seconds


def test_get_monitor_is_a_singleton():
    first = monitor_service.get_monitor()
    assert monitor_service.get_monitor() is first
    replacement = _service(StubSource())
    monitor_service.set_monitor(replacement)
    assert monitor_service.get_monitor() is replacement
