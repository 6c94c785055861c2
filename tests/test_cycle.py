"""
Test cases for the cycle orchestrator, including classification against the previous cycle, source failures and timeouts, forced escalation, alert delivery and serialized concurrent cycles.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import asyncio
import random

import pytest

from api.responses import MetricReading, Sample
from config import settings
from datasources.exceptions import SourceUnavailable
from engine.cycle import CycleOrchestrator, CycleState
from engine.enums import Metric, Status, Trend
from engine.escalation import EscalationPolicy

from conftest import NOW, StubSource, readings


class ListSink:
    def __init__(self):
        self.alerts = []

    def emit(self, alert):
        self.alerts.append(alert)


class BrokenSink:
    def emit(self, alert):
        raise RuntimeError("sink down")


def _orchestrator(source, escalation=None, sink=None, seed=7):
    rng = random.Random(seed)
    return CycleOrchestrator(
        source,
        escalation=escalation or EscalationPolicy(enabled=False, rng=rng),
        alert_sink=sink or ListSink(),
        rng=rng,
        clock=lambda: NOW,
    )


@pytest.mark.asyncio
async def test_healthy_cycle_builds_complete_snapshot():
    orch = _orchestrator(StubSource())
    snap = await orch.run_cycle()

    assert set(snap.metrics) == set(Metric)
    assert snap.generated_at == NOW
    assert snap.anomalies == []
    assert [p.metric for p in snap.predictions] == list(Metric)
    for state in snap.metrics.values():
        assert state.status == Status.healthy
        assert state.issues == []
        assert state.trend == Trend.stable
        assert len(state.history) == 20
    assert orch.snapshot is snap
    assert orch.state == CycleState.idle


@pytest.mark.asyncio
async def test_first_cycle_uses_newest_history_sample_as_previous():
    orch = _orchestrator(StubSource(readings(current={Metric.response_time: 120.0})))
    snap = await orch.run_cycle()
    state = snap.metrics[Metric.response_time]
    assert state.previous == 100.0
    assert state.trend == Trend.up


@pytest.mark.asyncio
async def test_second_cycle_compares_with_first_cycle_current():
    source = StubSource(
        readings(current={Metric.response_time: 120.0}),
        readings(current={Metric.response_time: 110.0}),
    )
    orch = _orchestrator(source)
    await orch.run_cycle()
    snap = await orch.run_cycle()
    state = snap.metrics[Metric.response_time]
    assert state.previous == 120.0
    assert state.current == 110.0
    assert state.trend == Trend.down


@pytest.mark.asyncio
async def test_explicit_previous_snapshot_wins():
    first = await _orchestrator(StubSource(readings(current={Metric.request_rate: 130.0}))).run_cycle()
    orch = _orchestrator(StubSource())
    snap = await orch.run_cycle(previous_snapshot=first)
    state = snap.metrics[Metric.request_rate]
    assert state.previous == 130.0
    assert state.trend == Trend.down


@pytest.mark.asyncio
async def test_critical_response_time_gets_two_issues_and_an_anomaly():
    orch = _orchestrator(StubSource(readings(current={Metric.response_time: 200.0})))
    snap = await orch.run_cycle()

    state = snap.metrics[Metric.response_time]
    assert state.status == Status.critical
    assert state.trend == Trend.up
    assert len(state.issues) == 2
    assert all(0.70 <= i.confidence <= 0.95 for i in state.issues)

    assert [a.metric for a in snap.anomalies] == [Metric.response_time]
    assert snap.anomalies[0].value == 200.0


@pytest.mark.asyncio
async def test_warning_error_rate_gets_one_issue():
    orch = _orchestrator(StubSource(readings(current={Metric.error_rate: 3.0})))
    snap = await orch.run_cycle()
    state = snap.metrics[Metric.error_rate]
    assert state.status == Status.warning
    assert len(state.issues) == 1


@pytest.mark.asyncio
async def test_source_failure_keeps_last_snapshot():
    source = StubSource()
    orch = _orchestrator(source)
    good = await orch.run_cycle()

    source.error = RuntimeError("connection refused")
    with pytest.raises(SourceUnavailable, match="connection refused"):
        await orch.run_cycle()
    assert orch.snapshot is good
    assert orch.state == CycleState.idle


@pytest.mark.asyncio
async def test_slow_source_times_out(monkeypatch):
    monkeypatch.setattr(settings, "source_timeout_seconds", 0.01)
    orch = _orchestrator(StubSource(delay=0.2))
    with pytest.raises(SourceUnavailable, match="did not respond"):
        await orch.run_cycle()
    assert orch.snapshot is None


@pytest.mark.asyncio
async def test_missing_metric_aborts_cycle():
    partial = readings()
    del partial[Metric.active_endpoints]
    orch = _orchestrator(StubSource(partial))
    with pytest.raises(SourceUnavailable, match="activeEndpoints"):
        await orch.run_cycle()
    assert orch.snapshot is None


@pytest.mark.asyncio
async def test_out_of_order_history_aborts_cycle():
    bad = readings()
    bad[Metric.error_rate] = MetricReading(
        current=1.0,
        history=[Sample(timestamp=NOW - 5, value=1.0), Sample(timestamp=NOW - 10, value=1.0)],
    )
    orch = _orchestrator(StubSource(bad))
    with pytest.raises(SourceUnavailable, match="out of order"):
        await orch.run_cycle()


@pytest.mark.asyncio
async def test_forced_escalation_marks_one_metric_and_alerts():
    sink = ListSink()
    rng = random.Random(3)
    orch = _orchestrator(
        StubSource(),
        escalation=EscalationPolicy(enabled=True, probability=1.0, rng=rng),
        sink=sink,
    )
    snap = await orch.run_cycle()

    critical = [m for m, s in snap.metrics.items() if s.status == Status.critical]
    assert len(critical) == 1
    escalated = snap.metrics[critical[0]]
    assert escalated.trend == Trend.up
    assert len(escalated.issues) == 2

    assert len(sink.alerts) == 1
    alert = sink.alerts[0]
    assert alert.metric == critical[0]
    assert alert.timestamp == NOW
    assert alert.message == f"Anomaly detected: Critical {critical[0].display_name.lower()}"
    # escalation does not feed the anomaly list
    assert snap.anomalies == []


@pytest.mark.asyncio
async def test_zero_probability_never_escalates():
    sink = ListSink()
    orch = _orchestrator(
        StubSource(),
        escalation=EscalationPolicy(enabled=True, probability=0.0),
        sink=sink,
    )
    for _ in range(5):
        snap = await orch.run_cycle()
        assert all(s.status == Status.healthy for s in snap.metrics.values())
    assert sink.alerts == []


@pytest.mark.asyncio
async def test_broken_alert_sink_does_not_fail_cycle():
    orch = _orchestrator(
        StubSource(),
        escalation=EscalationPolicy(enabled=True, probability=1.0, rng=random.Random(1)),
        sink=BrokenSink(),
    )
    snap = await orch.run_cycle()
    assert orch.snapshot is snap


@pytest.mark.asyncio
async def test_concurrent_cycles_run_one_at_a_time():
    source = StubSource(delay=0.02)
    orch = _orchestrator(source)
    results = await asyncio.gather(*(orch.run_cycle() for _ in range(3)))
    assert source.calls == 3
    assert source.max_active == 1
    assert orch.snapshot is results[-1]
    assert not orch.in_flight


@pytest.mark.asyncio
async def test_state_is_evaluating_while_in_flight():
    orch = _orchestrator(StubSource(delay=0.05))
    task = asyncio.create_task(orch.run_cycle())
    await asyncio.sleep(0.01)
    assert orch.state == CycleState.evaluating
    assert orch.in_flight
    await task
    assert orch.state == CycleState.idle


@pytest.mark.asyncio
async def test_escalation_toggle_applies_to_running_orchestrator(monkeypatch):
    sink = ListSink()
    rng = random.Random(8)
    orch = CycleOrchestrator(StubSource(), alert_sink=sink, rng=rng, clock=lambda: NOW)

    monkeypatch.setattr(settings, "escalation_enabled", True)
    monkeypatch.setattr(settings, "escalation_probability", 1.0)
    await orch.run_cycle()
    assert len(sink.alerts) == 1

    monkeypatch.setattr(settings, "escalation_enabled", False)
    snap = await orch.run_cycle()
    assert len(sink.alerts) == 1
    assert all(s.status == Status.healthy for s in snap.metrics.values())
