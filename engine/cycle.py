"""
Cycle orchestration for the metric evaluation pipeline.

One cycle pulls a reading for every metric from the sample source, classifies
trend and status against the previous cycle's values, diagnoses issues for
non-healthy metrics, runs the anomaly detector once, forecasts every metric,
applies the optional forced escalation and assembles a :class:`Snapshot`.

At most one cycle is evaluating at a time; callers that arrive while a cycle
is in flight wait for it to finish.  A failing or slow sample source aborts
the whole cycle with :class:`SourceUnavailable` and leaves the last good
snapshot untouched.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import asyncio
import logging
import random
import time
from enum import Enum
from typing import Callable, Dict, Optional

from api.responses import Alert, MetricReading, MetricState, Snapshot
from config import settings
from datasources.base import SampleSource, validate_readings
from datasources.exceptions import SourceUnavailable
from engine.anomaly import AnomalyPolicy, DeviationAnomalyPolicy
from engine.classify import ClassificationPolicy, ThresholdClassificationPolicy
from engine.diagnose import IssueCatalog, default_catalog, diagnose
from engine.enums import Metric
from engine.escalation import AlertSink, EscalationPolicy, LoggingAlertSink, alert_message, escalate
from engine.forecast import ForecastPolicy, LinearForecastPolicy

log = logging.getLogger(__name__)


class CycleState(str, Enum):
    idle = "idle"
    evaluating = "evaluating"


class CycleOrchestrator:

    def __init__(
        self,
        source: SampleSource,
        catalog: Optional[IssueCatalog] = None,
        classification: Optional[ClassificationPolicy] = None,
        anomaly_policy: Optional[AnomalyPolicy] = None,
        forecast_policy: Optional[ForecastPolicy] = None,
        escalation: Optional[EscalationPolicy] = None,
        alert_sink: Optional[AlertSink] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.source = source
        self.catalog = catalog if catalog is not None else default_catalog()
        self.classification = classification or ThresholdClassificationPolicy()
        self.rng = rng if rng is not None else random.Random()
        self.anomaly_policy = anomaly_policy or DeviationAnomalyPolicy(rng=self.rng)
        self.forecast_policy = forecast_policy or LinearForecastPolicy()
        self.escalation = escalation or EscalationPolicy.from_settings(rng=self.rng)
        self.alert_sink = alert_sink or LoggingAlertSink()
        self.clock = clock

        self._lock = asyncio.Lock()
        self._state = CycleState.idle
        self._snapshot: Optional[Snapshot] = None

    @property
    def snapshot(self) -> Optional[Snapshot]:
        return self._snapshot

    @property
    def state(self) -> CycleState:
        return self._state

    @property
    def in_flight(self) -> bool:
        return self._lock.locked()

    async def run_cycle(self, previous_snapshot: Optional[Snapshot] = None) -> Snapshot:
        async with self._lock:
            self._state = CycleState.evaluating
            try:
                return await self._evaluate(previous_snapshot)
            finally:
                self._state = CycleState.idle

    async def _fetch(self) -> Dict[Metric, MetricReading]:
        timeout = settings.source_timeout_seconds
        try:
            readings = await asyncio.wait_for(self.source.fetch_samples(), timeout=timeout)
            return validate_readings(readings)
        except asyncio.TimeoutError as exc:
            raise SourceUnavailable(f"sample source did not respond within {timeout}s") from exc
        except SourceUnavailable:
            raise
        except Exception as exc:
            raise SourceUnavailable(f"sample source failed: {exc}") from exc

    @staticmethod
    def _previous_value(
        metric: Metric,
        reading: MetricReading,
        previous_snapshot: Optional[Snapshot],
    ) -> float:
        if previous_snapshot is not None:
            state = previous_snapshot.metrics.get(metric)
            if state is not None:
                return state.current
        # first cycle: the newest history sample stands in for the previous reading
        return reading.history[-1].value

    async def _evaluate(self, previous_snapshot: Optional[Snapshot]) -> Snapshot:
        readings = await self._fetch()
        now = self.clock()
        if previous_snapshot is None:
            previous_snapshot = self._snapshot

        states: Dict[Metric, MetricState] = {}
        for metric in Metric:
            reading = readings[metric]
            previous = self._previous_value(metric, reading, previous_snapshot)
            trend, status = self.classification.evaluate(metric, reading.current, previous)
            states[metric] = MetricState(
                current=reading.current,
                previous=previous,
                history=reading.history,
                trend=trend,
                status=status,
                issues=diagnose(metric, status, self.catalog, self.rng),
            )

        anomalies = self.anomaly_policy.detect(now, readings, self.catalog)

        horizon = settings.forecast_horizon_seconds
        predictions = [
            self.forecast_policy.forecast(
                metric, readings[metric].current, readings[metric].history, now, horizon
            )
            for metric in Metric
        ]

        escalated = self.escalation.choose(list(Metric))
        if escalated is not None:
            states = escalate(states, escalated, self.catalog, self.rng)
            log.warning("escalation forced %s to critical", escalated.value)
            self._alert(escalated, now)

        snapshot = Snapshot(
            metrics=states,
            anomalies=anomalies,
            predictions=predictions,
            generated_at=now,
        )
        self._snapshot = snapshot
        log.debug(
            "cycle complete: %d anomalies, statuses=%s",
            len(anomalies),
            {m.value: s.status.value for m, s in states.items()},
        )
        return snapshot

    def _alert(self, metric: Metric, now: float) -> None:
        alert = Alert(timestamp=now, metric=metric, message=alert_message(metric))
        try:
            self.alert_sink.emit(alert)
        except Exception as exc:
            # fire-and-forget
            log.warning("alert sink failed for %s: %s", metric.value, exc)
