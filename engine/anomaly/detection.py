"""
Detection logic for identifying anomalous readings in API metrics by comparing observed values against a baseline expectation drawn from each metric's recent history, bucketing the relative deviation into a severity and attaching a detector confidence and a catalog remediation hint.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import List, Mapping, Optional, Protocol, Tuple

from scipy.stats import norm

from api.responses import Anomaly, MetricReading
from config import settings
from engine.baseline import Baseline, from_samples, z_score
from engine.diagnose import IssueCatalog, pick_issue
from engine.enums import Metric, Severity


@dataclass(frozen=True)
class _Candidate:
    metric: Metric
    timestamp: float
    value: float
    expected: float
    deviation: float
    z: float
    severity: Severity


def relative_deviation(value: float, baseline: Baseline) -> float:
    expected = baseline.mean
    if expected != 0:
        return abs(value - expected) / abs(expected)
    # zero baseline: measure against the spread instead
    scale = baseline.std or 1.0
    return abs(value - expected) / scale


def _bounds(metric: Metric) -> Tuple[float, float]:
    lower, upper = settings.anomaly_severity_bounds.get(metric.value, (0.25, 0.5))
    return float(lower), float(upper)


def _confidence(z: float) -> float:
    lo = settings.anomaly_confidence_min
    hi = settings.anomaly_confidence_max
    certainty = 2.0 * float(norm.cdf(abs(z))) - 1.0
    if not math.isfinite(certainty):
        certainty = 0.0
    conf = lo + (hi - lo) * max(0.0, min(1.0, certainty))
    return round(max(lo, min(hi, conf)), 4)


def _strongest(metric: Metric, reading: MetricReading, cycle_timestamp: float) -> Optional[_Candidate]:
    history = reading.history
    if len(history) < settings.anomaly_min_samples:
        return None

    baseline = from_samples(history)
    window_start = cycle_timestamp - settings.anomaly_lookback_seconds
    points = [
        (s.timestamp, s.value)
        for s in history
        if window_start <= s.timestamp <= cycle_timestamp
    ]
    points.append((cycle_timestamp, reading.current))

    ts, value = max(points, key=lambda p: (relative_deviation(p[1], baseline), p[0]))
    deviation = relative_deviation(value, baseline)
    threshold = settings.anomaly_deviation_thresholds.get(metric.value)
    if threshold is None or deviation <= threshold:
        return None

    lower, upper = _bounds(metric)
    z = z_score(value, baseline)
    return _Candidate(
        metric=metric,
        timestamp=float(ts),
        value=float(value),
        expected=baseline.mean,
        deviation=deviation,
        z=z,
        severity=Severity.from_deviation(deviation, lower, upper),
    )


class AnomalyPolicy(Protocol):
    def detect(
        self,
        cycle_timestamp: float,
        readings: Mapping[Metric, MetricReading],
        catalog: IssueCatalog,
    ) -> List[Anomaly]:
        ...


class DeviationAnomalyPolicy:

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng

    def detect(
        self,
        cycle_timestamp: float,
        readings: Mapping[Metric, MetricReading],
        catalog: IssueCatalog,
    ) -> List[Anomaly]:
        candidates: List[_Candidate] = []
        for metric in Metric:
            reading = readings.get(metric)
            if reading is None:
                continue
            cand = _strongest(metric, reading, cycle_timestamp)
            if cand is not None:
                candidates.append(cand)

        limit = max(0, int(settings.anomaly_max_per_cycle))
        kept = sorted(candidates, key=lambda c: c.deviation, reverse=True)[:limit]
        kept.sort(key=lambda c: (c.timestamp, c.metric.value))

        stamp = int(cycle_timestamp * 1000)
        anomalies: List[Anomaly] = []
        for i, c in enumerate(kept):
            issue = pick_issue(c.metric, catalog, self.rng)
            anomalies.append(Anomaly(
                id=f"anomaly-{stamp}-{i}",
                metric=c.metric,
                timestamp=c.timestamp,
                value=round(c.value, 4),
                expected_value=round(c.expected, 4),
                severity=c.severity,
                message=f"Unusual {c.metric.value} detected - {c.severity.value} severity",
                issue_type=issue.type if issue else None,
                solution=issue.solution if issue else None,
                confidence=_confidence(c.z),
            ))
        return anomalies


def detect(
    cycle_timestamp: float,
    readings: Mapping[Metric, MetricReading],
    catalog: IssueCatalog,
    rng: Optional[random.Random] = None,
) -> List[Anomaly]:
    return DeviationAnomalyPolicy(rng=rng).detect(cycle_timestamp, readings, catalog)
