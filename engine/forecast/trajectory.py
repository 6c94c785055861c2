"""
Trajectory forecasting logic for API metrics, fitting a linear trend over the recent history window to project each metric's value at a fixed horizon, with an R²-based confidence score and a linear interpolation path for display.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import math
import time
from typing import List, Optional, Protocol, Sequence

import numpy as np

from api.responses import ForecastPoint, Prediction, Sample
from config import settings
from engine.enums import ConfidenceLevel, Metric


def _linear_fit(ts: List[float], vals: List[float]) -> tuple[float, float]:
    t = np.array(ts, dtype=float)
    v = np.array(vals, dtype=float)
    t_norm = t - t[0]
    slope, intercept = np.polyfit(t_norm, v, 1)
    return float(slope), float(intercept)


def _r_squared(ts: List[float], vals: List[float], slope: float, intercept: float) -> float:
    t_norm = np.array(ts, dtype=float) - ts[0]
    v = np.array(vals, dtype=float)
    predicted = slope * t_norm + intercept
    ss_res = np.sum((v - predicted) ** 2)
    ss_tot = np.sum((v - np.mean(v)) ** 2)
    return float(1.0 - ss_res / ss_tot) if ss_tot > 0 else 0.0


def _confidence(r2: float, n: int) -> float:
    floor = settings.forecast_confidence_floor
    coverage = min(1.0, n / float(max(1, settings.history_length + 1)))
    conf = floor + (0.99 - floor) * max(0.0, min(1.0, r2)) * coverage
    return round(max(0.0, min(1.0, conf)), 4)


class ForecastPolicy(Protocol):
    def forecast(
        self,
        metric: Metric,
        current_value: float,
        history: Sequence[Sample],
        now: float,
        horizon: float,
    ) -> Prediction:
        ...


class LinearForecastPolicy:
    """Least-squares line over history plus the current reading."""

    def forecast(
        self,
        metric: Metric,
        current_value: float,
        history: Sequence[Sample],
        now: float,
        horizon: float,
    ) -> Prediction:
        target = now + horizon
        ts = [s.timestamp for s in history if s.timestamp < now] + [now]
        vals = [s.value for s in history if s.timestamp < now] + [current_value]

        if len(vals) < settings.forecast_min_samples or len(set(ts)) < 2:
            return Prediction(
                metric=metric,
                timestamp=target,
                predicted_value=round(max(0.0, current_value), 4),
                confidence=settings.forecast_confidence_floor,
            )

        slope, intercept = _linear_fit(ts, vals)
        r2 = _r_squared(ts, vals, slope, intercept)
        predicted = slope * (target - ts[0]) + intercept
        if not math.isfinite(predicted):
            predicted = current_value

        return Prediction(
            metric=metric,
            timestamp=target,
            predicted_value=round(max(0.0, predicted), 4),
            confidence=_confidence(r2, len(vals)),
        )


def forecast(
    metric: Metric,
    current_value: float,
    history: Sequence[Sample],
    now: Optional[float] = None,
    horizon: Optional[float] = None,
) -> Prediction:
    if now is None:
        now = time.time()
    if horizon is None:
        horizon = settings.forecast_horizon_seconds
    return LinearForecastPolicy().forecast(metric, current_value, history, now, horizon)


def value_at(t: float, current_value: float, prediction: Prediction, now: float) -> float:
    span = prediction.timestamp - now
    if span == 0:
        return prediction.predicted_value
    return current_value + (prediction.predicted_value - current_value) * (t - now) / span


def interpolate(
    current_value: float,
    prediction: Prediction,
    now: float,
    steps: Optional[int] = None,
) -> List[ForecastPoint]:
    if steps is None:
        steps = settings.forecast_default_steps
    steps = max(1, int(steps))

    points = [ForecastPoint(timestamp=now, value=current_value, kind="current")]
    for i in range(1, steps):
        t = now + (prediction.timestamp - now) * i / steps
        points.append(ForecastPoint(
            timestamp=t,
            value=value_at(t, current_value, prediction, now),
            kind="forecast",
        ))
    points.append(ForecastPoint(
        timestamp=prediction.timestamp,
        value=prediction.predicted_value,
        kind="forecast",
    ))
    return points


def confidence_level(confidence: float) -> ConfidenceLevel:
    return ConfidenceLevel.from_confidence(confidence)
