"""
Threshold classification for metric readings: trend from consecutive values and health status from deterministic per-metric boundaries, with directionality (higher-is-worse or healthy band) configured per metric.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol, Tuple

from config import DIRECTION_BAND, DIRECTION_HIGHER_IS_WORSE, settings
from engine.enums import Metric, Status, Trend


@dataclass(frozen=True)
class ThresholdPolicy:
    direction: str = DIRECTION_HIGHER_IS_WORSE
    warning_above: float = math.inf
    critical_above: float = math.inf
    healthy_low: float = -math.inf
    healthy_high: float = math.inf
    critical_low: float = -math.inf
    critical_high: float = math.inf

    def __post_init__(self) -> None:
        if self.direction not in (DIRECTION_HIGHER_IS_WORSE, DIRECTION_BAND):
            raise ValueError(f"Unsupported threshold direction: {self.direction!r}")

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> ThresholdPolicy:
        fields = {k: v for k, v in raw.items() if k in cls.__dataclass_fields__}
        return cls(**fields)

    @classmethod
    def for_metric(cls, metric: Metric) -> ThresholdPolicy:
        raw = settings.classification_thresholds.get(metric.value)
        if raw is None:
            return cls()
        return cls.from_dict(raw)

    def status_of(self, value: float) -> Status:
        if self.direction == DIRECTION_BAND:
            if value < self.critical_low or value > self.critical_high:
                return Status.critical
            if value < self.healthy_low or value > self.healthy_high:
                return Status.warning
            return Status.healthy

        if value > self.critical_above:
            return Status.critical
        if value > self.warning_above:
            return Status.warning
        return Status.healthy


def trend_of(current: float, previous: float) -> Trend:
    if current > previous:
        return Trend.up
    if current < previous:
        return Trend.down
    return Trend.stable


def classify(current: float, previous: float, policy: ThresholdPolicy) -> Tuple[Trend, Status]:
    return trend_of(current, previous), policy.status_of(current)


def percent_change(current: float, previous: float) -> float:
    if previous == 0:
        return 0.0
    diff = (current - previous) / previous * 100.0
    if not math.isfinite(diff):
        return 0.0
    return diff


def format_change(current: float, previous: float) -> str:
    diff = percent_change(current, previous)
    if diff == 0:
        return "0%"
    return f"+{diff:.1f}%" if diff > 0 else f"{diff:.1f}%"


class ClassificationPolicy(Protocol):
    def evaluate(self, metric: Metric, current: float, previous: float) -> Tuple[Trend, Status]:
        ...


class ThresholdClassificationPolicy:
    """Deterministic boundary comparison; policies default to the configured thresholds."""

    def __init__(self, policies: Optional[Dict[Metric, ThresholdPolicy]] = None):
        self._policies: Dict[Metric, ThresholdPolicy] = dict(policies or {})

    def policy_for(self, metric: Metric) -> ThresholdPolicy:
        policy = self._policies.get(metric)
        if policy is None:
            policy = ThresholdPolicy.for_metric(metric)
        return policy

    def evaluate(self, metric: Metric, current: float, previous: float) -> Tuple[Trend, Status]:
        return classify(current, previous, self.policy_for(metric))
