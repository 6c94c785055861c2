"""
Forced escalation override applied after normal classification: with a small configured probability one metric is pushed to a critical, rising state with a fresh critical issue set, and a user-facing alert is raised so the renderer regularly exercises its critical path.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol, Sequence

from api.responses import Alert, MetricState
from config import settings
from engine.diagnose import IssueCatalog, diagnose
from engine.enums import Metric, Status, Trend

log = logging.getLogger(__name__)


def alert_message(metric: Metric) -> str:
    return f"Anomaly detected: Critical {metric.display_name.lower()}"


class AlertSink(Protocol):
    def emit(self, alert: Alert) -> None:
        ...


class LoggingAlertSink:
    def emit(self, alert: Alert) -> None:
        log.warning("ALERT %s (%s)", alert.message, alert.metric.value)


@dataclass
class EscalationPolicy:
    """Explicit values pin the override; None falls back to settings on every call."""

    enabled: Optional[bool] = None
    probability: Optional[float] = None
    rng: random.Random = field(default_factory=random.Random)

    @classmethod
    def from_settings(cls, rng: Optional[random.Random] = None) -> EscalationPolicy:
        return cls(rng=rng if rng is not None else random.Random())

    def is_enabled(self) -> bool:
        return settings.escalation_enabled if self.enabled is None else self.enabled

    def current_probability(self) -> float:
        return settings.escalation_probability if self.probability is None else self.probability

    def choose(self, metrics: Sequence[Metric]) -> Optional[Metric]:
        probability = self.current_probability()
        if not self.is_enabled() or probability <= 0 or not metrics:
            return None
        if self.rng.random() >= probability:
            return None
        return self.rng.choice(list(metrics))


def escalate(
    states: Dict[Metric, MetricState],
    metric: Metric,
    catalog: IssueCatalog,
    rng: Optional[random.Random] = None,
) -> Dict[Metric, MetricState]:
    escalated = dict(states)
    escalated[metric] = states[metric].model_copy(update={
        "status": Status.critical,
        "trend": Trend.up,
        "issues": diagnose(metric, Status.critical, catalog, rng),
    })
    return escalated
