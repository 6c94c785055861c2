"""
Response models for API endpoints and the per-cycle pipeline output.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_serializer, model_validator
from pydantic.alias_generators import to_camel

from engine.enums import ConfidenceLevel, Metric, Severity, Status, Trend


def _coerce(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {k: _coerce(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_coerce(v) for v in obj]
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    return obj


class NpModel(BaseModel):
    # wire names are camelCase (expectedValue, issueType, predictedValue); numbers must be finite
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        allow_inf_nan=False,
    )

    @model_serializer(mode="wrap")
    def _serialize(self, handler: Any) -> Any:
        return _coerce(handler(self))


class Sample(NpModel):

    timestamp: float
    value: float = Field(ge=0.0)


class MetricReading(NpModel):
    """Raw per-metric payload handed over by a sample source."""

    current: float = Field(ge=0.0)
    history: List[Sample]


class Issue(NpModel):

    type: str
    description: str
    solution: str
    confidence: float = Field(ge=0.0, le=1.0)


class MetricState(NpModel):

    current: float
    previous: float
    history: List[Sample]
    trend: Trend
    status: Status
    issues: List[Issue] = Field(default_factory=list)

    @model_validator(mode="after")
    def _healthy_has_no_issues(self) -> MetricState:
        if self.status == Status.healthy and self.issues:
            raise ValueError("healthy metric cannot carry issues")
        return self


class Anomaly(NpModel):

    id: str
    metric: Metric
    timestamp: float
    value: float
    expected_value: float
    severity: Severity
    message: str
    issue_type: Optional[str] = None
    solution: Optional[str] = None
    confidence: float = Field(ge=0.0, le=1.0)


class Prediction(NpModel):

    metric: Metric
    timestamp: float
    predicted_value: float
    confidence: float = Field(ge=0.0, le=1.0)


class Snapshot(NpModel):

    metrics: Dict[Metric, MetricState]
    anomalies: List[Anomaly] = Field(default_factory=list)
    predictions: List[Prediction] = Field(default_factory=list)
    generated_at: float = 0.0


class ForecastPoint(NpModel):

    timestamp: float
    value: float
    kind: str


class ForecastPath(NpModel):

    metric: Metric
    unit: str
    confidence: float
    confidence_level: ConfidenceLevel
    points: List[ForecastPoint]


class Alert(NpModel):

    timestamp: float
    metric: Metric
    message: str


class CycleError(NpModel):

    timestamp: float
    message: str
