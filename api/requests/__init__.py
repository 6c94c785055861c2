from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from api.responses import Anomaly
from config import settings
from engine.enums import Metric, Severity


class AnomalyFilter(BaseModel):
    severity: Optional[Severity] = None
    metric: Optional[Metric] = None

    def apply(self, anomalies: List[Anomaly]) -> List[Anomaly]:
        rows = [
            a for a in anomalies
            if (self.severity is None or a.severity == self.severity)
            and (self.metric is None or a.metric == self.metric)
        ]
        return sorted(rows, key=lambda a: a.timestamp, reverse=True)


class ForecastPathRequest(BaseModel):
    metric: Metric
    steps: Optional[int] = Field(default=None, ge=1)

    @field_validator("steps")
    @classmethod
    def validate_steps(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v > settings.forecast_max_steps:
            raise ValueError(f"steps must be at most {settings.forecast_max_steps}")
        return v
