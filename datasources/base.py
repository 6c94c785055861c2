"""
Sample source interface and shared validation for per-metric readings

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from abc import ABC, abstractmethod
from typing import Dict, Mapping

from api.responses import MetricReading
from datasources.exceptions import InvalidPayload
from engine.enums import Metric


class SampleSource(ABC):
    name: str = "source"

    @abstractmethod
    async def fetch_samples(self) -> Dict[Metric, MetricReading]: ...

    async def aclose(self) -> None:
        return None


def validate_readings(readings: Mapping[Metric, MetricReading]) -> Dict[Metric, MetricReading]:
    missing = [m.value for m in Metric if m not in readings]
    if missing:
        raise InvalidPayload(f"missing readings for: {', '.join(missing)}")

    out: Dict[Metric, MetricReading] = {}
    for metric in Metric:
        reading = readings[metric]
        history = reading.history
        if not history:
            raise InvalidPayload(f"{metric.value}: empty history")
        for prev, cur in zip(history, history[1:]):
            if cur.timestamp < prev.timestamp:
                raise InvalidPayload(f"{metric.value}: history timestamps out of order")
        out[metric] = reading
    return out
