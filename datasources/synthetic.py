"""
Synthetic sample source generating plausible API metric readings and short histories, for demos and for running the service without a collector.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import asyncio
import random
import time
from typing import Callable, Dict, List, Optional

from api.responses import MetricReading, Sample
from config import SYNTHETIC_PROFILES, settings
from datasources.base import SampleSource
from engine.enums import Metric


class SyntheticSampleSource(SampleSource):
    name = "synthetic"

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
        latency: float = 0.0,
    ):
        self.rng = rng if rng is not None else random.Random()
        self.clock = clock
        self.latency = latency

    def _history(self, base: float, variance: float, integral: bool, now: float) -> List[Sample]:
        count = settings.history_length
        step = settings.history_interval_seconds
        out: List[Sample] = []
        for i in range(count):
            value = max(0.0, base + (self.rng.random() - 0.5) * variance)
            if integral:
                value = float(int(value))
            out.append(Sample(timestamp=now - (count - i) * step, value=value))
        return out

    def generate(self) -> Dict[Metric, MetricReading]:
        now = self.clock()
        readings: Dict[Metric, MetricReading] = {}
        for metric in Metric:
            low, high, base, variance, integral = SYNTHETIC_PROFILES[metric.value]
            if integral:
                current = float(int(low) + self.rng.randrange(int(high - low)))
            else:
                current = low + self.rng.random() * (high - low)
            readings[metric] = MetricReading(
                current=current,
                history=self._history(base, variance, integral, now),
            )
        return readings

    async def fetch_samples(self) -> Dict[Metric, MetricReading]:
        if self.latency > 0:
            await asyncio.sleep(self.latency)
        return self.generate()
