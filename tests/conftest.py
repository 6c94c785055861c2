import asyncio
import os
import random
import sys
from typing import Dict, List, Optional

import pytest

# ensure workspace root is on sys.path so our application packages can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from api.responses import MetricReading, Sample
from datasources.base import SampleSource
from engine.enums import Metric
from services import monitor_service

NOW = 1_760_000_000.0

# healthy under the default thresholds
BASE_VALUES: Dict[Metric, float] = {
    Metric.response_time: 100.0,
    Metric.error_rate: 1.0,
    Metric.request_rate: 100.0,
    Metric.active_endpoints: 10.0,
}


def history(values: List[float], end: float = NOW, step: float = 5.0) -> List[Sample]:
    n = len(values)
    return [Sample(timestamp=end - (n - i) * step, value=v) for i, v in enumerate(values)]


def wobble(base: float, n: int = 20, amplitude: float = 0.01) -> List[float]:
    # -a, 0, +a repeating around base
    return [base * (1 + ((i % 3) - 1) * amplitude) for i in range(n)]


def readings(
    current: Optional[Dict[Metric, float]] = None,
    histories: Optional[Dict[Metric, List[float]]] = None,
    end: float = NOW,
) -> Dict[Metric, MetricReading]:
    current = current or {}
    histories = histories or {}
    out: Dict[Metric, MetricReading] = {}
    for metric, base in BASE_VALUES.items():
        vals = histories.get(metric, wobble(base))
        out[metric] = MetricReading(
            current=current.get(metric, base),
            history=history(vals, end=end),
        )
    return out


class StubSource(SampleSource):
    """Replays a queue of readings (or raises) and records concurrent calls."""

    name = "stub"

    def __init__(self, *batches, error: Optional[Exception] = None, delay: float = 0.0):
        self.batches = list(batches) or [readings()]
        self.error = error
        self.delay = delay
        self.calls = 0
        self.active = 0
        self.max_active = 0
        self.closed = False

    async def fetch_samples(self):
        self.calls += 1
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.error is not None:
                raise self.error
            if len(self.batches) > 1:
                return self.batches.pop(0)
            return self.batches[0]
        finally:
            self.active -= 1

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def make_readings():
    return readings


@pytest.fixture
def make_history():
    return history


@pytest.fixture
def stub_source_cls():
    return StubSource


@pytest.fixture(autouse=True)
def reset_monitor():
    monitor_service.set_monitor(None)
    yield
    monitor_service.set_monitor(None)
