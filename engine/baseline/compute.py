"""
Compute logic for baseline statistics (mean and standard deviation) over a metric's recent history, providing the expected value that the anomaly detector measures deviations against.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from config import settings


@dataclass(frozen=True)
class Baseline:
    mean: float
    std: float
    sample_count: int = 0


def compute(vals: Sequence[float]) -> Baseline:
    arr = np.array(list(vals), dtype=float)
    arr = arr[np.isfinite(arr)]
    n = len(arr)
    if n == 0:
        return Baseline(mean=0.0, std=1.0, sample_count=0)

    m = float(np.mean(arr))
    # sample std (ddof=1) once the window reaches baseline_min_samples
    if n >= settings.baseline_min_samples:
        s = float(np.std(arr, ddof=1)) or 1.0
    else:
        s = float(np.std(arr)) or 1.0

    return Baseline(mean=m, std=s, sample_count=n)


def z_score(val: float, baseline: Baseline) -> float:
    return abs(val - baseline.mean) / baseline.std if baseline.std else 0.0


def from_samples(history: List) -> Baseline:
    return compute([s.value for s in history])
