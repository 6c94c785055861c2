"""
Baseline statistics for metric histories, used as the expected value reference by anomaly detection.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.baseline.compute import Baseline, compute, from_samples, z_score

__all__ = ["Baseline", "compute", "from_samples", "z_score"]
