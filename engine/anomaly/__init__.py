"""
Anomaly detection for API metric readings, comparing observed values against a history baseline and classifying the relative deviation into low, medium or high severity with a detector confidence score.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.anomaly.detection import AnomalyPolicy, DeviationAnomalyPolicy, detect, relative_deviation

__all__ = ["AnomalyPolicy", "DeviationAnomalyPolicy", "detect", "relative_deviation"]
