"""
Classification of metric readings into trend and health status.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.classify.thresholds import (
    ClassificationPolicy,
    ThresholdClassificationPolicy,
    ThresholdPolicy,
    classify,
    format_change,
    percent_change,
    trend_of,
)

__all__ = [
    "ClassificationPolicy",
    "ThresholdClassificationPolicy",
    "ThresholdPolicy",
    "classify",
    "format_change",
    "percent_change",
    "trend_of",
]
