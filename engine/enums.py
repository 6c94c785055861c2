"""
Enumerations for Metrics, Trend, Status, Severity and Confidence levels

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from enum import Enum

from config import settings

_DISPLAY_NAMES = {
    "responseTime": "Response Time",
    "errorRate": "Error Rate",
    "requestRate": "Request Rate",
    "activeEndpoints": "Active Endpoints",
}

_UNITS = {
    "responseTime": "ms",
    "errorRate": "%",
    "requestRate": "/min",
    "activeEndpoints": "",
}


class Metric(str, Enum):
    response_time = "responseTime"
    error_rate = "errorRate"
    request_rate = "requestRate"
    active_endpoints = "activeEndpoints"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self.value]

    @property
    def unit(self) -> str:
        return _UNITS[self.value]


class Trend(str, Enum):
    up = "up"
    down = "down"
    stable = "stable"


class Status(str, Enum):
    healthy = "healthy"
    warning = "warning"
    critical = "critical"


class Severity(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"

    @classmethod
    def from_deviation(cls, deviation: float, lower: float, upper: float) -> Severity:
        if deviation > upper:
            return cls.high
        if deviation >= lower:
            return cls.medium
        return cls.low


class ConfidenceLevel(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"

    @classmethod
    def from_confidence(cls, confidence: float) -> ConfidenceLevel:
        if confidence >= settings.forecast_confidence_high:
            return cls.high
        if confidence >= settings.forecast_confidence_medium:
            return cls.medium
        return cls.low
