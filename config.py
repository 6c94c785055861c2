"""
Constants and configuration for apipulse.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import os
from typing import Any, Dict, List, Optional, Tuple

from pydantic_settings import BaseSettings


SOURCE_BACKEND_SYNTHETIC = "synthetic"
SOURCE_BACKEND_COLLECTOR = "collector"

APIPULSE_SOURCE_BACKEND = os.getenv("APIPULSE_SOURCE_BACKEND", SOURCE_BACKEND_SYNTHETIC).lower()
APIPULSE_COLLECTOR_URL = os.getenv("APIPULSE_COLLECTOR_URL", "http://collector:9100").rstrip("/")
APIPULSE_CONNECTOR_TIMEOUT = int(os.getenv("APIPULSE_CONNECTOR_TIMEOUT", "3"))

DIRECTION_HIGHER_IS_WORSE = "higher_is_worse"
DIRECTION_BAND = "band"

# per-metric health boundaries, keyed by Metric value
CLASSIFICATION_THRESHOLDS: Dict[str, Dict[str, Any]] = {
    "responseTime": {
        "direction": DIRECTION_HIGHER_IS_WORSE,
        "warning_above": 150.0,
        "critical_above": 180.0,
    },
    "errorRate": {
        "direction": DIRECTION_HIGHER_IS_WORSE,
        "warning_above": 2.5,
        "critical_above": 4.0,
    },
    "requestRate": {
        "direction": DIRECTION_BAND,
        "healthy_low": 60.0,
        "healthy_high": 140.0,
        "critical_low": 50.0,
        "critical_high": 150.0,
    },
    "activeEndpoints": {
        "direction": DIRECTION_BAND,
        "healthy_low": 6.0,
        "healthy_high": 14.0,
        "critical_low": 5.0,
        "critical_high": 15.0,
    },
}

# canned root-cause entries: metric -> [(type, description, solution)]
ISSUE_CATALOG: Dict[str, List[Tuple[str, str, str]]] = {
    "responseTime": [
        ("Network Latency", "High network latency detected",
         "Consider CDN implementation or optimize server network configuration"),
        ("Server Overload", "Server processing time is high",
         "Scale up server resources or optimize database queries"),
        ("API Endpoint Slow", "Specific endpoint is responding slowly",
         "Review endpoint implementation and add caching where possible"),
    ],
    "errorRate": [
        ("Server Error Spike", "Increase in 5xx errors",
         "Check server logs for exceptions and fix underlying code issues"),
        ("Client Error Increase", "Increase in 4xx errors",
         "Review client requests and API documentation for proper usage"),
        ("Timeout Errors", "Requests are timing out",
         "Increase timeout thresholds or optimize response time"),
    ],
    "requestRate": [
        ("Traffic Spike", "Unusual spike in traffic detected",
         "Implement rate limiting or scale infrastructure to handle load"),
        ("DDoS Suspicion", "Unusual pattern in request distribution",
         "Implement DDoS protection or review security measures"),
        ("Low Traffic", "Traffic is lower than expected",
         "Check for API availability issues or client connectivity problems"),
    ],
    "activeEndpoints": [
        ("Endpoint Usage Change", "Change in active endpoint pattern",
         "Review API documentation and communicate changes to users"),
        ("Unused Endpoints", "Some endpoints are not being used",
         "Consider deprecating unused endpoints or improving documentation"),
        ("Endpoint Overload", "Few endpoints receiving most traffic",
         "Review load balancing strategy and optimize high-traffic endpoints"),
    ],
}

# synthetic generator profile: metric -> (low, high, base, variance, integral)
SYNTHETIC_PROFILES: Dict[str, Tuple[float, float, float, float, bool]] = {
    "responseTime": (120.0, 200.0, 150.0, 50.0, False),
    "errorRate": (0.0, 5.0, 2.5, 2.0, False),
    "requestRate": (50.0, 150.0, 100.0, 40.0, False),
    "activeEndpoints": (5.0, 15.0, 10.0, 5.0, True),
}


class Settings(BaseSettings):
    # cycle loop
    cycle_interval_seconds: float = 5.0
    source_timeout_seconds: float = 4.0
    history_length: int = 20
    history_interval_seconds: float = 5.0

    # seed for the stand-in random draws; None keeps them nondeterministic
    random_seed: Optional[int] = None

    classification_thresholds: Dict[str, Dict[str, Any]] = CLASSIFICATION_THRESHOLDS

    # issue diagnosis
    issue_confidence_min: float = 0.70
    issue_confidence_max: float = 0.95
    issue_counts: Dict[str, int] = {"warning": 1, "critical": 2}

    # anomaly detection: relative deviation |value - expected| / expected
    anomaly_deviation_thresholds: Dict[str, float] = {
        "responseTime": 0.15,
        "errorRate": 0.50,
        "requestRate": 0.25,
        "activeEndpoints": 0.30,
    }
    # (lower, upper) bounds splitting low / medium / high severity
    anomaly_severity_bounds: Dict[str, Tuple[float, float]] = {
        "responseTime": (0.25, 0.50),
        "errorRate": (0.75, 1.50),
        "requestRate": (0.40, 0.75),
        "activeEndpoints": (0.45, 0.80),
    }
    anomaly_confidence_min: float = 0.65
    anomaly_confidence_max: float = 0.95
    anomaly_lookback_seconds: float = 300.0
    anomaly_max_per_cycle: int = 3
    anomaly_min_samples: int = 5

    # baseline computation
    baseline_min_samples: int = 6

    # forecasting
    forecast_horizon_seconds: float = 300.0
    forecast_min_samples: int = 4
    forecast_default_steps: int = 5
    forecast_max_steps: int = 100
    forecast_confidence_floor: float = 0.5
    forecast_confidence_high: float = 0.85
    forecast_confidence_medium: float = 0.70

    # forced escalation of one metric to critical
    escalation_enabled: bool = True
    escalation_probability: float = 0.10

    alert_history_size: int = 50

    model_config = {
        "env_prefix": "APIPULSE_",
        "extra": "ignore",
    }


settings = Settings()
