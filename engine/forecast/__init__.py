"""
Forecasting logic for API metrics: linear trend projection to a fixed horizon with confidence scoring, plus the interpolated path between the current reading and the prediction.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""


from engine.forecast.trajectory import (
    ForecastPolicy,
    LinearForecastPolicy,
    confidence_level,
    forecast,
    interpolate,
    value_at,
)

__all__ = [
    "ForecastPolicy",
    "LinearForecastPolicy",
    "confidence_level",
    "forecast",
    "interpolate",
    "value_at",
]
