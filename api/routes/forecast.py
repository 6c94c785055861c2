"""
Forecast routes exposing per-metric predictions and the interpolated display path.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import ValidationError

from api.requests import ForecastPathRequest
from api.responses import ForecastPath, Prediction
from api.routes import common
from api.routes.exception import handle_exceptions
from engine.enums import Metric
from engine.forecast import confidence_level, interpolate

router = APIRouter(tags=["Forecast"])


@router.get("/predictions", response_model=List[Prediction], summary="Predictions from the latest cycle")
@handle_exceptions
async def list_predictions() -> List[Prediction]:
    return common.current_snapshot(common.get_monitor()).predictions


@router.get(
    "/predictions/{metric}/path",
    response_model=ForecastPath,
    summary="Interpolated path from the current value to the prediction",
)
@handle_exceptions
async def prediction_path(
    metric: Metric,
    steps: Optional[int] = Query(default=None, ge=1),
) -> ForecastPath:
    try:
        req = ForecastPathRequest(metric=metric, steps=steps)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors()[0].get("msg", "invalid steps")) from exc
    snapshot = common.current_snapshot(common.get_monitor())

    prediction = next((p for p in snapshot.predictions if p.metric == req.metric), None)
    state = snapshot.metrics.get(req.metric)
    if prediction is None or state is None:
        raise HTTPException(status_code=404, detail=f"no prediction for {req.metric.value}")

    return ForecastPath(
        metric=req.metric,
        unit=req.metric.unit,
        confidence=prediction.confidence,
        confidence_level=confidence_level(prediction.confidence),
        points=interpolate(state.current, prediction, snapshot.generated_at, req.steps),
    )
