from typing import List, Optional

from fastapi import APIRouter, Query

from api.requests import AnomalyFilter
from api.responses import Anomaly
from api.routes import common
from api.routes.exception import handle_exceptions
from engine.enums import Metric, Severity

router = APIRouter(tags=["Anomalies"])


@router.get("/anomalies", response_model=List[Anomaly], summary="Anomalies from the latest cycle")
@handle_exceptions
async def list_anomalies(
    severity: Optional[Severity] = Query(default=None),
    metric: Optional[Metric] = Query(default=None),
) -> List[Anomaly]:
    snapshot = common.current_snapshot(common.get_monitor())
    return AnomalyFilter(severity=severity, metric=metric).apply(snapshot.anomalies)
