from typing import List

from fastapi import APIRouter

from api.responses import Alert
from api.routes import common
from api.routes.exception import handle_exceptions

router = APIRouter(tags=["Alerts"])


@router.get("/alerts", response_model=List[Alert], summary="Recent escalation alerts, newest first")
@handle_exceptions
async def list_alerts() -> List[Alert]:
    return common.get_monitor().alerts.recent()
