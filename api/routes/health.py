"""
Health check route reporting the cycle loop state and the last cycle failure.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from typing import Any, Dict

from fastapi import APIRouter

from api.routes import common
from api.routes.exception import handle_exceptions

router = APIRouter(tags=["Health"])


@router.get("/health")
@handle_exceptions
async def health() -> Dict[str, Any]:
    monitor = common.get_monitor()
    last_error = monitor.last_error
    return {
        "status": "ok",
        "state": monitor.orchestrator.state.value,
        "running": monitor.running,
        "has_snapshot": monitor.snapshot is not None,
        "last_error": last_error.model_dump(by_alias=True) if last_error else None,
    }
