"""
Snapshot routes: the latest evaluation cycle output and an on-demand cycle trigger.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from fastapi import APIRouter

from api.responses import Snapshot
from api.routes import common
from api.routes.exception import handle_exceptions

router = APIRouter(tags=["Snapshot"])


@router.get("/snapshot", response_model=Snapshot, summary="Latest metric evaluation snapshot")
@handle_exceptions
async def get_snapshot() -> Snapshot:
    return common.current_snapshot(common.get_monitor())


@router.post("/cycle", response_model=Snapshot, summary="Run one evaluation cycle now")
@handle_exceptions
async def run_cycle() -> Snapshot:
    return await common.get_monitor().trigger()
