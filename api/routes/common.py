"""
Shared helpers for API route modules.

Routes never hold pipeline state themselves; they read the snapshot owned by
the monitor service.  Route modules import :func:`get_monitor` from here so
tests can swap the service with ``monkeypatch``.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from fastapi import HTTPException

from api.responses import Snapshot
from services.monitor_service import MonitorService, get_monitor

__all__ = ["current_snapshot", "get_monitor"]


def current_snapshot(monitor: MonitorService) -> Snapshot:
    snapshot = monitor.snapshot
    if snapshot is None:
        detail = "no snapshot available yet"
        if monitor.last_error is not None:
            detail = f"{detail}: {monitor.last_error.message}"
        raise HTTPException(status_code=503, detail=detail)
    return snapshot
