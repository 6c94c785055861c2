"""
Shared helper functions for HTTP-backed sample sources.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx
from pydantic import ValidationError

from api.responses import MetricReading
from datasources.exceptions import DataSourceUnavailable, InvalidPayload, QueryTimeout
from engine.enums import Metric

log = logging.getLogger(__name__)


async def fetch_json(
    url: str,
    params: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    timeout: float = 30,
    invalid_msg: str = "request failed",
    timeout_msg: str = "request timed out",
    unavailable_msg: str = "Cannot reach sample source at",
) -> Any:
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            resp = await client.get(url, params=params, headers=headers)
            resp.raise_for_status()
            return resp.json()
    except httpx.HTTPStatusError as e:
        raise InvalidPayload(f"{invalid_msg} [{e.response.status_code}]: {e.response.text}") from e
    except httpx.TimeoutException as e:
        raise QueryTimeout(timeout_msg) from e
    except httpx.RequestError as e:
        raise DataSourceUnavailable(f"{unavailable_msg} {url}") from e
    except ValueError as e:
        raise InvalidPayload(f"{invalid_msg}: response is not JSON") from e


def parse_readings(payload: Any) -> Dict[Metric, MetricReading]:
    if not isinstance(payload, Mapping):
        raise InvalidPayload(f"expected a JSON object, got {type(payload).__name__}")

    readings: Dict[Metric, MetricReading] = {}
    unknown: List[str] = []
    for key, raw in payload.items():
        try:
            metric = Metric(key)
        except ValueError:
            unknown.append(str(key))
            continue
        try:
            readings[metric] = MetricReading.model_validate(raw)
        except ValidationError as e:
            raise InvalidPayload(f"{key}: {e.errors()[0].get('msg', 'invalid reading')}") from e
    if unknown:
        log.debug("parse_readings: ignoring unknown metrics %s", unknown)
    return readings
