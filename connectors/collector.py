# connectors/collector.py

from typing import Dict, Optional

from api.responses import MetricReading
from datasources.base import SampleSource
from datasources.exceptions import DataSourceUnavailable, QueryTimeout
from datasources.helpers import fetch_json, parse_readings
from datasources.retry import retry
from engine.enums import Metric


class CollectorConnector(SampleSource):
    """Pulls the current reading and recent history for every metric from a collector over HTTP.

    Expected payload::

        {"responseTime": {"current": 151.2,
                          "history": [{"timestamp": 1760000000.0, "value": 149.8}, ...]},
         ...}
    """

    name = "collector"

    def __init__(
        self,
        base_url: str,
        timeout: float = 3,
        path: str = "/samples",
        headers: Optional[Dict[str, str]] = None,
        attempts: int = 2,
        delay: float = 0.2,
    ):
        self.base_url = str(base_url).rstrip("/")
        self.timeout = timeout
        self.path = path
        self.headers = headers or {}
        self._fetch = retry(
            attempts=attempts,
            delay=delay,
            backoff=2.0,
            exceptions=(DataSourceUnavailable, QueryTimeout),
        )(self._fetch_once)

    @property
    def url(self) -> str:
        return f"{self.base_url}{self.path}"

    async def _fetch_once(self) -> Dict[Metric, MetricReading]:
        payload = await fetch_json(
            self.url,
            headers=self.headers,
            timeout=self.timeout,
            invalid_msg="Collector request failed",
            timeout_msg="Collector request timed out",
            unavailable_msg="Cannot reach collector at",
        )
        return parse_readings(payload)

    async def fetch_samples(self) -> Dict[Metric, MetricReading]:
        return await self._fetch()
