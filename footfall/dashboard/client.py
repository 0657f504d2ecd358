"""
Async HTTP client for the footfall read endpoints.
"""

from datetime import date
from typing import List, Optional

import httpx
from pydantic import TypeAdapter

from footfall.models.footfall import DashboardStats, HourlyData, WeeklyData

DEFAULT_TIMEOUT = 10.0

_hourly_adapter = TypeAdapter(List[HourlyData])
_weekly_adapter = TypeAdapter(List[WeeklyData])


class FootfallClient:
    """
    Thin wrapper over ``httpx.AsyncClient``. Non-2xx responses raise
    ``httpx.HTTPStatusError``; malformed payloads raise
    ``pydantic.ValidationError``. Nothing is retried.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._http = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def get_stats(self) -> DashboardStats:
        response = await self._http.get("/api/stats")
        response.raise_for_status()
        return DashboardStats.model_validate(response.json())

    async def get_hourly(self, day: date) -> List[HourlyData]:
        response = await self._http.get("/api/hourly", params={"date": day.isoformat()})
        response.raise_for_status()
        return _hourly_adapter.validate_python(response.json())

    async def get_weekly(self) -> List[WeeklyData]:
        response = await self._http.get("/api/weekly")
        response.raise_for_status()
        return _weekly_adapter.validate_python(response.json())

    async def aclose(self):
        await self._http.aclose()
