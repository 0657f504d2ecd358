"""
Dashboard refresh controller.

Owns the dashboard state and keeps it fresh: every cycle fetches stats,
hourly and weekly data concurrently and merges them into the state only when
all three reads succeeded. A failed cycle is logged and leaves the previous
data in place. While auto-refresh is on, a single background task repeats the
cycle every ``interval`` seconds; changing the selected date or the
auto-refresh flag cancels that task and starts a new one.
"""

import asyncio
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Callable, Optional

import httpx

from footfall.business_date import business_date, get_now
from footfall.config import MAX_CAPACITY, REFRESH_INTERVAL_SECONDS
from footfall.dashboard.client import FootfallClient
from footfall.dashboard.export import export_filename, hourly_report_csv
from footfall.dashboard.metrics import (
    TIME_RANGES,
    clamp_to_today,
    derive_metrics,
    resolve_time_range,
    with_daily_totals,
    with_net_flow,
)
from footfall.models.dashboard import DashboardState

logger = logging.getLogger(__name__)

# pydantic.ValidationError and JSON decode errors are both ValueErrors
FETCH_ERRORS = (httpx.HTTPError, ValueError)
READ_NAMES = ("stats", "hourly", "weekly")


class DashboardController:
    def __init__(
        self,
        client: FootfallClient,
        selected_date: Optional[date] = None,
        auto_refresh: bool = True,
        show_alerts: bool = True,
        interval: float = REFRESH_INTERVAL_SECONDS,
        max_capacity: int = MAX_CAPACITY,
        clock: Callable[[], datetime] = get_now,
    ):
        self.client = client
        self.interval = interval
        self.max_capacity = max_capacity
        self._clock = clock
        self._task: Optional[asyncio.Task] = None

        today = self.today()
        self.state = DashboardState(
            selected_date=clamp_to_today(selected_date or today, today),
            auto_refresh=auto_refresh,
            show_alerts=show_alerts,
        )

    def today(self) -> date:
        return business_date(self._clock())

    @property
    def timer_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def alert_visible(self) -> bool:
        metrics = self.state.metrics
        return self.state.show_alerts and metrics is not None and metrics.capacity.is_high

    async def start(self):
        await self.refresh()
        self._start_timer()

    async def refresh(self) -> bool:
        """Runs one fetch cycle. Returns True when the state was updated."""
        if self.state.status == "ready":
            self.state = self.state.model_copy(update={"status": "refreshing"})

        try:
            selected = self.state.selected_date
            results = await asyncio.gather(
                self.client.get_stats(),
                self.client.get_hourly(selected),
                self.client.get_weekly(),
                return_exceptions=True,
            )

            failed = []
            for name, result in zip(READ_NAMES, results):
                if isinstance(result, FETCH_ERRORS):
                    logger.error("Error fetching %s data: %s", name, result)
                    failed.append(name)
                elif isinstance(result, BaseException):
                    raise result

            if failed:
                return False

            stats, hourly, weekly = results
            self.state = self.state.model_copy(update={
                "status": "ready",
                "stats": stats,
                "hourly": with_net_flow(hourly),
                "daily": with_daily_totals(weekly),
                "metrics": derive_metrics(stats, hourly, self.max_capacity),
                "last_update": self._clock(),
            })
            return True
        finally:
            # also reached when the poll task is cancelled mid-cycle
            if self.state.status != "ready":
                self.state = self.state.model_copy(update={"status": "ready"})

    async def set_selected_date(self, selected: date, time_range: str = "custom"):
        if time_range not in TIME_RANGES:
            raise ValueError(f"Unknown time range: {time_range}")
        today = self.today()
        self.state = self.state.model_copy(update={
            "selected_date": clamp_to_today(selected, today),
            "time_range": time_range,
        })
        await self._reload()

    async def select_time_range(self, time_range: str):
        await self.set_selected_date(resolve_time_range(time_range, self.today()), time_range)

    async def set_auto_refresh(self, enabled: bool):
        self.state = self.state.model_copy(update={"auto_refresh": enabled})
        await self._reload()

    def toggle_alerts(self) -> bool:
        self.state = self.state.model_copy(update={"show_alerts": not self.state.show_alerts})
        return self.state.show_alerts

    def export_csv(self) -> str:
        return hourly_report_csv(
            self.state.selected_date,
            self.state.hourly,
            stats=self.state.stats,
            generated_at=self._clock(),
        )

    def save_csv(self, directory: Path) -> Path:
        path = Path(directory) / export_filename(self.state.selected_date)
        path.write_text(self.export_csv(), encoding="utf-8")
        logger.info("Exported hourly footfall to %s", path)
        return path

    async def stop(self):
        """Cancels the refresh timer and waits for it to finish."""
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

    async def aclose(self):
        await self.stop()
        await self.client.aclose()

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    async def _reload(self):
        await self.stop()
        await self.refresh()
        self._start_timer()

    def _start_timer(self):
        if self.state.auto_refresh and not self.timer_running:
            self._task = asyncio.create_task(self._poll())

    async def _poll(self):
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self.refresh()
            except Exception:  # pylint: disable=broad-except
                logger.exception("Unexpected error during dashboard refresh")
