from datetime import date, datetime
from typing import List, Literal, Optional
from pydantic import Field

from .footfall import CamelModel, DashboardStats

CapacityTier = Literal["normal", "medium", "high"]
TimeRange = Literal["today", "week", "month", "last7days", "custom"]
DashboardStatus = Literal["loading", "ready", "refreshing"]

class HourlyFlow(CamelModel):
    hour: str
    entries: int
    exits: int
    net: int

class DailyTotal(CamelModel):
    date: str
    entries: int
    exits: int
    total: int

class CapacityStatus(CamelModel):
    percentage: int
    tier: CapacityTier
    is_high: bool
    is_medium: bool
    recommended_staff: int

class HourExtreme(CamelModel):
    hour: int
    entries: int

class DayComparison(CamelModel):
    change_percent: float
    is_positive: bool

class DerivedMetrics(CamelModel):
    capacity: CapacityStatus
    busiest_hour: HourExtreme
    quietest_hour: HourExtreme
    comparison: DayComparison

class DashboardState(CamelModel):
    status: DashboardStatus = "loading"
    selected_date: date
    time_range: TimeRange = "today"
    auto_refresh: bool = True
    show_alerts: bool = True
    stats: Optional[DashboardStats] = None
    hourly: List[HourlyFlow] = Field(default_factory=list)
    daily: List[DailyTotal] = Field(default_factory=list)
    metrics: Optional[DerivedMetrics] = None
    last_update: Optional[datetime] = None
