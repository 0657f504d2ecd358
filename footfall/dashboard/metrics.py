"""
Derived dashboard metrics.

Pure functions over the payloads returned by the read endpoints: net flow per
hour, per-day totals, capacity status, busiest/quietest hour and the
day-over-day comparison. Nothing here touches the network or the database.
"""

import math
from datetime import date, timedelta
from typing import List, Optional, Sequence, get_args

from footfall.config import MAX_CAPACITY
from footfall.models.dashboard import (
    CapacityStatus,
    DailyTotal,
    DayComparison,
    DerivedMetrics,
    HourExtreme,
    HourlyFlow,
    TimeRange,
)
from footfall.models.footfall import DashboardStats, HourlyData, WeeklyData

HIGH_CAPACITY_RATIO = 0.8
MEDIUM_CAPACITY_RATIO = 0.5
MIN_STAFF = 2
VISITORS_PER_STAFF = 10


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def hour_index(label: str) -> int:
    """``"14:00"`` -> 14."""
    return int(label.split(":", 1)[0])


def with_net_flow(hourly: Sequence[HourlyData]) -> List[HourlyFlow]:
    return [
        HourlyFlow(hour=h.hour, entries=h.entries, exits=h.exits, net=h.entries - h.exits)
        for h in hourly
    ]


def with_daily_totals(weekly: Sequence[WeeklyData]) -> List[DailyTotal]:
    return [
        DailyTotal(date=d.date, entries=d.entries, exits=d.exits, total=d.entries + d.exits)
        for d in weekly
    ]


def capacity_status(current_inside: int, max_capacity: int = MAX_CAPACITY) -> CapacityStatus:
    """
    Bands occupancy against the store's maximum: above 80% is high, above
    50% up to 80% is medium, anything else normal.
    """
    ratio = current_inside / max_capacity if max_capacity > 0 else 0.0

    is_high = ratio > HIGH_CAPACITY_RATIO
    is_medium = not is_high and ratio > MEDIUM_CAPACITY_RATIO
    if is_high:
        tier = "high"
    elif is_medium:
        tier = "medium"
    else:
        tier = "normal"

    return CapacityStatus(
        percentage=round_half_up(ratio * 100),
        tier=tier,
        is_high=is_high,
        is_medium=is_medium,
        recommended_staff=max(MIN_STAFF, math.ceil(current_inside / VISITORS_PER_STAFF)),
    )


def busiest_hour(hourly: Sequence[HourlyData]) -> HourExtreme:
    """Hour with the most entries; the earliest one wins a tie."""
    best: Optional[HourlyData] = None
    for h in hourly:
        if best is None or h.entries > best.entries:
            best = h
    if best is None:
        return HourExtreme(hour=0, entries=0)
    return HourExtreme(hour=hour_index(best.hour), entries=best.entries)


def quietest_hour(hourly: Sequence[HourlyData]) -> HourExtreme:
    """Hour with the fewest entries among hours that had any; hour 0 when none did."""
    best: Optional[HourlyData] = None
    for h in hourly:
        if h.entries <= 0:
            continue
        if best is None or h.entries < best.entries:
            best = h
    if best is None:
        return HourExtreme(hour=0, entries=0)
    return HourExtreme(hour=hour_index(best.hour), entries=best.entries)


def day_over_day(today_entries: int, yesterday_entries: Optional[int]) -> DayComparison:
    """
    Percentage change of today's entries against yesterday's.

    Without a baseline (no row, or zero entries yesterday) any traffic today
    counts as a 100% increase and an empty day as no change; both are
    reported as positive.
    """
    if not yesterday_entries:
        return DayComparison(change_percent=100.0 if today_entries > 0 else 0.0, is_positive=True)

    change = (today_entries - yesterday_entries) / yesterday_entries * 100
    return DayComparison(
        change_percent=round(change, 1),
        is_positive=today_entries >= yesterday_entries,
    )


def trend_label(comparison: DayComparison) -> str:
    if comparison.is_positive:
        return f"+{comparison.change_percent:.1f}%"
    return f"{comparison.change_percent:.1f}%"


def derive_metrics(
    stats: DashboardStats,
    hourly: Sequence[HourlyData],
    max_capacity: int = MAX_CAPACITY,
) -> DerivedMetrics:
    return DerivedMetrics(
        capacity=capacity_status(stats.current_inside, max_capacity),
        busiest_hour=busiest_hour(hourly),
        quietest_hour=quietest_hour(hourly),
        comparison=day_over_day(stats.today_entries, stats.yesterday_entries),
    )


TIME_RANGES = get_args(TimeRange)


def resolve_time_range(time_range: str, today: date) -> date:
    """
    Date fed to the hourly reader for a quick-range button. Weeks start on
    Sunday. ``custom`` keeps ``today``; the caller supplies its own date.
    Raises ``ValueError`` for a range name outside ``TimeRange``.
    """
    if time_range not in TIME_RANGES:
        raise ValueError(f"Unknown time range: {time_range}")
    if time_range == "week":
        return today - timedelta(days=(today.weekday() + 1) % 7)
    if time_range == "month":
        return today.replace(day=1)
    if time_range == "last7days":
        return today - timedelta(days=7)
    return today


def clamp_to_today(selected: date, today: date) -> date:
    return min(selected, today)
