"""
Read-only queries over the pre-aggregated footfall tables.

Every reader receives the session it works with; none of them commits,
retries or holds on to the session after returning. Missing rows are not
errors: they come back as zero-valued records.
"""

from datetime import date, datetime, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from footfall.business_date import business_date, last_days
from footfall.models.footfall import (
    DailySummaryDB,
    DashboardStats,
    HourlyData,
    HourlyStatsDB,
    TotalStatsDB,
    WeeklyData,
)

TOTAL_STATS_ROW_ID = 1
DEFAULT_PEAK_HOUR = 12


def hour_label(hour: int) -> str:
    return f"{hour}:00"


def day_label(day: date) -> str:
    return day.strftime("%b %d")


def read_hourly(db: Session, day: date) -> List[HourlyData]:
    """24 hourly buckets for ``day`` ordered 0..23, gaps filled with zeros."""
    rows = (
        db.query(HourlyStatsDB.hour, HourlyStatsDB.entries, HourlyStatsDB.exits)
        .filter(HourlyStatsDB.date == day)
        .order_by(HourlyStatsDB.hour.asc())
        .all()
    )
    by_hour = {int(hour): (entries or 0, exits or 0) for hour, entries, exits in rows}

    return [
        HourlyData(
            hour=hour_label(h),
            entries=by_hour.get(h, (0, 0))[0],
            exits=by_hour.get(h, (0, 0))[1],
        )
        for h in range(24)
    ]


def read_stats(db: Session, now: Optional[datetime] = None) -> DashboardStats:
    """
    Today's totals, lifetime totals, occupancy and the peak hour of the
    current business date.

    The reads are independent of each other and are not wrapped in a
    transaction; small skew between them is acceptable for a dashboard.
    """
    today = business_date(now)
    yesterday = today - timedelta(days=1)

    today_row = db.query(DailySummaryDB).filter(DailySummaryDB.business_date == today).first()
    yesterday_row = db.query(DailySummaryDB).filter(DailySummaryDB.business_date == yesterday).first()
    totals_row = db.query(TotalStatsDB).filter(TotalStatsDB.id == TOTAL_STATS_ROW_ID).first()

    # Highest entries + exits wins; equal totals go to the earliest hour
    total = (HourlyStatsDB.entries + HourlyStatsDB.exits).label("total")
    peak_row = (
        db.query(HourlyStatsDB.hour, total)
        .filter(HourlyStatsDB.date == today)
        .order_by(total.desc(), HourlyStatsDB.hour.asc())
        .first()
    )

    return DashboardStats(
        today_entries=today_row.total_entries if today_row else 0,
        today_exits=today_row.total_exits if today_row else 0,
        current_inside=totals_row.current_inside if totals_row else 0,
        total_lifetime=totals_row.total_entries if totals_row else 0,
        peak_hour=int(peak_row.hour) if peak_row else DEFAULT_PEAK_HOUR,
        peak_hour_count=int(peak_row.total or 0) if peak_row else 0,
        yesterday_entries=yesterday_row.total_entries if yesterday_row else None,
        yesterday_exits=yesterday_row.total_exits if yesterday_row else None,
    )


def read_weekly(db: Session, now: Optional[datetime] = None) -> List[WeeklyData]:
    """Exactly seven days, six days ago through today, zero-filled and ascending."""
    days = last_days(business_date(now), 7)

    rows = (
        db.query(DailySummaryDB)
        .filter(DailySummaryDB.business_date.in_(days))
        .order_by(DailySummaryDB.business_date.asc())
        .all()
    )
    by_day = {row.business_date.isoformat(): row for row in rows}

    weekly = []
    for day in days:
        row = by_day.get(day.isoformat())
        weekly.append(WeeklyData(
            date=day_label(day),
            entries=row.total_entries if row else 0,
            exits=row.total_exits if row else 0,
        ))
    return weekly
