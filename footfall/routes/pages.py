"""
HTML Page Endpoints
===================
Server-rendered live dashboard. Controls are plain links and a GET form, so
the page works without any client-side script; auto-refresh uses a meta
refresh tag.
"""

import html
import logging
from datetime import date, datetime
from typing import List, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from footfall.business_date import business_date, get_now, last_days
from footfall.config import MAX_CAPACITY, REFRESH_INTERVAL_SECONDS, STORE_NAME
from footfall.database import get_db
from footfall.dashboard.metrics import (
    clamp_to_today,
    derive_metrics,
    resolve_time_range,
    trend_label,
    with_daily_totals,
    with_net_flow,
)
from footfall.models.dashboard import DailyTotal, DerivedMetrics, HourlyFlow, TimeRange
from footfall.models.footfall import DashboardStats, HourlyData, WeeklyData
from footfall.readers import DEFAULT_PEAK_HOUR, day_label, hour_label, read_hourly, read_stats, read_weekly

router = APIRouter()

logger = logging.getLogger(__name__)

QUICK_RANGES = [
    ("today", "Today"),
    ("last7days", "Last 7 Days"),
    ("week", "This Week"),
    ("month", "This Month"),
]

TIER_LABELS = {"high": "High", "medium": "Medium", "normal": "Normal"}

STYLE = """
    * { box-sizing: border-box; margin: 0; padding: 0; }
    body {
        font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
        background: #0a0a0a;
        color: #e0e0e0;
    }
    .container { max-width: 1200px; margin: 0 auto; padding: 20px; }
    header { display: flex; justify-content: space-between; align-items: center; margin-bottom: 20px; }
    header h1 { color: #f59e0b; font-size: 28px; }
    header .meta { color: #888; font-size: 13px; }
    .controls a, .controls button {
        color: #ccc; background: #1a1a1a; border: 1px solid #333; border-radius: 8px;
        padding: 8px 14px; margin-right: 6px; text-decoration: none; font-size: 14px;
    }
    .controls a.active { background: #f59e0b; color: #fff; border-color: #f59e0b; }
    .controls { margin-bottom: 20px; }
    .alert { background: rgba(239, 68, 68, 0.2); border: 2px solid #ef4444; border-radius: 16px; padding: 20px; margin-bottom: 20px; }
    .alert h3 { color: #f87171; margin-bottom: 8px; }
    .grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(200px, 1fr)); gap: 16px; margin-bottom: 20px; }
    .card { background: #1a1a1a; border: 1px solid #333; border-radius: 16px; padding: 20px; }
    .card .label { color: #888; font-size: 13px; }
    .card .value { color: #fff; font-size: 32px; font-weight: bold; margin: 6px 0; }
    .card .sub { font-size: 12px; color: #888; }
    .up { color: #34d399; }
    .down { color: #f87171; }
    .bar { height: 14px; background: #222; border-radius: 7px; overflow: hidden; margin-top: 10px; }
    .bar div { height: 100%; }
    .tier-normal { background: #22c55e; }
    .tier-medium { background: #f59e0b; }
    .tier-high { background: #ef4444; }
    table { width: 100%; border-collapse: collapse; font-size: 14px; }
    th, td { padding: 6px 10px; border-bottom: 1px solid #222; text-align: right; }
    th:first-child, td:first-child { text-align: left; }
    h2 { color: #fff; font-size: 18px; margin-bottom: 12px; }
"""


def _link(params: dict) -> str:
    return "/?" + urlencode({k: v for k, v in params.items() if v is not None})


def _render_controls(selected: date, today: date, time_range: str, refresh: bool, alerts: bool) -> str:
    base = {"refresh": str(refresh).lower(), "alerts": str(alerts).lower()}

    ranges = "".join(
        f'<a class="{"active" if key == time_range else ""}" '
        f'href="{html.escape(_link({**base, "range": key}))}">{label}</a>'
        for key, label in QUICK_RANGES
    )
    current = {**base, "date": selected.isoformat()}
    toggles = (
        f'<a href="{html.escape(_link({**current, "refresh": str(not refresh).lower()}))}">'
        f'Auto refresh: {"on" if refresh else "off"}</a>'
        f'<a href="{html.escape(_link({**current, "alerts": str(not alerts).lower()}))}">'
        f'Alerts: {"on" if alerts else "off"}</a>'
        f'<a href="/api/export?date={selected.isoformat()}">Export CSV</a>'
    )
    picker = f"""
        <form method="get" action="/" style="display:inline">
            <input type="hidden" name="refresh" value="{str(refresh).lower()}">
            <input type="hidden" name="alerts" value="{str(alerts).lower()}">
            <input type="date" name="date" value="{selected.isoformat()}" max="{today.isoformat()}">
            <button type="submit">Go</button>
        </form>
    """
    return f'<div class="controls">{ranges}</div><div class="controls">{toggles}{picker}</div>'


def _render_alert(stats: DashboardStats, metrics: DerivedMetrics, max_capacity: int) -> str:
    capacity = metrics.capacity
    return f"""
        <div class="alert">
            <h3>High Capacity Alert!</h3>
            <p>Store is at <strong>{capacity.percentage}%</strong> capacity
               ({stats.current_inside} / {max_capacity} people).
               Recommended staff: <strong>{capacity.recommended_staff}</strong> persons. Add more staff!</p>
        </div>
    """


def _render_cards(stats: DashboardStats, metrics: DerivedMetrics) -> str:
    comparison = metrics.comparison
    trend_class = "up" if comparison.is_positive else "down"
    cards = [
        ("Today's Entries", stats.today_entries,
         f'<span class="{trend_class}">{trend_label(comparison)}</span> vs yesterday'),
        ("Today's Exits", stats.today_exits, "customers left"),
        ("Inside Now", stats.current_inside, "browsing"),
        ("Lifetime Total", stats.total_lifetime, "visitors"),
        ("Peak Hour", f"{stats.peak_hour}:00", f"{stats.peak_hour_count} visitors"),
        ("Busiest Hour", f"{metrics.busiest_hour.hour}:00", f"{metrics.busiest_hour.entries} customers"),
        ("Quietest Hour", f"{metrics.quietest_hour.hour}:00", f"{metrics.quietest_hour.entries} customers"),
    ]
    return '<div class="grid">' + "".join(
        f'<div class="card"><div class="label">{title}</div>'
        f'<div class="value">{value}</div><div class="sub">{sub}</div></div>'
        for title, value, sub in cards
    ) + "</div>"


def _render_capacity(stats: DashboardStats, metrics: DerivedMetrics, max_capacity: int) -> str:
    capacity = metrics.capacity
    width = min(capacity.percentage, 100)
    return f"""
        <div class="card" style="margin-bottom:20px">
            <h2>Store Capacity Monitor</h2>
            <div class="label">{stats.current_inside} / {max_capacity} people</div>
            <div class="value">{capacity.percentage}% <span class="sub">{TIER_LABELS[capacity.tier]}</span></div>
            <div class="bar"><div class="tier-{capacity.tier}" style="width:{width}%"></div></div>
            <div class="sub">0-50% Normal &middot; 51-80% Busy &middot; 81-100% Critical</div>
        </div>
    """


def _render_hourly(hourly: List[HourlyFlow]) -> str:
    rows = "".join(
        f"<tr><td>{h.hour}</td><td>{h.entries}</td><td>{h.exits}</td><td>{h.net}</td></tr>"
        for h in hourly
    )
    return f"""
        <div class="card"><h2>Hourly Traffic</h2>
        <table><tr><th>Hour</th><th>Entries</th><th>Exits</th><th>Net</th></tr>{rows}</table></div>
    """


def _render_daily(daily: List[DailyTotal]) -> str:
    rows = "".join(
        f"<tr><td>{html.escape(d.date)}</td><td>{d.entries}</td><td>{d.exits}</td><td>{d.total}</td></tr>"
        for d in daily
    )
    return f"""
        <div class="card"><h2>7-Day Trend</h2>
        <table><tr><th>Day</th><th>Entries</th><th>Exits</th><th>Total</th></tr>{rows}</table></div>
    """


def _zero_state(today: date):
    stats = DashboardStats(
        today_entries=0, today_exits=0, current_inside=0, total_lifetime=0,
        peak_hour=DEFAULT_PEAK_HOUR, peak_hour_count=0,
    )
    hourly = [HourlyData(hour=hour_label(h), entries=0, exits=0) for h in range(24)]
    weekly = [WeeklyData(date=day_label(d), entries=0, exits=0) for d in last_days(today, 7)]
    return stats, hourly, weekly


@router.get("/", response_class=HTMLResponse)
def dashboard_page(
    selected: Optional[date] = Query(None, alias="date"),
    time_range: Optional[TimeRange] = Query(None, alias="range"),
    refresh: bool = True,
    alerts: bool = True,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now)
):
    """Live footfall dashboard."""
    today = business_date(now)
    if time_range is not None and selected is None:
        selected = resolve_time_range(time_range, today)
    elif selected is not None:
        time_range = "custom"
    else:
        time_range = "today"
        selected = today
    selected = clamp_to_today(selected, today)

    try:
        stats = read_stats(db, now)
        hourly = read_hourly(db, selected)
        weekly = read_weekly(db, now)
        degraded = False
    except SQLAlchemyError as e:
        logger.error(f"Database error while rendering dashboard: {e}", exc_info=True)
        stats, hourly, weekly = _zero_state(today)
        degraded = True

    metrics = derive_metrics(stats, hourly, MAX_CAPACITY)
    refresh_tag = (
        f'<meta http-equiv="refresh" content="{int(REFRESH_INTERVAL_SECONDS)}">' if refresh else ""
    )
    alert_html = _render_alert(stats, metrics, MAX_CAPACITY) if alerts and metrics.capacity.is_high else ""
    status_html = (
        '<span class="down">Data unavailable, showing empty view</span>' if degraded
        else '<span class="up">LIVE</span>'
    )

    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <title>{html.escape(STORE_NAME)} - Live Footfall</title>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
        {refresh_tag}
        <style>{STYLE}</style>
    </head>
    <body>
        <div class="container">
            <header>
                <div>
                    <h1>{html.escape(STORE_NAME)}</h1>
                    <div class="meta">Live Footfall Analytics</div>
                </div>
                <div class="meta">{status_html} &middot; Updated {now.strftime('%H:%M:%S')}</div>
            </header>
            {alert_html}
            {_render_controls(selected, today, time_range, refresh, alerts)}
            {_render_cards(stats, metrics)}
            {_render_capacity(stats, metrics, MAX_CAPACITY)}
            <div class="grid">
                {_render_hourly(with_net_flow(hourly))}
                {_render_daily(with_daily_totals(weekly))}
            </div>
        </div>
    </body>
    </html>
    """
