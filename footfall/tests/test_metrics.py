from datetime import date

import pytest

from footfall.dashboard.metrics import (
    busiest_hour,
    capacity_status,
    clamp_to_today,
    day_over_day,
    derive_metrics,
    quietest_hour,
    resolve_time_range,
    trend_label,
    with_daily_totals,
    with_net_flow,
)
from footfall.models.footfall import DashboardStats, HourlyData, WeeklyData


def make_hourly(entries_by_hour, exits_by_hour=None):
    exits_by_hour = exits_by_hour or {}
    return [
        HourlyData(hour=f"{h}:00", entries=entries_by_hour.get(h, 0), exits=exits_by_hour.get(h, 0))
        for h in range(24)
    ]


@pytest.mark.parametrize("inside, tier", [
    (50, "normal"),
    (51, "medium"),
    (80, "medium"),
    (81, "high"),
])
def test_capacity_tier_boundaries(inside, tier):
    status = capacity_status(inside, max_capacity=100)
    assert status.percentage == inside
    assert status.tier == tier
    assert status.is_high == (tier == "high")
    assert status.is_medium == (tier == "medium")


def test_capacity_half_of_store_is_normal():
    status = capacity_status(25, max_capacity=50)
    assert status.percentage == 50
    assert status.tier == "normal"


def test_capacity_percentage_rounds_half_up():
    assert capacity_status(1, max_capacity=8).percentage == 13


def test_capacity_over_maximum_is_high():
    status = capacity_status(60, max_capacity=50)
    assert status.percentage == 120
    assert status.is_high


@pytest.mark.parametrize("inside, staff", [(0, 2), (15, 2), (20, 2), (21, 3), (45, 5)])
def test_recommended_staff(inside, staff):
    assert capacity_status(inside, max_capacity=50).recommended_staff == staff


def test_busiest_hour_picks_most_entries():
    result = busiest_hour(make_hourly({10: 4, 14: 12, 18: 9}))
    assert (result.hour, result.entries) == (14, 12)


def test_busiest_hour_tie_goes_to_earliest():
    result = busiest_hour(make_hourly({11: 7, 16: 7}))
    assert result.hour == 11


def test_quietest_hour_skips_empty_hours():
    result = quietest_hour(make_hourly({10: 4, 14: 12, 18: 2}))
    assert (result.hour, result.entries) == (18, 2)


def test_extremes_fall_back_to_hour_zero_without_traffic():
    hourly = make_hourly({})
    assert busiest_hour(hourly).hour == 0
    assert quietest_hour(hourly).hour == 0
    assert quietest_hour(hourly).entries == 0
    assert busiest_hour([]).hour == 0


def test_day_over_day_change():
    comparison = day_over_day(120, 100)
    assert comparison.change_percent == 20.0
    assert comparison.is_positive
    assert trend_label(comparison) == "+20.0%"


def test_day_over_day_decline():
    comparison = day_over_day(75, 100)
    assert comparison.change_percent == -25.0
    assert not comparison.is_positive
    assert trend_label(comparison) == "-25.0%"


@pytest.mark.parametrize("yesterday", [None, 0])
def test_day_over_day_without_baseline(yesterday):
    comparison = day_over_day(42, yesterday)
    assert comparison.change_percent == 100.0
    assert comparison.is_positive


def test_day_over_day_without_baseline_or_traffic():
    comparison = day_over_day(0, None)
    assert comparison.change_percent == 0.0
    assert comparison.is_positive


def test_net_flow_and_daily_totals():
    flows = with_net_flow([HourlyData(hour="9:00", entries=5, exits=8)])
    assert flows[0].net == -3

    totals = with_daily_totals([WeeklyData(date="Mar 15", entries=40, exits=35)])
    assert totals[0].total == 75


def test_derive_metrics_combines_everything():
    stats = DashboardStats(
        today_entries=90, today_exits=60, current_inside=45, total_lifetime=900,
        peak_hour=13, peak_hour_count=30, yesterday_entries=60,
    )
    metrics = derive_metrics(stats, make_hourly({12: 10, 13: 20}), max_capacity=50)
    assert metrics.capacity.tier == "high"
    assert metrics.capacity.recommended_staff == 5
    assert metrics.busiest_hour.hour == 13
    assert metrics.quietest_hour.hour == 12
    assert metrics.comparison.change_percent == 50.0


@pytest.mark.parametrize("time_range, expected", [
    ("today", date(2024, 3, 15)),
    ("week", date(2024, 3, 10)),
    ("month", date(2024, 3, 1)),
    ("last7days", date(2024, 3, 8)),
    ("custom", date(2024, 3, 15)),
])
def test_resolve_time_range(time_range, expected):
    # 2024-03-15 is a Friday; weeks start on Sunday
    assert resolve_time_range(time_range, date(2024, 3, 15)) == expected


def test_week_range_on_sunday_is_same_day():
    assert resolve_time_range("week", date(2024, 3, 10)) == date(2024, 3, 10)


def test_resolve_time_range_rejects_unknown_name():
    with pytest.raises(ValueError, match="yesterday"):
        resolve_time_range("yesterday", date(2024, 3, 15))


def test_selected_date_never_exceeds_today():
    today = date(2024, 3, 15)
    assert clamp_to_today(date(2024, 3, 20), today) == today
    assert clamp_to_today(date(2024, 3, 1), today) == date(2024, 3, 1)
