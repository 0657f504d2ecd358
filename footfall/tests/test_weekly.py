from datetime import date, datetime

from fastapi import status

from footfall.business_date import get_now
from footfall.config import STORE_TIMEZONE
from footfall.main import app
from footfall.tests.conftest import TODAY


def test_weekly_always_returns_seven_days(client):
    response = client.get("/api/weekly")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert len(data) == 7
    assert [d["date"] for d in data] == [
        "Mar 09", "Mar 10", "Mar 11", "Mar 12", "Mar 13", "Mar 14", "Mar 15",
    ]
    assert all(d["entries"] == 0 and d["exits"] == 0 for d in data)


def test_weekly_fills_days_without_summary(client, add_daily):
    add_daily(date(2024, 3, 9), 40, 38)
    add_daily(TODAY, 120, 95)

    data = client.get("/api/weekly").json()
    assert len(data) == 7
    assert data[0] == {"date": "Mar 09", "entries": 40, "exits": 38}
    assert data[6] == {"date": "Mar 15", "entries": 120, "exits": 95}
    assert all(d["entries"] == 0 for d in data[1:6])


def test_weekly_ignores_days_outside_window(client, add_daily):
    add_daily(date(2024, 3, 8), 999, 999)
    add_daily(date(2024, 3, 16), 999, 999)

    data = client.get("/api/weekly").json()
    assert len(data) == 7
    assert sum(d["entries"] for d in data) == 0


def test_weekly_window_follows_business_date(client, add_daily):
    add_daily(date(2024, 3, 14), 50, 45)
    app.dependency_overrides[get_now] = lambda: datetime(2024, 3, 15, 7, 0, tzinfo=STORE_TIMEZONE)

    data = client.get("/api/weekly").json()
    assert data[0]["date"] == "Mar 08"
    assert data[-1] == {"date": "Mar 14", "entries": 50, "exits": 45}


def test_weekly_store_failure(broken_client, broken_db):
    response = broken_client.get("/api/weekly")
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"detail": "Failed to fetch weekly data"}
    assert broken_db.closed
