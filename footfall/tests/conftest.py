import os

os.environ["TESTING"] = "True"

from datetime import date, datetime

import pytest
from _pytest.monkeypatch import MonkeyPatch
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from starlette.testclient import TestClient

from footfall.business_date import get_now
from footfall.config import STORE_TIMEZONE
from footfall.database import get_db
from footfall.main import app
from footfall.models.base import Base
from footfall.models.footfall import DailySummaryDB, HourlyStatsDB, TotalStatsDB

# Friday afternoon; business date 2024-03-15
FIXED_NOW = datetime(2024, 3, 15, 14, 30, tzinfo=STORE_TIMEZONE)
TODAY = date(2024, 3, 15)

# SQLite test database
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_footfall.db"
test_engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


class BrokenSession:
    """Session stand-in whose every query fails like a lost database connection."""

    def __init__(self):
        self.closed = False

    def query(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    def close(self):
        self.closed = True


@pytest.fixture(scope="session")
def session_monkeypatch(request):
    mpatch = MonkeyPatch()
    yield mpatch
    mpatch.undo()

# Points the application's engine at the test database for the whole session
@pytest.fixture(scope="session")
def override_app_db_connection(session_monkeypatch):
    session_monkeypatch.setattr("footfall.database.engine", test_engine)
    session_monkeypatch.setattr("footfall.database.SessionLocal", TestingSessionLocal)
    yield

# One transaction per test, rolled back at the end
@pytest.fixture(name="db_session", scope="function")
def override_get_db_fixture():
    Base.metadata.create_all(bind=test_engine)
    connection = test_engine.connect()
    transaction = connection.begin()
    db = TestingSessionLocal(bind=connection)

    try:
        yield db
    finally:
        db.close()
        transaction.rollback()
        connection.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(name="client", scope="function")
def test_client_fixture(override_app_db_connection, db_session):
    """
    FastAPI test client bound to the per-test session, with the clock frozen at FIXED_NOW.
    """
    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_now] = lambda: FIXED_NOW

    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(name="broken_db", scope="function")
def broken_db_fixture():
    return BrokenSession()


@pytest.fixture(name="broken_client", scope="function")
def broken_client_fixture(override_app_db_connection, broken_db):
    """
    Test client whose database session fails on every query.
    """
    def _override_get_db():
        try:
            yield broken_db
        finally:
            broken_db.close()

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_now] = lambda: FIXED_NOW

    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# --- Data helpers ---

@pytest.fixture(name="add_hourly", scope="function")
def add_hourly_fixture(db_session):
    def _add(day, hour, entries, exits):
        db_session.add(HourlyStatsDB(date=day, hour=hour, entries=entries, exits=exits))
        db_session.commit()
    return _add


@pytest.fixture(name="add_daily", scope="function")
def add_daily_fixture(db_session):
    def _add(day, entries, exits):
        db_session.add(DailySummaryDB(business_date=day, total_entries=entries, total_exits=exits))
        db_session.commit()
    return _add


@pytest.fixture(name="set_totals", scope="function")
def set_totals_fixture(db_session):
    def _set(total_entries, total_exits, current_inside):
        db_session.add(TotalStatsDB(
            id=1, total_entries=total_entries, total_exits=total_exits, current_inside=current_inside
        ))
        db_session.commit()
    return _set
