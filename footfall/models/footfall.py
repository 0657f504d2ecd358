from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy import Column, Integer, Date
from .base import Base

# Tables are populated by the vision ingestion pipeline; this service only reads them.

class HourlyStatsDB(Base):
    __tablename__ = "hourly_stats"

    date = Column(Date, primary_key=True)
    hour = Column(Integer, primary_key=True)
    entries = Column(Integer, nullable=False, default=0)
    exits = Column(Integer, nullable=False, default=0)


class DailySummaryDB(Base):
    __tablename__ = "daily_summary"

    business_date = Column(Date, primary_key=True)
    total_entries = Column(Integer, nullable=False, default=0)
    total_exits = Column(Integer, nullable=False, default=0)


class TotalStatsDB(Base):
    __tablename__ = "total_stats"

    id = Column(Integer, primary_key=True)
    total_entries = Column(Integer, nullable=False, default=0)
    total_exits = Column(Integer, nullable=False, default=0)
    current_inside = Column(Integer, nullable=False, default=0)


class CamelModel(BaseModel):
    """JSON payloads use camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HourlyData(CamelModel):
    hour: str
    entries: int
    exits: int


class DashboardStats(CamelModel):
    today_entries: int
    today_exits: int
    current_inside: int
    total_lifetime: int
    peak_hour: int
    peak_hour_count: int
    yesterday_entries: Optional[int] = None
    yesterday_exits: Optional[int] = None


class WeeklyData(CamelModel):
    date: str
    entries: int
    exits: int
