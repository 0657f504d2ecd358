# footfall/routes/footfall.py

import logging
from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from footfall.business_date import business_date, get_now
from footfall.database import get_db
from footfall.dashboard.export import export_filename, hourly_report_csv
from footfall.dashboard.metrics import with_net_flow
from footfall.models.footfall import DashboardStats, HourlyData, WeeklyData
from footfall.readers import read_hourly, read_stats, read_weekly

router = APIRouter(tags=["Footfall"])

logger = logging.getLogger(__name__)


@router.get("/hourly", response_model=List[HourlyData])
def get_hourly(
    day: Optional[date] = Query(None, alias="date"),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now)
):
    """
    Entries and exits per hour (0..23) for the given date.
    Defaults to the current business date.
    """
    if day is None:
        day = business_date(now)
    try:
        return read_hourly(db, day)
    except SQLAlchemyError as e:
        logger.error(f"Database error while reading hourly stats for {day}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch hourly data"
        ) from e


@router.get("/stats", response_model=DashboardStats)
def get_stats(db: Session = Depends(get_db), now: datetime = Depends(get_now)):
    try:
        return read_stats(db, now)
    except SQLAlchemyError as e:
        logger.error(f"Database error while reading dashboard stats: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch stats"
        ) from e


@router.get("/weekly", response_model=List[WeeklyData])
def get_weekly(db: Session = Depends(get_db), now: datetime = Depends(get_now)):
    try:
        return read_weekly(db, now)
    except SQLAlchemyError as e:
        logger.error(f"Database error while reading weekly summary: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch weekly data"
        ) from e


@router.get("/export")
def export_hourly_csv(
    day: Optional[date] = Query(None, alias="date"),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now)
):
    """
    CSV report for the selected day: summary header followed by the hourly rows.
    """
    if day is None:
        day = business_date(now)
    try:
        stats = read_stats(db, now)
        hourly = read_hourly(db, day)
    except SQLAlchemyError as e:
        logger.error(f"Database error while exporting footfall for {day}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to export footfall data"
        ) from e

    content = hourly_report_csv(day, with_net_flow(hourly), stats=stats, generated_at=now)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={export_filename(day)}"}
    )
