"""
Business date helpers.

A store's operating day does not start at midnight: anything that happens
before ``BUSINESS_DAY_START_HOUR`` (09:00 by default) in the store's time zone
is booked on the previous calendar day.
"""

from datetime import date, datetime, timedelta
from typing import List, Optional

from footfall.config import BUSINESS_DAY_START_HOUR, STORE_TIMEZONE


def get_now() -> datetime:
    """Current instant in the store's time zone. Overridden in tests."""
    return datetime.now(STORE_TIMEZONE)


def business_date(now: Optional[datetime] = None) -> date:
    """Returns the business date the given instant belongs to.

    Aware datetimes are converted to the store's time zone first; naive ones
    are taken as store-local wall clock time.
    """
    if now is None:
        now = get_now()
    elif now.tzinfo is not None:
        now = now.astimezone(STORE_TIMEZONE)

    if now.hour < BUSINESS_DAY_START_HOUR:
        return now.date() - timedelta(days=1)
    return now.date()


def last_days(end: date, count: int = 7) -> List[date]:
    """``count`` consecutive calendar days ending at ``end`` (inclusive), ascending."""
    return [end - timedelta(days=offset) for offset in range(count - 1, -1, -1)]
