"""
CSV export of the hourly dataset.

Formatting only: builds the text of the report, the caller decides whether to
stream it as a download or write it to disk.
"""

import csv
import io
from datetime import date, datetime
from typing import Optional, Sequence

from footfall.business_date import get_now
from footfall.config import STORE_NAME
from footfall.models.dashboard import HourlyFlow
from footfall.models.footfall import DashboardStats


def export_filename(selected_date: date) -> str:
    return f"footfall-report-{selected_date.isoformat()}.csv"


def hourly_report_csv(
    selected_date: date,
    hourly: Sequence[HourlyFlow],
    stats: Optional[DashboardStats] = None,
    generated_at: Optional[datetime] = None,
    store_name: str = STORE_NAME,
) -> str:
    if generated_at is None:
        generated_at = get_now()

    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")

    writer.writerow([f"{store_name} - Footfall Report"])
    writer.writerow(["Date:", selected_date.isoformat()])
    writer.writerow(["Generated:", generated_at.strftime("%Y-%m-%d %H:%M:%S")])
    writer.writerow([])

    writer.writerow(["Summary"])
    writer.writerow(["Total Entries:", stats.today_entries if stats else 0])
    writer.writerow(["Total Exits:", stats.today_exits if stats else 0])
    writer.writerow(["Current Inside:", stats.current_inside if stats else 0])
    if stats:
        writer.writerow(["Peak Hour:", f"{stats.peak_hour}:00 ({stats.peak_hour_count} visitors)"])
    else:
        writer.writerow(["Peak Hour:", "-"])
    writer.writerow([])

    writer.writerow(["Hourly Breakdown"])
    writer.writerow(["Hour", "Entries", "Exits", "Net Flow"])
    for h in hourly:
        writer.writerow([h.hour, h.entries, h.exits, h.net])

    return output.getvalue()
