"""
Lease calendar calculations.

Pure functions over dates; nothing here touches the database. Month
arithmetic uses dateutil's relativedelta, which clamps to the last day of
shorter months (Jan 31 + 1 month = Feb 28/29).
"""

from datetime import date, datetime
from typing import Optional

from dateutil.relativedelta import relativedelta
from django.utils import timezone


def lease_end_date(start_date: date, term_months: int) -> date:
    """End date of a lease running ``term_months`` from ``start_date``."""
    return start_date + relativedelta(months=term_months)


def next_payment_date(start_date, today: Optional[date] = None) -> Optional[date]:
    """
    Next rent due date for a lease.

    - No start date: None
    - Start date after today: the start date itself
    - Otherwise: the first ``start_date + n months`` (n >= 1) strictly
      after today

    Each candidate is computed from the start date rather than from the
    previous candidate, so a lease starting on the 31st keeps landing on
    month-end instead of drifting to the 28th.

    Examples:
        start 2024-01-15, today 2024-07-01 -> 2024-07-15
        start 2024-01-15, today 2024-01-01 -> 2024-01-15
    """
    if not start_date:
        return None
    if isinstance(start_date, datetime):
        start_date = start_date.date()
    if today is None:
        today = timezone.localdate()

    if start_date > today:
        return start_date

    # Jump close to today, then step forward.
    months = max((today.year - start_date.year) * 12 + today.month - start_date.month, 1)
    candidate = start_date + relativedelta(months=months)
    while candidate <= today:
        months += 1
        candidate = start_date + relativedelta(months=months)
    return candidate
