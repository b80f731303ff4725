"""
Service history filters: narrow tickets to one user and/or a time period.

Pure functions. Period boundaries are computed in the business timezone,
so "this month" for a shop in India starts at local midnight on the 1st.
"""
import enum
from datetime import datetime
from typing import Iterable, List, Optional

from repairdesk.lib.timestamps import business_tz, to_business_time, utc_now
from repairdesk.models.service_requests import ServiceRequest


class Period(str, enum.Enum):
    THIS_MONTH = "thisMonth"
    THIS_YEAR = "thisYear"
    ALL = "all"


PERIOD_LABELS = {
    Period.THIS_MONTH: "This Month",
    Period.THIS_YEAR: "This Year",
    Period.ALL: "All Time",
}


def period_start(period: Period, now: Optional[datetime] = None) -> Optional[datetime]:
    """
    First instant of the current month or year, or None for `Period.ALL`.

    The result is an aware datetime in the business timezone.
    """
    if period == Period.ALL:
        return None

    local_now = to_business_time(now or utc_now())
    if period == Period.THIS_MONTH:
        start = datetime(local_now.year, local_now.month, 1)
    else:
        start = datetime(local_now.year, 1, 1)
    return business_tz().localize(start)


def filter_by_user(requests: Iterable[ServiceRequest], user_id: str) -> List[ServiceRequest]:
    return [request for request in requests if request.user_id == user_id]


def filter_by_period(
    requests: Iterable[ServiceRequest],
    period: Period,
    now: Optional[datetime] = None,
) -> List[ServiceRequest]:
    """
    Keep requests created on or after the period boundary.

    Requests without a resolvable createdAt never match a bounded period.
    """
    start = period_start(period, now)
    if start is None:
        return list(requests)

    return [
        request for request in requests
        if request.created_at is not None and request.created_at >= start
    ]
