"""
Ticket statistics for the admin dashboard cards.
"""
from collections import Counter
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from repairdesk.lib.timestamps import to_business_time, utc_now
from repairdesk.models.service_requests import RequestStatus, ServiceRequest


def get_service_statistics(
    requests: Iterable[ServiceRequest],
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Counts by status, service type and urgency.

    `completedToday` counts Completed tickets whose last update falls on the
    current business-local date.
    """
    requests = list(requests)
    today = to_business_time(now or utc_now()).date()

    by_status = Counter(r.status for r in requests)
    completed_today = sum(
        1 for r in requests
        if r.status == RequestStatus.COMPLETED
        and r.updated_at is not None
        and to_business_time(r.updated_at).date() == today
    )

    return {
        "total": len(requests),
        "pending": by_status[RequestStatus.PENDING],
        "inProgress": by_status[RequestStatus.IN_PROGRESS],
        "completed": by_status[RequestStatus.COMPLETED],
        "completedToday": completed_today,
        "serviceTypeStats": dict(Counter(r.service_type.value for r in requests if r.service_type is not None)),
        "urgencyStats": dict(Counter(r.urgency.value for r in requests)),
    }
