"""
Tests for user and period filters over service history.
"""
from datetime import datetime, timezone

import pytest

from repairdesk.models.service_requests import ServiceRequest
from repairdesk.services.history_filter import Period, filter_by_period, filter_by_user, period_start


def make_request(request_id, created_at, user_id="user-1"):
    return ServiceRequest.from_document(
        request_id,
        {
            "customerName": "Test Customer",
            "serviceType": "Computer Repair",
            "userId": user_id,
            "createdAt": created_at,
        },
    )


# 2024-06-15 12:00 UTC is 17:30 the same day in Asia/Kolkata
NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.mark.unit
def test_period_start_is_local_midnight():
    month_start = period_start(Period.THIS_MONTH, NOW)
    year_start = period_start(Period.THIS_YEAR, NOW)

    assert month_start.astimezone(timezone.utc) == datetime(2024, 5, 31, 18, 30, tzinfo=timezone.utc)
    assert year_start.astimezone(timezone.utc) == datetime(2023, 12, 31, 18, 30, tzinfo=timezone.utc)
    assert period_start(Period.ALL, NOW) is None


@pytest.mark.unit
def test_filter_by_period_boundaries():
    requests = [
        make_request("june", "2024-06-01T00:00:00Z"),
        make_request("month-edge", "2024-05-31T18:30:00Z"),
        make_request("before-month", "2024-05-31T18:29:59Z"),
        make_request("january", "2024-01-02T00:00:00Z"),
        make_request("last-year", "2023-12-31T10:00:00Z"),
    ]

    this_month = [r.id for r in filter_by_period(requests, Period.THIS_MONTH, NOW)]
    this_year = [r.id for r in filter_by_period(requests, Period.THIS_YEAR, NOW)]

    assert this_month == ["june", "month-edge"]
    assert this_year == ["june", "month-edge", "before-month", "january"]


@pytest.mark.unit
def test_filter_by_period_all_keeps_everything_in_order():
    requests = [
        make_request("b", "2020-01-01T00:00:00Z"),
        make_request("a", None),
    ]

    assert filter_by_period(requests, Period.ALL, NOW) == requests


@pytest.mark.unit
def test_missing_created_at_never_matches_bounded_period():
    requests = [make_request("undated", None), make_request("garbage", "not a date")]

    assert filter_by_period(requests, Period.THIS_MONTH, NOW) == []
    assert filter_by_period(requests, Period.THIS_YEAR, NOW) == []


@pytest.mark.unit
def test_filter_by_user_is_exact():
    requests = [
        make_request("mine", "2024-06-01T00:00:00Z", user_id="user-1"),
        make_request("theirs", "2024-06-01T00:00:00Z", user_id="user-10"),
        make_request("guest", "2024-06-01T00:00:00Z", user_id=None),
    ]

    assert [r.id for r in filter_by_user(requests, "user-1")] == ["mine"]
