"""
CSV export of tickets and customers for the admin back office.

Rows are joined with "\\n" without a trailing newline; cells are quoted only
when they contain a comma, quote or line break, with quotes doubled. The
column orders below are relied on by spreadsheets built from earlier
exports and must not change.
"""
import csv
import enum
import io
import re
from datetime import date
from typing import Iterable, List, Optional, Sequence

from repairdesk.lib.timestamps import format_for_export
from repairdesk.models.service_requests import ServiceRequest
from repairdesk.models.users import UserProfile
from repairdesk.services.history_filter import Period


SERVICE_REQUEST_HEADERS = [
    "Ticket ID",
    "Customer Name",
    "Email",
    "Phone",
    "Address",
    "Service Type",
    "Description",
    "Custom Service",
    "Urgency",
    "Preferred Date",
    "Status",
    "Created At",
    "Updated At",
]

USER_HEADERS = [
    "User ID",
    "Name",
    "Email",
    "Phone",
    "Street",
    "City",
    "State",
    "Zip Code",
    "Created At",
    "Updated At",
]

USER_SERVICE_REQUEST_HEADERS = [
    "User Name",
    "User Email",
    "User Phone",
    "User ID",
    "Ticket ID",
    "Service Type",
    "Description",
    "Custom Service",
    "Urgency",
    "Preferred Date",
    "Status",
    "Created At",
    "Updated At",
    "Address",
]


def _to_csv(headers: Sequence[str], rows: Iterable[Sequence[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(headers)
    writer.writerows(rows)
    # Every row ends with the terminator; the export format has none after the last
    return buffer.getvalue()[:-1]


def _text(value: Optional[str]) -> str:
    return value or ""


def _enum_text(value: Optional[enum.Enum]) -> str:
    return value.value if value is not None else ""


def _request_row(request: ServiceRequest) -> List[str]:
    return [
        request.id,
        _text(request.customer_name),
        _text(request.email),
        _text(request.phone),
        _text(request.address),
        _enum_text(request.service_type),
        _text(request.description),
        _text(request.custom_service),
        request.urgency.value,
        _text(request.preferred_date),
        request.status.value,
        format_for_export(request.created_at),
        format_for_export(request.updated_at),
    ]


def export_service_requests_csv(requests: Iterable[ServiceRequest]) -> str:
    return _to_csv(SERVICE_REQUEST_HEADERS, (_request_row(r) for r in requests))


def export_users_csv(users: Iterable[UserProfile]) -> str:
    def row(user: UserProfile) -> List[str]:
        address = user.address
        return [
            user.uid,
            _text(user.name),
            _text(user.email),
            _text(user.phone),
            _text(address.street) if address else "",
            _text(address.city) if address else "",
            _text(address.state) if address else "",
            _text(address.zip_code) if address else "",
            format_for_export(user.created_at),
            format_for_export(user.updated_at),
        ]

    return _to_csv(USER_HEADERS, (row(u) for u in users))


def export_user_service_requests_csv(
    user: UserProfile,
    requests: Iterable[ServiceRequest],
) -> str:
    """One customer's tickets, each row prefixed with the customer's details."""
    def row(request: ServiceRequest) -> List[str]:
        return [
            _text(user.name),
            _text(user.email),
            _text(user.phone),
            user.uid,
            request.id,
            _enum_text(request.service_type),
            _text(request.description),
            _text(request.custom_service),
            request.urgency.value,
            _text(request.preferred_date),
            request.status.value,
            format_for_export(request.created_at),
            format_for_export(request.updated_at),
            _text(request.address),
        ]

    return _to_csv(USER_SERVICE_REQUEST_HEADERS, (row(r) for r in requests))


# Download filenames

def service_requests_filename(today: date) -> str:
    return f"service-requests-{today.isoformat()}.csv"


def users_filename(today: date) -> str:
    return f"users-{today.isoformat()}.csv"


def user_service_requests_filename(user: UserProfile, period: Period, today: date) -> str:
    name = re.sub(r"\s+", "_", user.name or user.uid)
    return f"{name}_service_requests_{period.value}_{today.isoformat()}.csv"
