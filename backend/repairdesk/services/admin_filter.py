"""
Admin filter pipeline for the back-office ticket and customer lists.

Every predicate is independent and optional; they combine with AND, so the
order they are applied in never changes the result.
"""
from datetime import date
from typing import Callable, Iterable, List, Optional

from pydantic import BaseModel, Field, field_validator

from repairdesk.lib.timestamps import to_business_time
from repairdesk.models.service_requests import RequestStatus, ServiceRequest, ServiceType
from repairdesk.models.users import UserProfile


# Value a select box sends for "no filter"
ALL_PLACEHOLDER = "all"


class RequestFilter(BaseModel):
    """Criteria for the admin ticket list. Unset, blank and 'all' mean no constraint."""
    customer: Optional[str] = Field(default=None, description="Substring of the customer name")
    email: Optional[str] = Field(default=None, description="Substring of the email")
    status: Optional[RequestStatus] = Field(default=None, description="Exact status")
    date_from: Optional[date] = Field(default=None, description="Created on or after (inclusive)")
    date_to: Optional[date] = Field(default=None, description="Created on or before (inclusive)")
    search: Optional[str] = Field(default=None, description="Substring of name, email, phone or ticket id")
    service_type: Optional[ServiceType] = Field(default=None, description="Exact service type")

    @field_validator("customer", "email", "search", "status", "service_type", "date_from", "date_to", mode="before")
    @classmethod
    def _placeholder_to_none(cls, value):
        if isinstance(value, str):
            value = value.strip()
            if not value or value.lower() == ALL_PLACEHOLDER:
                return None
        return value


Predicate = Callable[[ServiceRequest], bool]


def _contains(haystack: Optional[str], needle: str) -> bool:
    return needle.lower() in (haystack or "").lower()


def _created_on(request: ServiceRequest) -> Optional[date]:
    if request.created_at is None:
        return None
    return to_business_time(request.created_at).date()


def build_predicates(criteria: RequestFilter) -> List[Predicate]:
    """One predicate per constraint that is actually set."""
    predicates: List[Predicate] = []

    if criteria.customer:
        predicates.append(lambda r: _contains(r.customer_name, criteria.customer))

    if criteria.email:
        predicates.append(lambda r: _contains(r.email, criteria.email))

    if criteria.status is not None:
        predicates.append(lambda r: r.status == criteria.status)

    if criteria.service_type is not None:
        predicates.append(lambda r: r.service_type == criteria.service_type)

    if criteria.date_from is not None:
        def created_after(r: ServiceRequest) -> bool:
            created = _created_on(r)
            return created is not None and created >= criteria.date_from
        predicates.append(created_after)

    if criteria.date_to is not None:
        def created_before(r: ServiceRequest) -> bool:
            created = _created_on(r)
            return created is not None and created <= criteria.date_to
        predicates.append(created_before)

    if criteria.search:
        term = criteria.search
        predicates.append(
            lambda r: (
                _contains(r.customer_name, term)
                or _contains(r.email, term)
                or term in (r.phone or "")
                or _contains(r.id, term)
            )
        )

    return predicates


def filter_requests(
    requests: Iterable[ServiceRequest],
    criteria: RequestFilter,
) -> List[ServiceRequest]:
    """Requests satisfying every set constraint, input order preserved."""
    predicates = build_predicates(criteria)
    return [r for r in requests if all(predicate(r) for predicate in predicates)]


def search_users(users: Iterable[UserProfile], term: Optional[str]) -> List[UserProfile]:
    """Users whose name, email, phone or uid contains `term`; everyone when blank."""
    term = (term or "").strip()
    if not term:
        return list(users)
    return [
        user for user in users
        if _contains(user.name, term)
        or _contains(user.email, term)
        or term in (user.phone or "")
        or _contains(user.uid, term)
    ]
