"""
Admin Service Request Routes - ticket list, status and estimate updates.

Provides:
- GET /admin/service-requests: filtered ticket list
- GET /admin/service-requests/export: the same list as CSV
- GET /admin/service-requests/statistics: dashboard counters
- PATCH /admin/service-requests/{id}/status
- PATCH /admin/service-requests/{id}/estimates
"""
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field, ValidationError

from repairdesk.api.dependencies import get_request_store, require_admin
from repairdesk.api.middleware.error_handler import NotFoundException, ValidationException
from repairdesk.api.responses import csv_response
from repairdesk.lib.errors import StoreUnavailable
from repairdesk.lib.timestamps import to_business_time, utc_now
from repairdesk.models.service_requests import EstimatesPatch, RequestStatus, ServiceRequest
from repairdesk.services.admin_filter import RequestFilter, filter_requests
from repairdesk.services.export_service import export_service_requests_csv, service_requests_filename
from repairdesk.services.request_store import RequestStore
from repairdesk.services.statistics import get_service_statistics


router = APIRouter(
    prefix="/admin/service-requests",
    tags=["admin", "service-requests"],
    dependencies=[Depends(require_admin)],
)


class ServiceRequestListResponse(BaseModel):
    """Filtered tickets plus the unfiltered total ("showing X of Y")."""
    requests: List[ServiceRequest]
    matched: int
    total: int
    loading: bool = Field(description="True until the first snapshot has been received")


class StatusUpdateRequest(BaseModel):
    status: RequestStatus


def request_filter(
    customer: Optional[str] = Query(None, description="Customer name contains"),
    email: Optional[str] = Query(None, description="Email contains"),
    status: Optional[str] = Query(None, description="Pending, In Progress, Completed or all"),
    date_from: Optional[str] = Query(None, description="Created on or after (YYYY-MM-DD)"),
    date_to: Optional[str] = Query(None, description="Created on or before (YYYY-MM-DD)"),
    search: Optional[str] = Query(None, description="Name, email, phone or ticket id contains"),
    service_type: Optional[str] = Query(None, description="Exact service type or all"),
) -> RequestFilter:
    try:
        return RequestFilter(
            customer=customer,
            email=email,
            status=status,
            date_from=date_from,
            date_to=date_to,
            search=search,
            service_type=service_type,
        )
    except ValidationError as e:
        errors = {".".join(str(part) for part in err["loc"]): err["msg"] for err in e.errors()}
        raise ValidationException("Invalid filter", errors=errors)


def _business_today() -> date:
    return to_business_time(utc_now()).date()


@router.get("", response_model=ServiceRequestListResponse)
def list_service_requests(
    criteria: RequestFilter = Depends(request_filter),
    requests: RequestStore = Depends(get_request_store),
) -> ServiceRequestListResponse:
    all_requests = requests.requests
    matched = filter_requests(all_requests, criteria)
    return ServiceRequestListResponse(
        requests=matched,
        matched=len(matched),
        total=len(all_requests),
        loading=requests.loading,
    )


@router.get("/export")
def export_service_requests(
    criteria: RequestFilter = Depends(request_filter),
    requests: RequestStore = Depends(get_request_store),
) -> Response:
    """CSV of the tickets matching the current filters."""
    content = export_service_requests_csv(filter_requests(requests.requests, criteria))
    filename = service_requests_filename(_business_today())
    return csv_response(content, filename)


@router.get("/statistics")
def service_request_statistics(
    requests: RequestStore = Depends(get_request_store),
) -> Dict[str, Any]:
    return get_service_statistics(requests.requests)


def _writable(requests: RequestStore) -> None:
    if not requests.configured:
        raise StoreUnavailable()


def _existing(requests: RequestStore, request_id: str) -> ServiceRequest:
    request = requests.get_request_by_id(request_id)
    if request is None:
        raise NotFoundException("Service request", request_id)
    return request


@router.patch("/{request_id}/status", response_model=ServiceRequest)
def update_service_request_status(
    request_id: str,
    payload: StatusUpdateRequest,
    requests: RequestStore = Depends(get_request_store),
) -> ServiceRequest:
    """Move a ticket to any status; there are no forbidden transitions."""
    _writable(requests)
    _existing(requests, request_id)
    requests.update_request_status(request_id, payload.status)
    return _existing(requests, request_id)


@router.patch("/{request_id}/estimates", response_model=ServiceRequest)
def update_service_request_estimates(
    request_id: str,
    payload: EstimatesPatch,
    requests: RequestStore = Depends(get_request_store),
) -> ServiceRequest:
    """Set price (non-negative), completion time and diagnosed issue; blanks are ignored."""
    _writable(requests)
    _existing(requests, request_id)
    requests.update_request_estimates(request_id, payload)
    return _existing(requests, request_id)
