"""
Public service request routes: intake form and status lookup.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from repairdesk.api.dependencies import get_optional_identity, get_request_store
from repairdesk.api.middleware.error_handler import BadRequestException, NotFoundException
from repairdesk.lib.errors import FieldValidationError
from repairdesk.lib.jwt import TokenIdentity
from repairdesk.lib.logging import get_logger
from repairdesk.lib.timestamps import to_business_time, utc_now
from repairdesk.models.service_requests import NewServiceRequest, ServiceRequest
from repairdesk.services.request_store import RequestStore


logger = get_logger(__name__)
router = APIRouter(prefix="/service-requests", tags=["service-requests"])


class CreatedResponse(BaseModel):
    id: str


@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
def create_service_request(
    payload: NewServiceRequest,
    identity: Optional[TokenIdentity] = Depends(get_optional_identity),
    requests: RequestStore = Depends(get_request_store),
) -> CreatedResponse:
    """
    Submit a service request.

    Signed-in customers get the ticket linked to their account; guests
    submit anonymously. The preferred date may not be before today
    (business-local).
    """
    today = to_business_time(utc_now()).date()
    errors = payload.validation_errors(today)
    if errors:
        raise FieldValidationError(errors, message="Please fix the highlighted fields")

    # The owner always comes from the token, never from the body
    payload = payload.model_copy(update={"user_id": identity.uid if identity else None})
    request_id = requests.add_request(payload)
    return CreatedResponse(id=request_id)


@router.get("/lookup", response_model=List[ServiceRequest])
def lookup_service_requests(
    query: str = Query(..., description="Ticket id, email address or phone number"),
    requests: RequestStore = Depends(get_request_store),
) -> List[ServiceRequest]:
    """
    Status page lookup: a ticket id first, then every ticket for the
    contact. An empty list means nothing matched.
    """
    trimmed = query.strip()
    if not trimmed:
        raise BadRequestException("Please enter a ticket ID, email, or phone number")

    by_id = requests.get_request_by_id(trimmed)
    if by_id is not None:
        return [by_id]
    return requests.get_requests_by_contact(trimmed)


@router.get("/{request_id}", response_model=ServiceRequest)
def get_service_request(
    request_id: str,
    requests: RequestStore = Depends(get_request_store),
) -> ServiceRequest:
    request = requests.get_request_by_id(request_id)
    if request is None:
        raise NotFoundException("Service request", request_id)
    return request
