"""
Customer self-service routes: own profile and own ticket history.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import field_validator

from repairdesk.api.dependencies import get_current_identity, get_user_directory
from repairdesk.api.middleware.error_handler import NotFoundException
from repairdesk.lib.errors import FieldValidationError
from repairdesk.lib.jwt import TokenIdentity
from repairdesk.models.service_requests import CamelModel, EMAIL_PATTERN, ServiceRequest
from repairdesk.models.users import Address, UserProfile
from repairdesk.services.history_filter import Period
from repairdesk.services.user_directory import UserDirectory


router = APIRouter(prefix="/me", tags=["me"])


class ProfileSaveRequest(CamelModel):
    """Profile settings form; email defaults to the account email."""
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[Address] = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value


@router.get("/profile", response_model=UserProfile)
def get_my_profile(
    identity: TokenIdentity = Depends(get_current_identity),
    users: UserDirectory = Depends(get_user_directory),
) -> UserProfile:
    profile = users.get_user(identity.uid)
    if profile is None:
        raise NotFoundException("User profile", identity.uid)
    return profile


@router.put("/profile", response_model=UserProfile)
def save_my_profile(
    payload: ProfileSaveRequest,
    identity: TokenIdentity = Depends(get_current_identity),
    users: UserDirectory = Depends(get_user_directory),
) -> UserProfile:
    """Create the profile after sign-up, or update it from profile settings."""
    email = (payload.email or identity.email or "").strip()
    if not EMAIL_PATTERN.search(email):
        raise FieldValidationError({"email": "Invalid email format"})

    users.save_user_profile(
        identity.uid,
        name=payload.name,
        email=email,
        phone=payload.phone,
        address=payload.address,
    )
    profile = users.get_user(identity.uid)
    if profile is None:
        raise NotFoundException("User profile", identity.uid)
    return profile


@router.get("/service-requests", response_model=List[ServiceRequest])
def list_my_service_requests(
    period: Period = Query(Period.ALL, description="thisMonth, thisYear or all"),
    identity: TokenIdentity = Depends(get_current_identity),
    users: UserDirectory = Depends(get_user_directory),
) -> List[ServiceRequest]:
    return users.get_user_service_history_by_period(identity.uid, period)
