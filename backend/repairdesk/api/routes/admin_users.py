"""
Admin User Routes - customer directory, profile edits and per-customer history.
"""
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel

from repairdesk.api.dependencies import get_user_directory, require_admin
from repairdesk.api.middleware.error_handler import NotFoundException
from repairdesk.api.responses import csv_response
from repairdesk.lib.errors import StoreUnavailable
from repairdesk.lib.timestamps import to_business_time, utc_now
from repairdesk.models.service_requests import CamelModel, ServiceRequest
from repairdesk.models.users import UserProfile, UserProfilePatch
from repairdesk.services.admin_filter import search_users
from repairdesk.services.export_service import (
    export_user_service_requests_csv,
    export_users_csv,
    user_service_requests_filename,
    users_filename,
)
from repairdesk.services.history_filter import PERIOD_LABELS, Period
from repairdesk.services.statistics import get_service_statistics
from repairdesk.services.user_directory import UserDirectory


router = APIRouter(
    prefix="/admin/users",
    tags=["admin", "users"],
    dependencies=[Depends(require_admin)],
)


class UserListResponse(BaseModel):
    users: List[UserProfile]
    matched: int
    total: int
    loading: bool


class UserHistoryResponse(CamelModel):
    uid: str
    period: Period
    period_label: str
    requests: List[ServiceRequest]
    statistics: Dict[str, Any]


def _business_today() -> date:
    return to_business_time(utc_now()).date()


def _writable(users: UserDirectory) -> None:
    if not users.configured:
        raise StoreUnavailable()


def _existing(users: UserDirectory, uid: str) -> UserProfile:
    user = users.get_user(uid)
    if user is None:
        raise NotFoundException("User", uid)
    return user


@router.get("", response_model=UserListResponse)
def list_users(
    search: Optional[str] = Query(None, description="Name, email, phone or uid contains"),
    users: UserDirectory = Depends(get_user_directory),
) -> UserListResponse:
    matched = search_users(users.users, search)
    return UserListResponse(
        users=matched,
        matched=len(matched),
        total=len(users.users),
        loading=users.loading,
    )


@router.get("/export")
def export_users(
    search: Optional[str] = Query(None),
    users: UserDirectory = Depends(get_user_directory),
) -> Response:
    content = export_users_csv(search_users(users.users, search))
    return csv_response(content, users_filename(_business_today()))


@router.get("/{uid}", response_model=UserProfile)
def get_user(
    uid: str,
    users: UserDirectory = Depends(get_user_directory),
) -> UserProfile:
    return _existing(users, uid)


@router.patch("/{uid}", response_model=UserProfile)
def update_user(
    uid: str,
    payload: UserProfilePatch,
    users: UserDirectory = Depends(get_user_directory),
) -> UserProfile:
    _writable(users)
    _existing(users, uid)
    users.update_user_profile(uid, payload)
    return _existing(users, uid)


@router.delete("/{uid}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    uid: str,
    users: UserDirectory = Depends(get_user_directory),
) -> Response:
    """
    Remove the profile. The customer's tickets stay, and the sign-in account
    must be removed from the identity provider separately.
    """
    _writable(users)
    _existing(users, uid)
    users.delete_user(uid)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{uid}/service-requests", response_model=UserHistoryResponse)
def get_user_history(
    uid: str,
    period: Period = Query(Period.ALL),
    users: UserDirectory = Depends(get_user_directory),
) -> UserHistoryResponse:
    """Tickets linked to the uid, whether or not the profile still exists."""
    history = users.get_user_service_history_by_period(uid, period)
    return UserHistoryResponse(
        uid=uid,
        period=period,
        period_label=PERIOD_LABELS[period],
        requests=history,
        statistics=get_service_statistics(history),
    )


@router.get("/{uid}/service-requests/export")
def export_user_history(
    uid: str,
    period: Period = Query(Period.ALL),
    users: UserDirectory = Depends(get_user_directory),
) -> Response:
    # A deleted customer still has tickets; export them under the bare uid
    user = users.get_user(uid) or UserProfile(uid=uid)
    history = users.get_user_service_history_by_period(uid, period)
    content = export_user_service_requests_csv(user, history)
    return csv_response(content, user_service_requests_filename(user, period, _business_today()))
