"""
API dependencies for FastAPI dependency injection.

Provides the service objects built at startup and token-based identity.
"""
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jwt.exceptions import InvalidTokenError

from repairdesk.api.middleware.error_handler import ForbiddenException, UnauthorizedException
from repairdesk.lib.jwt import TokenIdentity, verify_token
from repairdesk.lib.logging import get_logger
from repairdesk.services.container import Services
from repairdesk.services.request_store import RequestStore
from repairdesk.services.site_content_service import SiteContentService
from repairdesk.services.user_directory import UserDirectory


logger = get_logger(__name__)

# HTTP Bearer token security scheme; missing tokens are handled per route
security = HTTPBearer(auto_error=False)


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_request_store(services: Services = Depends(get_services)) -> RequestStore:
    return services.request_store


def get_user_directory(services: Services = Depends(get_services)) -> UserDirectory:
    return services.user_directory


def get_site_content(services: Services = Depends(get_services)) -> SiteContentService:
    return services.site_content


def get_optional_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[TokenIdentity]:
    """
    Identity from the bearer token, or None when no token was sent.

    Raises:
        UnauthorizedException: a token was sent but does not verify
    """
    if credentials is None:
        return None
    try:
        return verify_token(credentials.credentials)
    except InvalidTokenError as e:
        logger.info("Rejected bearer token", extra={"reason": str(e)})
        raise UnauthorizedException("Invalid authentication token")


def get_current_identity(
    identity: Optional[TokenIdentity] = Depends(get_optional_identity),
) -> TokenIdentity:
    if identity is None:
        raise UnauthorizedException("Authentication required")
    return identity


def require_admin(
    identity: TokenIdentity = Depends(get_current_identity),
) -> TokenIdentity:
    if not identity.is_admin:
        raise ForbiddenException("Admin access required")
    return identity
