"""
Models package.
Importing it registers the SQLAlchemy `documents` table with Base.metadata;
the remaining models are the pydantic records stored inside documents.
"""
from repairdesk.models.documents import Document
from repairdesk.models.service_requests import (
    EstimatesPatch,
    NewServiceRequest,
    RequestStatus,
    ServiceRequest,
    ServiceType,
    Urgency,
)
from repairdesk.models.site_content import HomePageContent
from repairdesk.models.users import Address, UserProfile, UserProfilePatch

__all__ = [
    "Document",
    "EstimatesPatch",
    "NewServiceRequest",
    "RequestStatus",
    "ServiceRequest",
    "ServiceType",
    "Urgency",
    "HomePageContent",
    "Address",
    "UserProfile",
    "UserProfilePatch",
]
