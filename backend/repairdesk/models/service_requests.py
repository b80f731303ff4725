"""
ServiceRequest model - one customer-submitted repair/service ticket.

Stored in the `serviceRequests` collection with camelCase field names; the
Python attributes are snake_case with camelCase aliases.
"""
import enum
import re
from datetime import date, datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from repairdesk.lib.timestamps import resolve_timestamp


COLLECTION = "serviceRequests"

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")


class ServiceType(str, enum.Enum):
    """Services offered on the intake form."""
    COMPUTER_REPAIR = "Computer Repair"
    PRINTER_REPAIR = "Printer Repair"
    CCTV_REPAIR = "CCTV Repair"
    NETWORKING = "Networking"
    OTHER_SERVICES = "Other Services"


SERVICE_TYPE_VALUES = frozenset(t.value for t in ServiceType)


class Urgency(str, enum.Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class RequestStatus(str, enum.Enum):
    """
    Ticket status. There is no transition graph: an admin may move a ticket
    from any status to any other.
    """
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


class CamelModel(BaseModel):
    """Base for records persisted with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NewServiceRequest(CamelModel):
    """Fields a submitter provides; id, status and timestamps are assigned on write."""
    user_id: Optional[str] = None
    customer_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    service_type: Optional[ServiceType] = None
    custom_service: Optional[str] = None
    description: str = ""
    urgency: Urgency = Urgency.MEDIUM
    preferred_date: str = ""

    def missing_fields(self) -> Dict[str, str]:
        """Required fields that are blank, keyed by persisted field name."""
        errors: Dict[str, str] = {}
        if not self.customer_name.strip():
            errors["customerName"] = "Name is required"
        if not self.email.strip():
            errors["email"] = "Email is required"
        if not self.phone.strip():
            errors["phone"] = "Phone number is required"
        if not self.address.strip():
            errors["address"] = "Address is required"
        if self.service_type is None:
            errors["serviceType"] = "Service type is required"
        if not self.description.strip():
            errors["description"] = "Service description is required"
        return errors

    def validation_errors(self, today: date) -> Dict[str, str]:
        """
        Full intake-form checks: required fields, email format, custom
        service for 'Other Services', and a preferred date that is not in
        the past relative to `today`.
        """
        errors = self.missing_fields()

        if "email" not in errors and not EMAIL_PATTERN.search(self.email):
            errors["email"] = "Invalid email format"

        if self.service_type == ServiceType.OTHER_SERVICES and not (self.custom_service or "").strip():
            errors["customService"] = "Please specify the custom service needed"

        if not self.preferred_date.strip():
            errors["preferredDate"] = "Preferred date is required"
        else:
            try:
                preferred = date.fromisoformat(self.preferred_date.strip())
            except ValueError:
                errors["preferredDate"] = "Preferred date must be a valid date"
            else:
                if preferred < today:
                    errors["preferredDate"] = "Preferred date cannot be in the past"

        return errors

    def to_document(self) -> Dict[str, Any]:
        data = self.model_dump(by_alias=True, mode="json", exclude_none=True)
        # Contact lookup matches emails in lower case
        data["email"] = data["email"].strip().lower()
        if self.service_type != ServiceType.OTHER_SERVICES:
            data.pop("customService", None)
        return data


class ServiceRequest(CamelModel):
    """A ticket as mirrored from the store, timestamps already resolved."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    user_id: Optional[str] = None
    customer_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    service_type: Optional[ServiceType] = None
    custom_service: Optional[str] = None
    description: str = ""
    urgency: Urgency = Urgency.MEDIUM
    preferred_date: str = ""
    status: RequestStatus = RequestStatus.PENDING
    estimated_price: Optional[float] = None
    estimated_completion_time: Optional[str] = None
    diagnosed_issue: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("service_type", mode="before")
    @classmethod
    def _known_service_type(cls, value: Any) -> Any:
        # Legacy documents may carry a type that is no longer offered
        if isinstance(value, ServiceType):
            return value
        if isinstance(value, str) and value in SERVICE_TYPE_VALUES:
            return value
        return None

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _resolve_timestamp(cls, value: Any) -> Optional[datetime]:
        return resolve_timestamp(value)

    @classmethod
    def from_document(cls, document_id: str, data: Dict[str, Any]) -> "ServiceRequest":
        return cls.model_validate({**data, "id": document_id})

    def __repr__(self) -> str:
        return f"<ServiceRequest(id={self.id}, status={self.status.value}, email={self.email})>"


class EstimatesPatch(CamelModel):
    """Post-intake fields an admin may set; blank strings are treated as unset."""
    estimated_price: Optional[float] = Field(default=None, ge=0)
    estimated_completion_time: Optional[str] = None
    diagnosed_issue: Optional[str] = None

    @field_validator("estimated_completion_time", "diagnosed_issue", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @field_validator("estimated_price", mode="before")
    @classmethod
    def _parse_price(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    def to_fields(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
