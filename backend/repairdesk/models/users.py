"""
UserProfile model - a registered customer, keyed by identity-provider uid.
"""
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from repairdesk.lib.timestamps import resolve_timestamp
from repairdesk.models.service_requests import CamelModel, EMAIL_PATTERN


COLLECTION = "users"


class Address(CamelModel):
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""


class UserProfile(CamelModel):
    """A user profile as mirrored from the store."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    uid: str
    name: str = ""
    email: str = ""
    phone: Optional[str] = None
    address: Optional[Address] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _resolve_timestamp(cls, value: Any) -> Optional[datetime]:
        return resolve_timestamp(value)

    @classmethod
    def from_document(cls, document_id: str, data: Dict[str, Any]) -> "UserProfile":
        return cls.model_validate({**data, "uid": document_id})

    def __repr__(self) -> str:
        return f"<UserProfile(uid={self.uid}, name={self.name})>"


class UserProfilePatch(CamelModel):
    """The only profile fields that may be changed after sign-up."""
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[Address] = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            value = value.strip()
            if not value:
                raise ValueError("Name cannot be blank")
        return value

    @field_validator("email")
    @classmethod
    def _email_format(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            value = value.strip().lower()
            if not EMAIL_PATTERN.search(value):
                raise ValueError("Invalid email format")
        return value

    def to_fields(self) -> Dict[str, Any]:
        """Only the fields the caller actually set."""
        return self.model_dump(by_alias=True, exclude_unset=True)
