"""
Domain errors raised by the stores and services.

The HTTP layer maps these onto responses in
`repairdesk.api.middleware.error_handler`; nothing here knows about HTTP.
"""
from typing import Dict, Optional


class ConfigurationError(Exception):
    """The backend is not set up (e.g. no database URL configured)."""


class StoreUnavailable(ConfigurationError):
    """A write was attempted while no document store is configured."""

    def __init__(self, message: str = "Document store is not configured"):
        super().__init__(message)


class FieldValidationError(Exception):
    """
    Caller-side validation failed before any store call was made.

    `errors` maps a camelCase field name to a user-facing message.
    """

    def __init__(self, errors: Dict[str, str], message: str = "Validation failed"):
        self.errors = errors
        self.message = message
        super().__init__(message)


class RemoteOperationError(Exception):
    """A write against the document store failed."""

    def __init__(
        self,
        message: str,
        collection: Optional[str] = None,
        document_id: Optional[str] = None,
    ):
        self.message = message
        self.collection = collection
        self.document_id = document_id
        super().__init__(message)
