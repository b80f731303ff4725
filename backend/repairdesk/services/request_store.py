"""
RequestStore - live in-memory mirror of every service ticket.

The mirror is replaced wholesale by each snapshot the document store pushes
after a write, so callers always read what the store last confirmed rather
than what a write returned. Constructed with `document_store=None` the
store is "not configured": reads are empty and writes raise StoreUnavailable.

Usage:
    requests = RequestStore(document_store)
    requests.start()
    ticket_id = requests.add_request(new_request)
    ...
    requests.stop()
"""
from typing import List, Optional

from pydantic import ValidationError

from repairdesk.lib.errors import FieldValidationError, StoreUnavailable
from repairdesk.lib.logging import get_logger
from repairdesk.models.service_requests import (
    COLLECTION,
    EstimatesPatch,
    NewServiceRequest,
    RequestStatus,
    ServiceRequest,
)
from repairdesk.services.document_store import DocumentSnapshot, DocumentStore, Unsubscribe
from repairdesk.services.history_filter import filter_by_user


logger = get_logger(__name__)


def snapshot_to_requests(snapshot: List[DocumentSnapshot]) -> List[ServiceRequest]:
    """Parse a collection snapshot, skipping documents that are not valid tickets."""
    requests: List[ServiceRequest] = []
    for document in snapshot:
        try:
            requests.append(ServiceRequest.from_document(document.id, document.data))
        except ValidationError as e:
            logger.warning(
                "Skipping malformed service request document",
                extra={"document_id": document.id, "errors": e.errors(include_url=False)},
            )
    return requests


class RequestStore:
    """Service tickets: intake, admin updates and lookups."""

    def __init__(self, document_store: Optional[DocumentStore]):
        self.document_store = document_store
        self._requests: List[ServiceRequest] = []
        self._unsubscribe: Optional[Unsubscribe] = None
        self._loading = document_store is not None

    @property
    def configured(self) -> bool:
        return self.document_store is not None

    @property
    def requests(self) -> List[ServiceRequest]:
        """Every ticket, newest first."""
        return self._requests

    @property
    def loading(self) -> bool:
        """True until the first snapshot has arrived."""
        return self._loading

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        if self.document_store is None:
            logger.warning("Document store not configured; service requests are read-only and empty")
            self._loading = False
            return
        if self._unsubscribe is not None:
            return
        self._unsubscribe = self.document_store.subscribe(
            COLLECTION, self._on_snapshot, self._on_error
        )

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_snapshot(self, snapshot: List[DocumentSnapshot]) -> None:
        self._requests = snapshot_to_requests(snapshot)
        self._loading = False
        logger.debug("Service requests snapshot applied", extra={"count": len(self._requests)})

    def _on_error(self, error: Exception) -> None:
        self._loading = False
        logger.warning("Service requests listen error", extra={"error": str(error)})

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _require_store(self) -> DocumentStore:
        if self.document_store is None:
            raise StoreUnavailable()
        return self.document_store

    def add_request(self, data: NewServiceRequest) -> str:
        """
        Create a Pending ticket and return its id.

        Raises:
            FieldValidationError: a required field is blank (nothing is written)
            StoreUnavailable: no document store is configured
            RemoteOperationError: the write failed
        """
        errors = data.missing_fields()
        if errors:
            raise FieldValidationError(errors)

        store = self._require_store()
        document = data.to_document()
        document["status"] = RequestStatus.PENDING.value
        request_id = store.add(COLLECTION, document)

        logger.info(
            "Service request created",
            extra={
                "request_id": request_id,
                "service_type": document.get("serviceType"),
                "user_id": data.user_id,
            },
        )
        return request_id

    def update_request_status(self, request_id: str, status: RequestStatus) -> None:
        """Set the status; any status may follow any other."""
        store = self._require_store()
        store.update(COLLECTION, request_id, {"status": RequestStatus(status).value})
        logger.info(
            "Service request status updated",
            extra={"request_id": request_id, "status": RequestStatus(status).value},
        )

    def update_request_estimates(self, request_id: str, estimates: EstimatesPatch) -> None:
        """Write whichever of price, completion time and diagnosis are set."""
        store = self._require_store()
        fields = estimates.to_fields()
        store.update(COLLECTION, request_id, fields)
        logger.info(
            "Service request estimates updated",
            extra={"request_id": request_id, "fields": sorted(fields)},
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_requests_by_contact(self, email_or_phone: str) -> List[ServiceRequest]:
        """
        Tickets whose email equals the lower-cased input, followed by tickets
        whose phone equals the input as typed. A ticket appears at most once.
        Never raises; any failure yields an empty list.
        """
        if self.document_store is None:
            return []

        try:
            by_email = self.document_store.where(COLLECTION, "email", email_or_phone.lower())
            by_phone = self.document_store.where(COLLECTION, "phone", email_or_phone)
        except Exception:
            logger.warning(
                "Contact lookup failed",
                extra={"query_length": len(email_or_phone)},
                exc_info=True,
            )
            return []

        seen = set()
        matches: List[DocumentSnapshot] = []
        for document in by_email + by_phone:
            if document.id not in seen:
                seen.add(document.id)
                matches.append(document)
        return snapshot_to_requests(matches)

    def get_requests_by_user_id(self, user_id: str) -> List[ServiceRequest]:
        return filter_by_user(self._requests, user_id)

    def get_request_by_id(self, request_id: str) -> Optional[ServiceRequest]:
        """Mirror first, then one point lookup; None when neither finds it."""
        for request in self._requests:
            if request.id == request_id:
                return request

        if self.document_store is None:
            return None

        try:
            document = self.document_store.get(COLLECTION, request_id)
        except Exception:
            logger.warning(
                "Point lookup failed",
                extra={"request_id": request_id},
                exc_info=True,
            )
            return None

        if document is None:
            return None
        parsed = snapshot_to_requests([document])
        return parsed[0] if parsed else None
