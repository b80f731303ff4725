"""
UserDirectory - live in-memory mirror of every customer profile.

Follows the same subscription pattern as RequestStore and reads ticket
history from the RequestStore mirror.

Deleting a profile removes only the `users/{uid}` document. Tickets that
reference the uid keep it, and the identity-provider account is untouched.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import ValidationError

from repairdesk.lib.errors import StoreUnavailable
from repairdesk.lib.logging import get_logger
from repairdesk.models.service_requests import ServiceRequest
from repairdesk.models.users import COLLECTION, Address, UserProfile, UserProfilePatch
from repairdesk.services.document_store import DocumentSnapshot, DocumentStore, Unsubscribe
from repairdesk.services.history_filter import Period, filter_by_period
from repairdesk.services.request_store import RequestStore


logger = get_logger(__name__)


class UserDirectory:
    """Customer profiles plus their service history."""

    def __init__(self, document_store: Optional[DocumentStore], request_store: RequestStore):
        self.document_store = document_store
        self.request_store = request_store
        self._users: List[UserProfile] = []
        self._unsubscribe: Optional[Unsubscribe] = None
        self._loading = document_store is not None

    @property
    def configured(self) -> bool:
        return self.document_store is not None

    @property
    def users(self) -> List[UserProfile]:
        """Every profile, newest first."""
        return self._users

    @property
    def loading(self) -> bool:
        return self._loading

    def start(self) -> None:
        if self.document_store is None:
            logger.warning("Document store not configured; user directory is empty")
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
        users: List[UserProfile] = []
        for document in snapshot:
            try:
                users.append(UserProfile.from_document(document.id, document.data))
            except ValidationError as e:
                logger.warning(
                    "Skipping malformed user document",
                    extra={"uid": document.id, "errors": e.errors(include_url=False)},
                )
        self._users = users
        self._loading = False

    def _on_error(self, error: Exception) -> None:
        self._loading = False
        logger.warning("Users listen error", extra={"error": str(error)})

    def _require_store(self) -> DocumentStore:
        if self.document_store is None:
            raise StoreUnavailable()
        return self.document_store

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    def get_user(self, uid: str) -> Optional[UserProfile]:
        for user in self._users:
            if user.uid == uid:
                return user
        return None

    def save_user_profile(
        self,
        uid: str,
        name: str,
        email: str,
        phone: Optional[str] = None,
        address: Optional[Address] = None,
    ) -> None:
        """
        Create the profile on sign-up, or merge over an existing one.
        createdAt is kept when the profile already exists.
        """
        store = self._require_store()
        fields = {"name": name, "email": email.strip().lower()}
        if phone is not None:
            fields["phone"] = phone
        if address is not None:
            fields["address"] = address.model_dump(by_alias=True)
        store.set(COLLECTION, uid, fields, merge=True)
        logger.info("User profile saved", extra={"uid": uid})

    def update_user_profile(self, uid: str, patch: UserProfilePatch) -> None:
        """Merge the patched fields and refresh updatedAt."""
        store = self._require_store()
        fields = patch.to_fields()
        store.update(COLLECTION, uid, fields)
        logger.info("User profile updated", extra={"uid": uid, "fields": sorted(fields)})

    def delete_user(self, uid: str) -> None:
        """Hard-delete the profile document only."""
        store = self._require_store()
        store.delete(COLLECTION, uid)
        logger.info("User profile deleted", extra={"uid": uid})

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def get_user_service_history(self, uid: str) -> List[ServiceRequest]:
        return self.request_store.get_requests_by_user_id(uid)

    def get_user_service_history_by_period(
        self,
        uid: str,
        period: Period,
        now: Optional[datetime] = None,
    ) -> List[ServiceRequest]:
        return filter_by_period(self.get_user_service_history(uid), period, now)
