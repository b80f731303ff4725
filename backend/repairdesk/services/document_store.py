"""
DocumentStore - collections of JSON documents with snapshot subscriptions.

Backed by the SQLAlchemy `documents` table. After every committed write the
store reads the affected collection and pushes the whole snapshot, ordered
by createdAt descending, to each subscriber of that collection. Writes and
the snapshot they trigger are serialised under one lock, so a subscriber
never receives an older snapshot after a newer one.

Semantics follow a hosted document database:
- `add` assigns an opaque id, `set` writes at a caller-chosen id
- `update` merges top-level fields and fails if the document is missing
- `delete` of a missing document is a no-op
- `createdAt`/`updatedAt` are assigned by the store; a `createdAt` supplied
  in the data (imports, seeding) is honoured when it resolves to a date
"""
import itertools
import threading
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generator, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from repairdesk.lib.db import create_db_engine, create_session_factory, init_db
from repairdesk.lib.errors import RemoteOperationError
from repairdesk.lib.logging import get_logger
from repairdesk.lib.timestamps import resolve_timestamp, utc_now
from repairdesk.models.documents import Document


logger = get_logger(__name__)

SERVER_TIMESTAMP_FIELDS = ("createdAt", "updatedAt")


@dataclass(frozen=True)
class DocumentSnapshot:
    """A document as read: its id plus data with server timestamps merged in."""
    id: str
    data: Dict[str, Any] = field(default_factory=dict)


SnapshotListener = Callable[[List[DocumentSnapshot]], None]
ErrorListener = Callable[[Exception], None]
Unsubscribe = Callable[[], None]


class DocumentStore:
    """
    Document collections over a SQL database.

    Usage:
        store = DocumentStore.from_url("sqlite://")
        request_id = store.add("serviceRequests", {...})
        unsubscribe = store.subscribe("serviceRequests", on_snapshot)
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self._session_factory = create_session_factory(engine)
        self._listeners: Dict[str, Dict[int, Tuple[SnapshotListener, Optional[ErrorListener]]]] = {}
        self._tokens = itertools.count()
        self._lock = threading.RLock()

    @classmethod
    def from_url(cls, database_url: str, echo: bool = False) -> "DocumentStore":
        """Create the engine, ensure the table exists and wrap it."""
        engine = create_db_engine(database_url, echo=echo)
        init_db(engine)
        logger.info("Document store ready", extra={"dialect": engine.dialect.name})
        return cls(engine)

    def close(self) -> None:
        with self._lock:
            self._listeners.clear()
        self.engine.dispose()

    @contextmanager
    def _session(self) -> Generator[Session, None, None]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, collection: str, document_id: str) -> Optional[DocumentSnapshot]:
        """Point lookup; None when the document does not exist."""
        with self._session() as session:
            document = self._find(session, collection, document_id)
            if document is None:
                return None
            return DocumentSnapshot(id=document.document_id, data=document.to_dict())

    def where(self, collection: str, field_name: str, value: str) -> List[DocumentSnapshot]:
        """Documents whose top-level string field equals `value` exactly."""
        stmt = (
            select(Document)
            .where(
                Document.collection == collection,
                Document.data[field_name].as_string() == value,
            )
            .order_by(Document.created_at.desc(), Document.seq.desc())
        )
        with self._session() as session:
            return [
                DocumentSnapshot(id=doc.document_id, data=doc.to_dict())
                for doc in session.execute(stmt).scalars()
            ]

    def list(self, collection: str) -> List[DocumentSnapshot]:
        """Whole collection, newest first."""
        stmt = (
            select(Document)
            .where(Document.collection == collection)
            .order_by(Document.created_at.desc(), Document.seq.desc())
        )
        with self._session() as session:
            return [
                DocumentSnapshot(id=doc.document_id, data=doc.to_dict())
                for doc in session.execute(stmt).scalars()
            ]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def add(self, collection: str, data: Dict[str, Any]) -> str:
        """Create a document under a new opaque id and return the id."""
        document_id = uuid.uuid4().hex[:20]

        def write(session: Session) -> None:
            session.add(self._new_document(collection, document_id, data))

        self._write(collection, document_id, write)
        return document_id

    def set(
        self,
        collection: str,
        document_id: str,
        data: Dict[str, Any],
        merge: bool = False,
    ) -> None:
        """Create or overwrite a document; with `merge` the fields are merged in."""

        def write(session: Session) -> None:
            document = self._find(session, collection, document_id)
            if document is None:
                session.add(self._new_document(collection, document_id, data))
                return
            fields, created_at, _ = self._split_timestamps(data)
            document.data = {**document.data, **fields} if merge else fields
            if created_at is not None:
                document.created_at = created_at
            document.updated_at = utc_now()

        self._write(collection, document_id, write)

    def update(self, collection: str, document_id: str, fields: Dict[str, Any]) -> None:
        """Merge `fields` into an existing document and refresh updatedAt."""

        def write(session: Session) -> None:
            document = self._find(session, collection, document_id)
            if document is None:
                raise RemoteOperationError(
                    f"No document to update: {collection}/{document_id}",
                    collection=collection,
                    document_id=document_id,
                )
            values, _, _ = self._split_timestamps(fields)
            # Reassign so SQLAlchemy sees the JSON column change
            document.data = {**document.data, **values}
            document.updated_at = utc_now()

        self._write(collection, document_id, write)

    def delete(self, collection: str, document_id: str) -> None:
        """Hard-delete a document. Deleting a missing document is not an error."""

        def write(session: Session) -> None:
            document = self._find(session, collection, document_id)
            if document is not None:
                session.delete(document)

        self._write(collection, document_id, write)

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(
        self,
        collection: str,
        on_snapshot: SnapshotListener,
        on_error: Optional[ErrorListener] = None,
    ) -> Unsubscribe:
        """
        Listen to a collection. The current snapshot is delivered right away,
        then a fresh one after every write to the collection.
        """
        with self._lock:
            token = next(self._tokens)
            self._listeners.setdefault(collection, {})[token] = (on_snapshot, on_error)
            logger.debug("Subscribed to collection", extra={"collection": collection, "token": token})
            self._deliver(collection, [(on_snapshot, on_error)])

        def unsubscribe() -> None:
            with self._lock:
                self._listeners.get(collection, {}).pop(token, None)
            logger.debug("Unsubscribed from collection", extra={"collection": collection, "token": token})

        return unsubscribe

    def subscriber_count(self, collection: str) -> int:
        with self._lock:
            return len(self._listeners.get(collection, {}))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _find(session: Session, collection: str, document_id: str) -> Optional[Document]:
        stmt = select(Document).where(
            Document.collection == collection,
            Document.document_id == document_id,
        )
        return session.execute(stmt).scalar_one_or_none()

    @staticmethod
    def _split_timestamps(data: Dict[str, Any]):
        fields = {k: v for k, v in data.items() if k not in SERVER_TIMESTAMP_FIELDS}
        return fields, resolve_timestamp(data.get("createdAt")), resolve_timestamp(data.get("updatedAt"))

    def _new_document(self, collection: str, document_id: str, data: Dict[str, Any]) -> Document:
        fields, created_at, updated_at = self._split_timestamps(data)
        now = utc_now()
        created_at = created_at or now
        return Document(
            collection=collection,
            document_id=document_id,
            data=fields,
            created_at=created_at,
            updated_at=updated_at or created_at,
        )

    def _write(self, collection: str, document_id: str, write: Callable[[Session], None]) -> None:
        with self._lock:
            try:
                with self._session() as session:
                    write(session)
            except SQLAlchemyError as e:
                logger.error(
                    "Document write failed",
                    extra={"collection": collection, "document_id": document_id},
                    exc_info=True,
                )
                raise RemoteOperationError(
                    f"Write to {collection}/{document_id} failed: {e}",
                    collection=collection,
                    document_id=document_id,
                ) from e

            listeners = list(self._listeners.get(collection, {}).values())
            if listeners:
                self._deliver(collection, listeners)

    def _deliver(
        self,
        collection: str,
        listeners: List[Tuple[SnapshotListener, Optional[ErrorListener]]],
    ) -> None:
        try:
            snapshot = self.list(collection)
        except SQLAlchemyError as e:
            logger.warning(
                "Snapshot read failed",
                extra={"collection": collection},
                exc_info=True,
            )
            for _, on_error in listeners:
                if on_error is not None:
                    on_error(e)
            return

        for on_snapshot, _ in listeners:
            try:
                on_snapshot(snapshot)
            except Exception:
                # One broken listener must not starve the others or fail the write
                logger.exception("Snapshot listener raised", extra={"collection": collection})
