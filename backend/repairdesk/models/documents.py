"""
Document model - one JSON document in a named collection.

Every collection (`users`, `serviceRequests`, `siteContent`) lives in this
table; `created_at`/`updated_at` are server-assigned and surface to readers
as the `createdAt`/`updatedAt` fields of the document.
"""
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import JSON, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from repairdesk.lib.db import Base


class Document(Base):
    """A document addressed by (collection, document_id)."""
    __tablename__ = "documents"

    # Insertion order breaks createdAt ties
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    collection: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    document_id: Mapped[str] = mapped_column(String(128), nullable=False)

    data: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        UniqueConstraint("collection", "document_id", name="document_collection_id_unique"),
    )

    def to_dict(self) -> Dict[str, Any]:
        """Document data with the server timestamps merged in."""
        return {
            **(self.data or {}),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    def __repr__(self) -> str:
        return f"<Document(collection={self.collection}, id={self.document_id})>"
