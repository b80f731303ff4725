"""
Explicitly constructed service graph with a start/stop lifecycle.

The API builds one `Services` at startup; tests build their own against an
in-memory database so instances never share state.
"""
from dataclasses import dataclass
from typing import Optional

from repairdesk.lib.logging import get_logger
from repairdesk.services.document_store import DocumentStore
from repairdesk.services.request_store import RequestStore
from repairdesk.services.site_content_service import SiteContentService
from repairdesk.services.user_directory import UserDirectory


logger = get_logger(__name__)


@dataclass
class Services:
    document_store: Optional[DocumentStore]
    request_store: RequestStore
    user_directory: UserDirectory
    site_content: SiteContentService

    @property
    def configured(self) -> bool:
        return self.document_store is not None

    def start(self) -> None:
        self.request_store.start()
        self.user_directory.start()
        logger.info("Services started", extra={"configured": self.configured})

    def stop(self) -> None:
        self.user_directory.stop()
        self.request_store.stop()
        logger.info("Services stopped")

    def close(self) -> None:
        self.stop()
        if self.document_store is not None:
            self.document_store.close()


def build_services(document_store: Optional[DocumentStore]) -> Services:
    request_store = RequestStore(document_store)
    return Services(
        document_store=document_store,
        request_store=request_store,
        user_directory=UserDirectory(document_store, request_store),
        site_content=SiteContentService(document_store),
    )


def build_services_from_url(database_url: str, echo: bool = False) -> Services:
    """An empty URL yields unconfigured services (empty reads, failing writes)."""
    if not database_url:
        logger.warning("DATABASE_URL is not set; running without a document store")
        return build_services(None)
    return build_services(DocumentStore.from_url(database_url, echo=echo))
