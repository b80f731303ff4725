"""
SiteContentService - editable home-page copy in `siteContent/homePage`.

Saving never rejects content: each field that is blank, too long or badly
formatted is replaced by its default before the write, so the landing page
can always render.
"""
import re
from typing import Optional

from pydantic import ValidationError

from repairdesk.lib.errors import StoreUnavailable
from repairdesk.lib.logging import get_logger
from repairdesk.models.site_content import COLLECTION, HOME_PAGE_ID, HomePageContent
from repairdesk.services.document_store import DocumentStore


logger = get_logger(__name__)

PHONE_PATTERN = re.compile(r"^\+?[\d\s\-\(\)]{10,15}$")
EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")

UPDATED_BY = "admin"


def _within(value: str, max_length: int) -> bool:
    return bool(value) and len(value) <= max_length


def validate_content(content: HomePageContent) -> HomePageContent:
    """Return a copy with every invalid field reset to its default."""
    defaults = HomePageContent()
    validated = content.model_copy(deep=True)

    hero, default_hero = validated.hero, defaults.hero
    if not _within(hero.title, 100):
        hero.title = default_hero.title
    if not _within(hero.subtitle, 300):
        hero.subtitle = default_hero.subtitle

    indicators = validated.trust_indicators
    for name in type(indicators).model_fields:
        if not _within(getattr(indicators, name), 10):
            setattr(indicators, name, getattr(defaults.trust_indicators, name))

    services, default_services = validated.services, defaults.services
    if not _within(services.title, 80):
        services.title = default_services.title
    if not _within(services.subtitle, 250):
        services.subtitle = default_services.subtitle

    contact, default_contact = validated.contact, defaults.contact
    if not _within(contact.title, 80):
        contact.title = default_contact.title
    if not _within(contact.subtitle, 200):
        contact.subtitle = default_contact.subtitle
    if not contact.phone or not PHONE_PATTERN.match(contact.phone):
        contact.phone = default_contact.phone
    if not contact.whatsapp or not PHONE_PATTERN.match(contact.whatsapp):
        contact.whatsapp = default_contact.whatsapp
    if not contact.email or not EMAIL_PATTERN.search(contact.email):
        contact.email = default_contact.email
    if not _within(contact.address.line1, 50):
        contact.address.line1 = default_contact.address.line1
    if not _within(contact.address.line2, 50):
        contact.address.line2 = default_contact.address.line2

    if not _within(validated.footer.description, 200):
        validated.footer.description = defaults.footer.description

    return validated


class SiteContentService:
    """Loads and saves the home-page copy."""

    def __init__(self, document_store: Optional[DocumentStore]):
        self.document_store = document_store

    def load(self) -> HomePageContent:
        """Stored content over the defaults; defaults alone when nothing can be read."""
        if self.document_store is None:
            return HomePageContent()

        try:
            document = self.document_store.get(COLLECTION, HOME_PAGE_ID)
        except Exception:
            logger.error("Error loading site content", exc_info=True)
            return HomePageContent()

        if document is None:
            return HomePageContent()

        stored = document.data.get("content") or {}
        merged = {**HomePageContent().model_dump(by_alias=True), **stored}
        try:
            return HomePageContent.model_validate(merged)
        except ValidationError:
            logger.warning("Stored site content is malformed; serving defaults", exc_info=True)
            return HomePageContent()

    def save(self, content: HomePageContent) -> HomePageContent:
        """Validate, write and return what was actually stored."""
        if self.document_store is None:
            raise StoreUnavailable()

        validated = validate_content(content)
        self.document_store.set(
            COLLECTION,
            HOME_PAGE_ID,
            {
                "content": validated.model_dump(by_alias=True),
                "updatedBy": UPDATED_BY,
            },
        )
        logger.info("Site content updated")
        return validated

    def reset_to_defaults(self) -> HomePageContent:
        return self.save(HomePageContent())
