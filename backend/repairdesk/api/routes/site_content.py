"""
Home-page copy: public read, admin edit.
"""
from fastapi import APIRouter, Depends

from repairdesk.api.dependencies import get_site_content, require_admin
from repairdesk.models.site_content import HomePageContent
from repairdesk.services.site_content_service import SiteContentService


router = APIRouter(prefix="/site-content", tags=["site-content"])
admin_router = APIRouter(
    prefix="/admin/site-content",
    tags=["admin", "site-content"],
    dependencies=[Depends(require_admin)],
)


@router.get("/home", response_model=HomePageContent)
def get_home_page_content(
    content: SiteContentService = Depends(get_site_content),
) -> HomePageContent:
    return content.load()


@admin_router.put("/home", response_model=HomePageContent)
def update_home_page_content(
    payload: HomePageContent,
    content: SiteContentService = Depends(get_site_content),
) -> HomePageContent:
    """Save the copy; invalid fields come back replaced by their defaults."""
    return content.save(payload)


@admin_router.post("/home/reset", response_model=HomePageContent)
def reset_home_page_content(
    content: SiteContentService = Depends(get_site_content),
) -> HomePageContent:
    return content.reset_to_defaults()
