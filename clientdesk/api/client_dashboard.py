"""
Client dashboard API - what a logged-in client sees about their own account.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from clientdesk.api.auth import SessionUser, get_current_client
from clientdesk.database import get_db
from clientdesk.models.client_link import ClientLink
from clientdesk.schemas.api_responses import (
    DashboardClient,
    DashboardResponse,
    DashboardStats,
    LinkSummary,
    LinksByType,
)
from clientdesk.services.clients import get_client_for_user, list_links

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/client", tags=["client-dashboard"])

# Dashboard section for each known link type; anything else lands in "other"
LINK_SECTIONS = {
    "google_doc": "documents",
    "clickup": "projects",
    "airtable": "data",
}


def _link_summary(link: ClientLink) -> LinkSummary:
    return LinkSummary(
        id=str(link.id),
        link_type=link.link_type,
        title=link.title,
        url=link.url,
        description=link.description,
        icon=link.icon,
        generated_by_automation=bool(link.generated_by_automation),
        created_at=link.created_at,
    )


def group_links(links: list[ClientLink]) -> LinksByType:
    grouped = LinksByType()
    for link in links:
        section = LINK_SECTIONS.get(link.link_type, "other")
        getattr(grouped, section).append(_link_summary(link))
    return grouped


@router.get("/dashboard", response_model=DashboardResponse)
async def client_dashboard(
    db: AsyncSession = Depends(get_db),
    session: SessionUser = Depends(get_current_client),
):
    """Profile, resource links grouped by type, and link counts."""
    try:
        client = await get_client_for_user(db, session.user_id)
        links = await list_links(db, client.id) if client else []
    except Exception as e:
        logger.exception("Dashboard error: %s", str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch dashboard data")
    if not client:
        raise HTTPException(status_code=404, detail="Client profile not found")

    grouped = group_links(links)

    return DashboardResponse(
        client=DashboardClient(
            id=str(client.id),
            unique_client_id=client.unique_client_id,
            company_name=client.company_name,
            industry=client.industry,
            status=client.status,
            onboarding_completed=bool(client.onboarding_completed),
            onboarding_completed_at=client.onboarding_completed_at,
            email=client.user.email,
            created_at=client.created_at,
        ),
        links=grouped,
        stats=DashboardStats(
            total_links=len(links),
            document_count=len(grouped.documents),
            project_count=len(grouped.projects),
            data_count=len(grouped.data),
        ),
    )
