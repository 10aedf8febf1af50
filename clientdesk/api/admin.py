"""
Admin API - operator views across all clients.
All endpoints require an admin session.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from clientdesk.api.auth import SessionUser, get_current_admin
from clientdesk.database import get_db
from clientdesk.schemas.api_responses import AdminClientListResponse, AdminClientSummary
from clientdesk.services.clients import list_clients_with_counts

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/admin", tags=["admin"])


@router.get("/clients", response_model=AdminClientListResponse)
async def admin_clients(
    status: Optional[str] = None,
    search: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    admin: SessionUser = Depends(get_current_admin),
):
    """All clients, newest first, with link and activity counts."""
    try:
        rows = await list_clients_with_counts(db, status=status, search=search)
    except Exception as e:
        logger.exception("Admin client list error: %s", str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch clients")

    clients = [
        AdminClientSummary(
            id=str(client.id),
            unique_client_id=client.unique_client_id,
            company_name=client.company_name,
            industry=client.industry,
            email=client.user.email,
            status=client.status,
            onboarding_completed=bool(client.onboarding_completed),
            onboarding_completed_at=client.onboarding_completed_at,
            monthly_budget_range=client.monthly_budget_range,
            created_at=client.created_at,
            last_login=client.user.last_login,
            link_count=link_count,
            activity_count=activity_count,
            website_url=client.website_url,
        )
        for client, link_count, activity_count in rows
    ]
    return AdminClientListResponse(clients=clients, total=len(clients))
