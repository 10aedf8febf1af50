"""
Client directory - lookups and lifecycle changes for client records.
"""
import logging
import uuid
from typing import Optional

from sqlalchemy import select, or_, func, desc
from sqlalchemy.ext.asyncio import AsyncSession

from clientdesk.models.activity_log import ActivityLog
from clientdesk.models.client import Client, STATUS_ACTIVE
from clientdesk.models.client_link import ClientLink
from clientdesk.models.user import User
from clientdesk.utils.auth import generate_unique_client_id

logger = logging.getLogger(__name__)

MAX_ID_ATTEMPTS = 5


async def resolve_client(
    db: AsyncSession,
    client_id: Optional[str] = None,
    unique_client_id: Optional[str] = None,
) -> Optional[Client]:
    """
    Find a client by internal id OR unique client identifier.

    Either key may be missing. A client_id that is not a UUID cannot match
    by id but the unique identifier is still tried. Returns the first match.
    """
    conditions = []
    if client_id:
        try:
            conditions.append(Client.id == uuid.UUID(str(client_id)))
        except ValueError:
            logger.info("Ignoring non-UUID client id in lookup: %s", str(client_id)[:40])
    if unique_client_id:
        conditions.append(Client.unique_client_id == unique_client_id)
    if not conditions:
        return None

    result = await db.execute(select(Client).where(or_(*conditions)).limit(1))
    return result.scalars().first()


async def get_client_for_user(db: AsyncSession, user_id: uuid.UUID) -> Optional[Client]:
    result = await db.execute(select(Client).where(Client.user_id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email.strip().lower()))
    return result.scalar_one_or_none()


async def allocate_unique_client_id(db: AsyncSession) -> str:
    """Generate a client code that is not already taken."""
    for _ in range(MAX_ID_ATTEMPTS):
        candidate = generate_unique_client_id()
        existing = await db.execute(
            select(Client.id).where(Client.unique_client_id == candidate).limit(1)
        )
        if existing.scalar_one_or_none() is None:
            return candidate
        logger.warning("Unique client id collision on %s, regenerating", candidate)
    raise RuntimeError("Could not allocate a unique client id")


def activate(client: Client) -> None:
    """Mark a client active. Re-activating an active client is a no-op."""
    if client.status != STATUS_ACTIVE:
        logger.info(
            "Client %s: %s -> %s", client.unique_client_id, client.status, STATUS_ACTIVE,
            extra={"client_id": str(client.id)},
        )
    client.status = STATUS_ACTIVE


async def list_links(db: AsyncSession, client_id: uuid.UUID) -> list[ClientLink]:
    result = await db.execute(
        select(ClientLink)
        .where(ClientLink.client_id == client_id)
        .order_by(desc(ClientLink.created_at))
    )
    return list(result.scalars().all())


async def list_clients_with_counts(
    db: AsyncSession,
    status: Optional[str] = None,
    search: Optional[str] = None,
) -> list[tuple[Client, int, int]]:
    """All clients newest first, each with (link_count, activity_count)."""
    link_counts = (
        select(ClientLink.client_id, func.count(ClientLink.id).label("n"))
        .group_by(ClientLink.client_id)
        .subquery()
    )
    activity_counts = (
        select(ActivityLog.client_id, func.count(ActivityLog.id).label("n"))
        .group_by(ActivityLog.client_id)
        .subquery()
    )

    query = (
        select(
            Client,
            func.coalesce(link_counts.c.n, 0),
            func.coalesce(activity_counts.c.n, 0),
        )
        .outerjoin(link_counts, link_counts.c.client_id == Client.id)
        .outerjoin(activity_counts, activity_counts.c.client_id == Client.id)
        .order_by(desc(Client.created_at))
    )
    if status:
        query = query.where(Client.status == status)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.where(
            or_(
                Client.company_name.ilike(pattern),
                Client.unique_client_id.ilike(pattern),
            )
        )

    result = await db.execute(query)
    return [(row[0], int(row[1]), int(row[2])) for row in result.all()]
