"""
Audit log writer - records every exchange with the automation system.
"""
import logging
import uuid
from typing import Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from clientdesk.database import async_session_factory
from clientdesk.models.webhook_log import WebhookLog
from clientdesk.utils.logging import get_correlation_id

logger = logging.getLogger(__name__)


def _as_uuid(value: Union[str, uuid.UUID, None]) -> Optional[uuid.UUID]:
    if value is None or isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def build_webhook_log(
    direction: str,
    webhook_type: str,
    payload: dict,
    status: str,
    client_id: Union[str, uuid.UUID, None] = None,
    unique_client_id: Optional[str] = None,
    error_message: Optional[str] = None,
) -> WebhookLog:
    """Build (but do not persist) an audit row. Unparseable client ids are dropped."""
    return WebhookLog(
        direction=direction,
        webhook_type=webhook_type,
        payload=payload,
        status=status,
        client_id=_as_uuid(client_id),
        unique_client_id=unique_client_id,
        error_message=error_message,
        correlation_id=get_correlation_id(),
    )


async def record_webhook_log(
    db: AsyncSession,
    direction: str,
    webhook_type: str,
    payload: dict,
    status: str,
    client_id: Union[str, uuid.UUID, None] = None,
    unique_client_id: Optional[str] = None,
    error_message: Optional[str] = None,
) -> WebhookLog:
    """Add an audit row to the caller's session. The caller owns the commit."""
    log = build_webhook_log(
        direction, webhook_type, payload, status,
        client_id=client_id, unique_client_id=unique_client_id,
        error_message=error_message,
    )
    db.add(log)
    await db.flush()
    return log


async def write_webhook_log(**fields) -> None:
    """Persist an audit row in its own session and commit immediately.

    Used from background tasks, where no request session exists.
    """
    async with async_session_factory() as db:
        db.add(build_webhook_log(**fields))
        await db.commit()
    logger.info(
        "Webhook log written: %s %s status=%s",
        fields.get("direction"), fields.get("webhook_type"), fields.get("status"),
        extra={"unique_client_id": fields.get("unique_client_id")},
    )
