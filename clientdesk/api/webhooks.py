"""
Automation callback - the workflow engine posts generated links here.

Processing order:
1. Shared secret check (skipped when AUTOMATION_CALLBACK_SECRET is unset)
2. Payload validation
3. Client lookup by id or unique client id
4. Links + activation + activity + audit committed together
"""
import hmac
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from clientdesk.config import get_settings
from clientdesk.database import get_db
from clientdesk.models.activity_log import ActivityLog
from clientdesk.models.client_link import ClientLink
from clientdesk.models.webhook_log import (
    DIRECTION_INBOUND,
    TYPE_LINKS_GENERATED,
    STATUS_SUCCESS,
    STATUS_FAILED,
)
from clientdesk.schemas.callback import AutomationCallback, CallbackResponse
from clientdesk.services.audit import record_webhook_log
from clientdesk.services.clients import activate, resolve_client
from clientdesk.utils.validation import describe_validation_error

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/webhooks", tags=["webhooks"])


def _secret_matches(expected: str, provided: Optional[object]) -> bool:
    if not isinstance(provided, str):
        return False
    return hmac.compare_digest(expected.encode(), provided.encode())


async def _record_failure(db: AsyncSession, raw_payload: dict, error: Exception) -> None:
    """Best-effort failed audit row. Never raises."""
    try:
        await db.rollback()
        await record_webhook_log(
            db,
            direction=DIRECTION_INBOUND,
            webhook_type=TYPE_LINKS_GENERATED,
            payload=raw_payload,
            status=STATUS_FAILED,
            client_id=raw_payload.get("clientId"),
            unique_client_id=raw_payload.get("uniqueClientId"),
            error_message=str(error) or error.__class__.__name__,
        )
        await db.commit()
    except Exception as log_error:
        logger.error("Failed to log callback error: %s", str(log_error))


@router.post("/automation/callback", response_model=CallbackResponse)
async def automation_callback(
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """Attach generated resource links to a client and activate it."""
    try:
        raw_payload = await request.json()
    except Exception:
        raise HTTPException(status_code=400, detail="Invalid JSON body")
    if not isinstance(raw_payload, dict):
        raise HTTPException(status_code=400, detail="Invalid JSON body")

    expected_secret = get_settings().automation_callback_secret
    if expected_secret and not _secret_matches(expected_secret, raw_payload.get("secret")):
        client_ip = request.client.host if request.client else "unknown"
        logger.warning("Invalid automation callback secret from %s", client_ip)
        raise HTTPException(status_code=401, detail="Invalid secret key")

    try:
        payload = AutomationCallback.model_validate(raw_payload)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=describe_validation_error(e))

    # Never echo the shared secret into the audit trail
    audit_payload = {k: v for k, v in raw_payload.items() if k != "secret"}

    try:
        client = await resolve_client(db, payload.client_id, payload.unique_client_id)
        if not client:
            raise HTTPException(status_code=404, detail="Client not found")

        links = [
            ClientLink(
                client_id=client.id,
                link_type=link.link_type,
                title=link.title,
                url=link.url,
                description=link.description or None,
                icon=link.icon or None,
                generated_by_automation=True,
                automation_workflow_id=link.workflow_id or None,
            )
            for link in payload.links
        ]
        db.add_all(links)

        activate(client)

        db.add(ActivityLog(
            client_id=client.id,
            activity_type=TYPE_LINKS_GENERATED,
            activity_description=f"Generated {len(links)} resource links via automation",
            details={
                "linkCount": len(links),
                "linkTypes": [link.link_type for link in links],
            },
        ))
        await record_webhook_log(
            db,
            direction=DIRECTION_INBOUND,
            webhook_type=TYPE_LINKS_GENERATED,
            payload=audit_payload,
            status=STATUS_SUCCESS,
            client_id=client.id,
            unique_client_id=client.unique_client_id,
        )
        await db.commit()
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Automation callback error: %s", str(e))
        await _record_failure(db, audit_payload, e)
        raise HTTPException(status_code=500, detail="Failed to process callback")

    logger.info(
        "Callback stored %d links for %s", len(links), client.unique_client_id,
        extra={"client_id": str(client.id), "direction": DIRECTION_INBOUND,
               "webhook_type": TYPE_LINKS_GENERATED},
    )
    return CallbackResponse(links_created=len(links), client_id=str(client.id))
