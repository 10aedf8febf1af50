"""
Automation handoff - tells the external workflow engine a client finished onboarding.

Single attempt, no retry. Every attempt is recorded in webhook_logs, which is
the only durable trace of the handoff. The engine replies later through
POST /api/v1/webhooks/automation/callback.
"""
import asyncio
import logging

import httpx

from clientdesk.models.client import Client
from clientdesk.models.webhook_log import (
    DIRECTION_OUTBOUND,
    TYPE_ONBOARDING_COMPLETE,
    STATUS_SUCCESS,
    STATUS_FAILED,
)
from clientdesk.schemas.onboarding import (
    AnalyticsInfo,
    Audience,
    Budget,
    BusinessInfo,
    Goals,
    MarketingState,
    OnboardingData,
    OnboardingHandoff,
    SocialMedia,
)
from clientdesk.services.audit import write_webhook_log
from clientdesk.utils import background

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


def _pick(client: Client, model: type) -> dict:
    return {name: getattr(client, name) for name in model.model_fields}


def build_onboarding_handoff(client: Client, email: str) -> dict:
    """Regroup a freshly onboarded client's answers by onboarding step."""
    handoff = OnboardingHandoff(
        unique_client_id=client.unique_client_id,
        client_id=str(client.id),
        email=email,
        company_name=client.company_name,
        industry=client.industry,
        website_url=client.website_url,
        onboarding_data=OnboardingData(
            business_info=BusinessInfo(**_pick(client, BusinessInfo)),
            marketing_state=MarketingState(**_pick(client, MarketingState)),
            analytics=AnalyticsInfo(**_pick(client, AnalyticsInfo)),
            social_media=SocialMedia(**_pick(client, SocialMedia)),
            goals=Goals(**_pick(client, Goals)),
            audience=Audience(**_pick(client, Audience)),
            budget=Budget(**_pick(client, Budget)),
        ),
    )
    return handoff.to_payload()

def _describe_error(exc: Exception, timeout: float) -> str:
    if isinstance(exc, httpx.TimeoutException):
        return f"Timed out: {exc}" if str(exc) else "Timed out"
    if isinstance(exc, TimeoutError):
        return f"Timed out after {timeout:g}s"
    if isinstance(exc, httpx.HTTPStatusError):
        return f"HTTP {exc.response.status_code} from automation endpoint"
    return str(exc) or exc.__class__.__name__


async def send_onboarding_handoff(
    webhook_url: str,
    payload: dict,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> None:
    """
    POST the handoff payload once and record the outcome.

    `timeout` bounds the whole exchange, not each phase. Raises on network
    errors, timeouts and non-2xx responses, after the failure has been
    written to the audit log.
    """
    log_fields = {
        "direction": DIRECTION_OUTBOUND,
        "webhook_type": TYPE_ONBOARDING_COMPLETE,
        "payload": payload,
        "client_id": payload.get("clientId"),
        "unique_client_id": payload.get("uniqueClientId"),
    }
    try:
        async with asyncio.timeout(timeout):
            async with httpx.AsyncClient(timeout=timeout) as client:
                response = await client.post(webhook_url, json=payload)
                response.raise_for_status()
    except Exception as e:
        error = _describe_error(e, timeout)
        logger.warning(
            "Onboarding handoff failed for %s: %s",
            payload.get("uniqueClientId"), error,
            extra={"direction": DIRECTION_OUTBOUND, "webhook_type": TYPE_ONBOARDING_COMPLETE},
        )
        await write_webhook_log(status=STATUS_FAILED, error_message=error, **log_fields)
        raise

    await write_webhook_log(status=STATUS_SUCCESS, **log_fields)
    logger.info(
        "Onboarding handoff delivered for %s (HTTP %s)",
        payload.get("uniqueClientId"), response.status_code,
        extra={"direction": DIRECTION_OUTBOUND, "webhook_type": TYPE_ONBOARDING_COMPLETE},
    )


def dispatch_onboarding_handoff(
    webhook_url: str,
    payload: dict,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> None:
    """Fire-and-forget: schedule the handoff and return immediately."""
    background.spawn(
        send_onboarding_handoff(webhook_url, payload, timeout=timeout),
        name=f"onboarding_handoff:{payload.get('uniqueClientId')}",
    )
