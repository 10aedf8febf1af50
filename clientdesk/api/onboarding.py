"""
Onboarding intake - public endpoint behind the multi-step signup form.

Creates the user and the client profile in one transaction, then hands the
answers to the automation engine in the background.
"""
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from clientdesk.config import get_settings
from clientdesk.database import get_db
from clientdesk.models.client import Client, STATUS_PENDING
from clientdesk.models.user import User, ROLE_CLIENT
from clientdesk.schemas.onboarding import OnboardingSubmission, OnboardingResponse
from clientdesk.services.automation import build_onboarding_handoff, dispatch_onboarding_handoff
from clientdesk.services.clients import allocate_unique_client_id, get_user_by_email
from clientdesk.utils.auth import hash_password
from clientdesk.utils.logging import mask_email

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/onboarding", tags=["onboarding"])


@router.post("/submit", response_model=OnboardingResponse)
async def submit_onboarding(
    submission: OnboardingSubmission,
    db: AsyncSession = Depends(get_db),
):
    """Create a client account from a completed onboarding form."""
    if await get_user_by_email(db, submission.email):
        raise HTTPException(status_code=409, detail="User with this email already exists")

    try:
        password_hash = hash_password(submission.password)
        unique_client_id = await allocate_unique_client_id(db)

        user = User(email=submission.email, password_hash=password_hash, role=ROLE_CLIENT)
        client = Client(
            user=user,
            unique_client_id=unique_client_id,
            status=STATUS_PENDING,
            onboarding_completed=True,
            onboarding_completed_at=datetime.now(timezone.utc),
            **submission.profile_fields(),
        )
        db.add_all([user, client])
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        # Lost the race against a concurrent submission with the same email
        if await get_user_by_email(db, submission.email):
            raise HTTPException(status_code=409, detail="User with this email already exists")
        logger.error("Onboarding insert rejected: %s", str(e.orig))
        raise HTTPException(status_code=500, detail="Failed to process onboarding")
    except Exception as e:
        logger.exception("Onboarding error: %s", str(e))
        await db.rollback()
        raise HTTPException(status_code=500, detail="Failed to process onboarding")

    logger.info(
        "Onboarding completed: %s (%s) %s",
        client.company_name, mask_email(submission.email), unique_client_id,
        extra={"client_id": str(client.id), "unique_client_id": unique_client_id},
    )

    settings = get_settings()
    if settings.automation_webhook_url:
        dispatch_onboarding_handoff(
            settings.automation_webhook_url,
            build_onboarding_handoff(client, submission.email),
            timeout=settings.automation_timeout_seconds,
        )
    else:
        logger.debug("AUTOMATION_WEBHOOK_URL not set - skipping handoff")

    return OnboardingResponse(
        user_id=str(user.id),
        client_id=str(client.id),
        unique_client_id=unique_client_id,
    )
