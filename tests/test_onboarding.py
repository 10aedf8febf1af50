"""
Tests for clientdesk/api/onboarding.py and the intake schema.
"""
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from fastapi import HTTPException
from pydantic import ValidationError
from sqlalchemy import select, func

from clientdesk.api.onboarding import submit_onboarding
from clientdesk.models import Client, User, WebhookLog
from clientdesk.schemas.onboarding import OnboardingSubmission
from clientdesk.utils import background
from clientdesk.utils.auth import verify_password
from conftest import create_client, make_settings

SETTINGS_PATCH = "clientdesk.api.onboarding.get_settings"
WEBHOOK_URL = "https://automation.example/webhook/onboarding"


def _mock_http_client(post):
    client = MagicMock()
    client.post = post
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    return client


async def _submit(db, form: dict, **settings):
    with patch(SETTINGS_PATCH, return_value=make_settings(**settings)):
        return await submit_onboarding(OnboardingSubmission.model_validate(form), db=db)


class TestSubmission:
    async def test_creates_user_and_pending_client(self, db, sample_submission):
        result = await _submit(db, sample_submission)

        assert result.success is True
        assert result.unique_client_id.startswith("CL-")
        assert len(result.unique_client_id) == 9

        user = (await db.execute(select(User))).scalar_one()
        assert user.email == "jane@acmeroofing.com"
        assert user.role == "client"
        assert user.password_hash != sample_submission["password"]
        assert verify_password(sample_submission["password"], user.password_hash)
        assert str(user.id) == result.user_id

        client = (await db.execute(select(Client))).scalar_one()
        assert str(client.id) == result.client_id
        assert client.user_id == user.id
        assert client.status == "pending"
        assert client.onboarding_completed is True
        assert client.onboarding_completed_at is not None
        assert client.company_name == "Acme Roofing"
        assert client.current_channels == ["google_ads", "facebook"]
        assert client.has_google_analytics == "yes"
        assert client.has_facebook_pixel == "no"
        assert client.analytics_notes is None

    async def test_response_is_camel_case(self, db, sample_submission):
        result = await _submit(db, sample_submission)

        body = result.model_dump(by_alias=True)
        assert set(body) == {"success", "message", "userId", "clientId", "uniqueClientId"}

    async def test_duplicate_email_conflict(self, db, sample_submission):
        await create_client(db, email="jane@acmeroofing.com")

        with pytest.raises(HTTPException) as exc_info:
            await _submit(db, sample_submission)

        assert exc_info.value.status_code == 409
        assert await db.scalar(select(func.count()).select_from(User)) == 1
        assert await db.scalar(select(func.count()).select_from(Client)) == 1

    async def test_duplicate_email_is_case_insensitive(self, db, sample_submission):
        await _submit(db, sample_submission)
        sample_submission["email"] = "JANE@acmeroofing.COM"

        with pytest.raises(HTTPException) as exc_info:
            await _submit(db, sample_submission)

        assert exc_info.value.status_code == 409

    async def test_unique_id_collision_regenerates(self, db, sample_submission):
        await create_client(db, unique_client_id="CL-AAAAAA")

        with patch(
            "clientdesk.services.clients.generate_unique_client_id",
            side_effect=["CL-AAAAAA", "CL-BBBBBB"],
        ):
            result = await _submit(db, sample_submission)

        assert result.unique_client_id == "CL-BBBBBB"

    async def test_email_race_is_conflict(self, db, sample_submission):
        await create_client(db, email="jane@acmeroofing.com")

        # Pre-check misses the row a concurrent submission just committed
        with patch(
            "clientdesk.api.onboarding.get_user_by_email",
            AsyncMock(side_effect=[None, MagicMock()]),
        ):
            with pytest.raises(HTTPException) as exc_info:
                await _submit(db, sample_submission)

        assert exc_info.value.status_code == 409
        assert await db.scalar(select(func.count()).select_from(User)) == 1

    async def test_unique_id_race_is_not_an_email_conflict(self, db, sample_submission):
        await create_client(db, unique_client_id="CL-RACED1")

        with patch(
            "clientdesk.api.onboarding.allocate_unique_client_id",
            AsyncMock(return_value="CL-RACED1"),
        ):
            with pytest.raises(HTTPException) as exc_info:
                await _submit(db, sample_submission)

        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "Failed to process onboarding"
        assert await db.scalar(select(func.count()).select_from(User)) == 1
        assert await db.scalar(select(func.count()).select_from(Client)) == 1

    async def test_unexpected_error_is_route_specific_500(self, db, sample_submission):
        with patch(
            "clientdesk.api.onboarding.allocate_unique_client_id",
            AsyncMock(side_effect=RuntimeError("Could not allocate a unique client id")),
        ):
            with pytest.raises(HTTPException) as exc_info:
                await _submit(db, sample_submission)

        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "Failed to process onboarding"
        assert await db.scalar(select(func.count()).select_from(User)) == 0


class TestHandoff:
    async def test_no_webhook_url_skips_handoff(self, db, sample_submission, audit_sessions):
        with patch("clientdesk.api.onboarding.dispatch_onboarding_handoff") as dispatch:
            await _submit(db, sample_submission, automation_webhook_url="")

        dispatch.assert_not_called()
        assert await db.scalar(select(func.count()).select_from(WebhookLog)) == 0

    async def test_handoff_success_is_logged(self, db, sample_submission, audit_sessions):
        response = MagicMock(status_code=200)
        response.raise_for_status = MagicMock()
        response.json = MagicMock(return_value={"ok": True})
        post = AsyncMock(return_value=response)

        with patch("httpx.AsyncClient", return_value=_mock_http_client(post)):
            result = await _submit(db, sample_submission, automation_webhook_url=WEBHOOK_URL)
            await background.drain()

        post.assert_awaited_once()
        assert post.call_args.args[0] == WEBHOOK_URL
        sent = post.call_args.kwargs["json"]
        assert sent["uniqueClientId"] == result.unique_client_id
        assert sent["onboardingData"]["goals"]["primaryGoal"] == "More qualified leads"

        log = (await db.execute(select(WebhookLog))).scalar_one()
        assert log.direction == "outbound"
        assert log.webhook_type == "onboarding_complete"
        assert log.status == "success"
        assert log.unique_client_id == result.unique_client_id

    async def test_handoff_timeout_does_not_fail_submission(
        self, db, sample_submission, audit_sessions
    ):
        post = AsyncMock(side_effect=httpx.ReadTimeout("read timed out"))

        with patch("httpx.AsyncClient", return_value=_mock_http_client(post)):
            result = await _submit(db, sample_submission, automation_webhook_url=WEBHOOK_URL)
            await background.drain()

        assert result.success is True
        logs = (await db.execute(select(WebhookLog))).scalars().all()
        assert len(logs) == 1
        assert logs[0].status == "failed"
        assert logs[0].direction == "outbound"
        assert "Timed out" in logs[0].error_message

        client = (await db.execute(select(Client))).scalar_one()
        assert client.status == "pending"


class TestSchema:
    def test_missing_required_fields(self, sample_submission):
        del sample_submission["primaryGoal"]
        del sample_submission["monthlyBudgetRange"]

        with pytest.raises(ValidationError) as exc_info:
            OnboardingSubmission.model_validate(sample_submission)

        missing = {e["loc"][0] for e in exc_info.value.errors()}
        assert missing == {"primaryGoal", "monthlyBudgetRange"}

    def test_blank_required_field_rejected(self, sample_submission):
        sample_submission["companyName"] = "   "

        with pytest.raises(ValidationError):
            OnboardingSubmission.model_validate(sample_submission)

    def test_unknown_field_rejected(self, sample_submission):
        sample_submission["favouriteColour"] = "blue"

        with pytest.raises(ValidationError):
            OnboardingSubmission.model_validate(sample_submission)

    def test_short_password_rejected(self, sample_submission):
        sample_submission["password"] = "short"

        with pytest.raises(ValidationError):
            OnboardingSubmission.model_validate(sample_submission)

    def test_email_without_at_rejected(self, sample_submission):
        sample_submission["email"] = "jane.acmeroofing.com"

        with pytest.raises(ValidationError):
            OnboardingSubmission.model_validate(sample_submission)

    @pytest.mark.parametrize("field,column_width", [
        ("industry", 100),
        ("websiteUrl", 500),
        ("employeeCount", 50),
        ("businessModel", 50),
        ("workedWithAgency", 30),
        ("hasGoogleAnalytics", 30),
        ("hasFacebookPixel", 30),
        ("canProvideAnalyticsAccess", 30),
        ("hasFbBusinessManager", 30),
        ("hasGoogleAds", 30),
        ("revenueTarget", 100),
        ("targetCpa", 50),
        ("targetRoas", 50),
        ("ageRange", 50),
        ("genderTargeting", 30),
        ("hasCreativeAssets", 30),
        ("hasMarketingContact", 30),
        ("marketingContactName", 100),
        ("marketingContactEmail", 255),
    ])
    def test_values_wider_than_column_rejected(self, sample_submission, field, column_width):
        sample_submission[field] = "x" * column_width
        OnboardingSubmission.model_validate(sample_submission)

        sample_submission[field] = "x" * (column_width + 1)
        with pytest.raises(ValidationError) as exc_info:
            OnboardingSubmission.model_validate(sample_submission)

        assert field in {str(part) for e in exc_info.value.errors() for part in e["loc"]}

    def test_answers_normalized(self, sample_submission):
        sample_submission["hasGoogleAds"] = True
        sample_submission["hasCreativeAssets"] = ""

        form = OnboardingSubmission.model_validate(sample_submission)

        assert form.has_google_ads == "yes"
        assert form.has_facebook_pixel == "no"
        assert form.has_creative_assets is None
        assert form.worked_with_agency == "yes"

    def test_profile_fields_exclude_credentials(self, sample_submission):
        fields = OnboardingSubmission.model_validate(sample_submission).profile_fields()

        assert "email" not in fields
        assert "password" not in fields
        assert fields["company_name"] == "Acme Roofing"
