"""
Test configuration and fixtures.
Uses a throwaway SQLite file per test for fast tests. Mocks all external services.
"""
import os

# Settings are required at import time (clientdesk.main builds the app on import)
os.environ.setdefault("APP_SECRET_KEY", "test-app-secret-key-0123456789abcdef")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.dialects.postgresql import JSONB

from clientdesk.database import Base
from clientdesk.models import Client, User

JWT_SECRET = "k7$Qp2!vXz9@Lm4#Rt8^Wn1&Yb6*Hc3d"  # >= 32 bytes for HS256


# Register JSONB as JSON for SQLite compatibility in tests
@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(type_, compiler, **kw):
    return "JSON"


@pytest.fixture
async def session_factory(tmp_path):
    """Session factory bound to a file-backed SQLite database.

    A file (not :memory:) so that separate sessions, like the ones background
    handoffs open, see the same data.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    yield factory
    await engine.dispose()


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def audit_sessions(session_factory):
    """Route audit writes made outside a request to the test database."""
    with patch("clientdesk.services.audit.async_session_factory", session_factory):
        yield session_factory


@pytest.fixture
def mock_redis():
    """Mock for async Redis - prevents real Redis calls in tests."""
    with patch("clientdesk.utils.redis.get_redis", new_callable=AsyncMock) as mock:
        redis_mock = AsyncMock()
        redis_mock.incr = AsyncMock(return_value=1)
        redis_mock.expire = AsyncMock(return_value=True)
        redis_mock.ping = AsyncMock(return_value=True)
        mock.return_value = redis_mock
        yield redis_mock


def make_settings(**overrides):
    """Build a mock Settings object."""
    defaults = {
        "app_env": "test",
        "app_base_url": "http://localhost:8000",
        "log_level": "WARNING",
        "cors_origins": [],
        "dashboard_jwt_secret": JWT_SECRET,
        "jwt_signing_key": JWT_SECRET,
        "dashboard_jwt_expiry_hours": 24,
        "automation_webhook_url": "",
        "automation_callback_secret": "",
        "automation_timeout_seconds": 10.0,
        "sentry_dsn": "",
    }
    defaults.update(overrides)
    settings = MagicMock()
    for k, v in defaults.items():
        setattr(settings, k, v)
    return settings


def make_request(json_body=None, json_error: Exception | None = None, client_host: str = "127.0.0.1"):
    """Build a mock FastAPI Request whose json() returns *json_body*."""
    req = MagicMock()
    req.client = MagicMock()
    req.client.host = client_host
    if json_error is not None:
        req.json = AsyncMock(side_effect=json_error)
    else:
        req.json = AsyncMock(return_value=json_body)
    return req


async def create_client(
    db,
    email: str | None = None,
    unique_client_id: str | None = None,
    status: str = "pending",
    **fields,
) -> Client:
    """Insert a user + client pair with the minimum required fields."""
    user = User(
        id=uuid.uuid4(),
        email=email or f"owner+{uuid.uuid4().hex[:6]}@example.com",
        password_hash="not-a-real-hash",
        role="client",
    )
    defaults = {
        "id": uuid.uuid4(),
        "unique_client_id": unique_client_id or f"CL-{uuid.uuid4().hex[:6].upper()}",
        "status": status,
        "company_name": "Acme Roofing",
        "industry": "home_services",
        "primary_goal": "More qualified leads",
        "ideal_customer_profile": "Homeowners in Austin, 35-65",
        "monthly_budget_range": "5k-10k",
        "onboarding_completed": True,
        "onboarding_completed_at": datetime.now(timezone.utc),
        "created_at": datetime.now(timezone.utc),
    }
    defaults.update(fields)
    client = Client(user=user, **defaults)
    db.add_all([user, client])
    await db.commit()
    return client


@pytest.fixture
def sample_submission():
    """A complete onboarding form as the frontend posts it."""
    return {
        "email": "Jane@AcmeRoofing.com",
        "password": "correct-horse-battery",
        "companyName": "Acme Roofing",
        "industry": "home_services",
        "websiteUrl": "https://acmeroofing.example",
        "companyDescription": "Residential roofing in central Texas",
        "employeeCount": "11-50",
        "businessModel": "b2c",
        "workedWithAgency": "yes",
        "currentChannels": ["google_ads", "facebook"],
        "marketingFeedback": "Leads were low quality",
        "primaryChallenges": "Cost per lead keeps rising",
        "hasGoogleAnalytics": True,
        "hasFacebookPixel": False,
        "trackingTools": ["ga4"],
        "canProvideAnalyticsAccess": "yes",
        "analyticsNotes": "",
        "socialPlatforms": ["facebook", "instagram"],
        "hasFbBusinessManager": "yes",
        "hasGoogleAds": "no",
        "primaryGoal": "More qualified leads",
        "successDefinition": "30 booked inspections a month",
        "keyMetrics": ["cpl", "booked_jobs"],
        "revenueTarget": "$2M",
        "targetCpa": "$80",
        "targetRoas": "4x",
        "idealCustomerProfile": "Homeowners in Austin, 35-65",
        "geographicTargeting": "Austin metro",
        "ageRange": "35-65",
        "genderTargeting": "all",
        "competitors": "Roof Co, Top Roofing",
        "competitorStrengths": "Reviews",
        "monthlyBudgetRange": "5k-10k",
        "hasCreativeAssets": "some",
        "hasMarketingContact": "yes",
        "marketingContactName": "Jane Doe",
        "marketingContactEmail": "jane@acmeroofing.example",
    }
