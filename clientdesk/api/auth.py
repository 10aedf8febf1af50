"""
Dashboard auth - login endpoint and the session dependencies used by every
authenticated route.

A session is a JWT bearer token carrying {user_id, role}. Missing or invalid
tokens mean "no session" (401); a valid token with the wrong role is 403.
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import jwt
from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from clientdesk.config import get_settings
from clientdesk.database import get_db
from clientdesk.models.user import ROLE_ADMIN, ROLE_CLIENT
from clientdesk.schemas.api_responses import LoginRequest, LoginResponse
from clientdesk.services.clients import get_user_by_email
from clientdesk.utils.auth import create_access_token, decode_access_token, verify_password
from clientdesk.utils.logging import mask_email

logger = logging.getLogger(__name__)
router = APIRouter(tags=["auth"])
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class SessionUser:
    user_id: uuid.UUID
    role: str


# === RATE LIMITING ===

async def _check_auth_rate_limit(
    action: str,
    identifier: str,
    max_attempts: int = 5,
    window_seconds: int = 900,
) -> None:
    """Redis-based rate limiter for auth endpoints."""
    try:
        from clientdesk.utils.redis import get_redis
        redis = await get_redis()
        key = f"clientdesk:rate:{action}:{identifier}"
        count = await redis.incr(key)
        if count == 1:
            await redis.expire(key, window_seconds)
        if count > max_attempts:
            raise HTTPException(
                status_code=429,
                detail="Too many attempts. Please try again later.",
                headers={"Retry-After": str(window_seconds)},
            )
    except HTTPException:
        raise
    except Exception as e:
        # Fail open - don't block auth if Redis is down, but log it
        logger.warning("Rate limiting unavailable (Redis error): %s", str(e))


# === LOGIN ===

@router.post("/api/v1/auth/login", response_model=LoginResponse)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """Authenticate a dashboard user and return a session token."""
    email = payload.email.strip().lower()
    await _check_auth_rate_limit("login", email)

    user = await get_user_by_email(db, email)
    if not user or not user.is_active or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    settings = get_settings()
    token = create_access_token(
        user.id, user.role, settings.jwt_signing_key, settings.dashboard_jwt_expiry_hours,
    )
    user.last_login = datetime.now(timezone.utc)
    await db.commit()

    logger.info("Login: %s (%s)", mask_email(email), user.role, extra={"user_id": str(user.id)})
    return LoginResponse(token=token, user_id=str(user.id), role=user.role)


# === SESSION DEPENDENCIES ===

async def get_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[SessionUser]:
    """Resolve the bearer token to a session, or None when absent/invalid."""
    if credentials is None or not credentials.credentials:
        return None

    settings = get_settings()
    try:
        claims = decode_access_token(credentials.credentials, settings.jwt_signing_key)
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired session token")
        return None
    except jwt.InvalidTokenError:
        logger.info("Rejected invalid session token")
        return None

    try:
        user_id = uuid.UUID(claims.get("user_id", ""))
    except (ValueError, AttributeError, TypeError):
        return None
    role = claims.get("role")
    if not role:
        return None
    return SessionUser(user_id=user_id, role=role)


def require_role(role: str):
    """Dependency factory: 401 without a session, 403 for any other role."""

    async def _require(session: Optional[SessionUser] = Depends(get_session)) -> SessionUser:
        if session is None:
            raise HTTPException(status_code=401, detail="Unauthorized")
        if session.role != role:
            detail = "Forbidden - Admin access required" if role == ROLE_ADMIN else "Forbidden"
            raise HTTPException(status_code=403, detail=detail)
        return session

    return _require


get_current_admin = require_role(ROLE_ADMIN)
get_current_client = require_role(ROLE_CLIENT)
