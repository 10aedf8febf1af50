"""
API router - aggregates all route modules.
"""
from fastapi import APIRouter
from clientdesk.api.auth import router as auth_router
from clientdesk.api.onboarding import router as onboarding_router
from clientdesk.api.webhooks import router as webhooks_router
from clientdesk.api.client_dashboard import router as client_dashboard_router
from clientdesk.api.admin import router as admin_router
from clientdesk.api.health import router as health_router

api_router = APIRouter()
api_router.include_router(auth_router)
api_router.include_router(onboarding_router)
api_router.include_router(webhooks_router)
api_router.include_router(client_dashboard_router)
api_router.include_router(admin_router)
api_router.include_router(health_router)
