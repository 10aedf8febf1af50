"""
Database models - import all models here so Alembic can discover them.
"""
from clientdesk.models.user import User
from clientdesk.models.client import Client
from clientdesk.models.client_link import ClientLink
from clientdesk.models.webhook_log import WebhookLog
from clientdesk.models.activity_log import ActivityLog

__all__ = [
    "User",
    "Client",
    "ClientLink",
    "WebhookLog",
    "ActivityLog",
]
