"""
Webhook log - audit trail of every exchange with the automation system.
One row per outbound handoff attempt and per inbound callback.
Append-only: rows are never updated or deleted.
"""
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Text
from sqlalchemy.dialects.postgresql import UUID, JSONB
from clientdesk.database import Base

DIRECTION_OUTBOUND = "outbound"
DIRECTION_INBOUND = "inbound"

TYPE_ONBOARDING_COMPLETE = "onboarding_complete"
TYPE_LINKS_GENERATED = "links_generated"

STATUS_SUCCESS = "success"
STATUS_FAILED = "failed"


class WebhookLog(Base):
    __tablename__ = "webhook_logs"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # No FK: failed callbacks may reference clients that do not exist.
    client_id = Column(UUID(as_uuid=True), nullable=True, index=True)
    unique_client_id = Column(String(20), nullable=True, index=True)
    direction = Column(String(10), nullable=False)
    webhook_type = Column(String(50), nullable=False, index=True)
    payload = Column(JSONB, nullable=False)
    status = Column(String(20), nullable=False)
    error_message = Column(Text, nullable=True)
    correlation_id = Column(String(64), nullable=True, index=True)
    created_at = Column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False
    )
