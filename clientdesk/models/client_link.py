"""
Client link model - a resource (doc, board, base) attached to a client.
Rows are created by the automation callback and never edited afterwards.
"""
import uuid
from datetime import datetime, timezone
from typing import Optional
from sqlalchemy import String, Text, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from clientdesk.database import Base

LINK_TYPES = ("google_doc", "clickup", "airtable", "other")


class ClientLink(Base):
    __tablename__ = "client_links"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    client_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("clients.id"), nullable=False
    )
    link_type: Mapped[str] = mapped_column(
        String(30), nullable=False, default="other"
    )  # google_doc, clickup, airtable, other
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    icon: Mapped[Optional[str]] = mapped_column(String(50))

    # Provenance
    generated_by_automation: Mapped[bool] = mapped_column(Boolean, default=False)
    automation_workflow_id: Mapped[Optional[str]] = mapped_column(String(100))

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    client: Mapped["Client"] = relationship(back_populates="links")

    __table_args__ = (
        Index("ix_client_links_client_id", "client_id"),
    )

    def __repr__(self) -> str:
        return f"<ClientLink {self.link_type} {self.title}>"
