"""
Client model - a marketing-services customer created by onboarding.
Profile answers are stored as columns grouped by onboarding step; multi-select
answers are JSONB lists.
"""
import uuid
from datetime import datetime, timezone
from typing import Optional
from sqlalchemy import String, Text, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship
from clientdesk.database import Base

STATUS_PENDING = "pending"
STATUS_ACTIVE = "active"


class Client(Base):
    __tablename__ = "clients"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), unique=True, nullable=False
    )
    # External correlation key shared with the automation system. Never changes.
    unique_client_id: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=STATUS_PENDING
    )  # pending, active, paused, churned

    # Step 1: Business fundamentals
    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    industry: Mapped[Optional[str]] = mapped_column(String(100))
    website_url: Mapped[Optional[str]] = mapped_column(String(500))
    company_description: Mapped[Optional[str]] = mapped_column(Text)
    employee_count: Mapped[Optional[str]] = mapped_column(String(50))
    business_model: Mapped[Optional[str]] = mapped_column(String(50))  # b2b, b2c, both

    # Step 2: Marketing state
    worked_with_agency: Mapped[Optional[str]] = mapped_column(String(30))
    current_channels: Mapped[Optional[list]] = mapped_column(JSONB)
    marketing_feedback: Mapped[Optional[str]] = mapped_column(Text)
    primary_challenges: Mapped[Optional[str]] = mapped_column(Text)

    # Step 3: Analytics & tracking
    has_google_analytics: Mapped[Optional[str]] = mapped_column(String(30))
    has_facebook_pixel: Mapped[Optional[str]] = mapped_column(String(30))
    tracking_tools: Mapped[Optional[list]] = mapped_column(JSONB)
    can_provide_analytics_access: Mapped[Optional[str]] = mapped_column(String(30))
    analytics_notes: Mapped[Optional[str]] = mapped_column(Text)

    # Step 4: Social media & platforms
    social_platforms: Mapped[Optional[list]] = mapped_column(JSONB)
    has_fb_business_manager: Mapped[Optional[str]] = mapped_column(String(30))
    has_google_ads: Mapped[Optional[str]] = mapped_column(String(30))

    # Step 5: Goals & objectives
    primary_goal: Mapped[str] = mapped_column(String(255), nullable=False)
    success_definition: Mapped[Optional[str]] = mapped_column(Text)
    key_metrics: Mapped[Optional[list]] = mapped_column(JSONB)
    revenue_target: Mapped[Optional[str]] = mapped_column(String(100))
    target_cpa: Mapped[Optional[str]] = mapped_column(String(50))
    target_roas: Mapped[Optional[str]] = mapped_column(String(50))

    # Step 6: Audience & competitors
    ideal_customer_profile: Mapped[str] = mapped_column(Text, nullable=False)
    geographic_targeting: Mapped[Optional[str]] = mapped_column(Text)
    age_range: Mapped[Optional[str]] = mapped_column(String(50))
    gender_targeting: Mapped[Optional[str]] = mapped_column(String(30))
    competitors: Mapped[Optional[str]] = mapped_column(Text)
    competitor_strengths: Mapped[Optional[str]] = mapped_column(Text)

    # Step 7: Budget & resources
    monthly_budget_range: Mapped[str] = mapped_column(String(50), nullable=False)
    has_creative_assets: Mapped[Optional[str]] = mapped_column(String(30))
    has_marketing_contact: Mapped[Optional[str]] = mapped_column(String(30))
    marketing_contact_name: Mapped[Optional[str]] = mapped_column(String(100))
    marketing_contact_email: Mapped[Optional[str]] = mapped_column(String(255))

    # Onboarding
    onboarding_completed: Mapped[bool] = mapped_column(Boolean, default=False)
    onboarding_completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True)
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    user: Mapped["User"] = relationship(back_populates="client", lazy="joined")
    links: Mapped[list["ClientLink"]] = relationship(back_populates="client")

    __table_args__ = (
        Index("ix_clients_status", "status"),
        Index("ix_clients_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Client {self.company_name} ({self.unique_client_id})>"
