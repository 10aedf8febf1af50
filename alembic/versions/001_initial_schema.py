"""Initial schema - users, clients, client links, webhook and activity logs.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Users
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="client"),
        sa.Column("is_active", sa.Boolean, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("last_login", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_users_role", "users", ["role"])

    # Clients
    op.create_table(
        "clients",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False, unique=True),
        sa.Column("unique_client_id", sa.String(20), nullable=False, unique=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        # Business fundamentals
        sa.Column("company_name", sa.String(255), nullable=False),
        sa.Column("industry", sa.String(100)),
        sa.Column("website_url", sa.String(500)),
        sa.Column("company_description", sa.Text),
        sa.Column("employee_count", sa.String(50)),
        sa.Column("business_model", sa.String(50)),
        # Marketing state
        sa.Column("worked_with_agency", sa.String(30)),
        sa.Column("current_channels", postgresql.JSONB),
        sa.Column("marketing_feedback", sa.Text),
        sa.Column("primary_challenges", sa.Text),
        # Analytics
        sa.Column("has_google_analytics", sa.String(30)),
        sa.Column("has_facebook_pixel", sa.String(30)),
        sa.Column("tracking_tools", postgresql.JSONB),
        sa.Column("can_provide_analytics_access", sa.String(30)),
        sa.Column("analytics_notes", sa.Text),
        # Social
        sa.Column("social_platforms", postgresql.JSONB),
        sa.Column("has_fb_business_manager", sa.String(30)),
        sa.Column("has_google_ads", sa.String(30)),
        # Goals
        sa.Column("primary_goal", sa.String(255), nullable=False),
        sa.Column("success_definition", sa.Text),
        sa.Column("key_metrics", postgresql.JSONB),
        sa.Column("revenue_target", sa.String(100)),
        sa.Column("target_cpa", sa.String(50)),
        sa.Column("target_roas", sa.String(50)),
        # Audience
        sa.Column("ideal_customer_profile", sa.Text, nullable=False),
        sa.Column("geographic_targeting", sa.Text),
        sa.Column("age_range", sa.String(50)),
        sa.Column("gender_targeting", sa.String(30)),
        sa.Column("competitors", sa.Text),
        sa.Column("competitor_strengths", sa.Text),
        # Budget
        sa.Column("monthly_budget_range", sa.String(50), nullable=False),
        sa.Column("has_creative_assets", sa.String(30)),
        sa.Column("has_marketing_contact", sa.String(30)),
        sa.Column("marketing_contact_name", sa.String(100)),
        sa.Column("marketing_contact_email", sa.String(255)),
        # Onboarding
        sa.Column("onboarding_completed", sa.Boolean, server_default=sa.false()),
        sa.Column("onboarding_completed_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_clients_status", "clients", ["status"])
    op.create_index("ix_clients_created_at", "clients", ["created_at"])

    # Client links
    op.create_table(
        "client_links",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("client_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("clients.id"), nullable=False),
        sa.Column("link_type", sa.String(30), nullable=False, server_default="other"),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("url", sa.Text, nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("icon", sa.String(50)),
        sa.Column("generated_by_automation", sa.Boolean, server_default=sa.false()),
        sa.Column("automation_workflow_id", sa.String(100)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_client_links_client_id", "client_links", ["client_id"])

    # Webhook logs (append-only audit trail)
    op.create_table(
        "webhook_logs",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("client_id", postgresql.UUID(as_uuid=True)),
        sa.Column("unique_client_id", sa.String(20)),
        sa.Column("direction", sa.String(10), nullable=False),
        sa.Column("webhook_type", sa.String(50), nullable=False),
        sa.Column("payload", postgresql.JSONB, nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("error_message", sa.Text),
        sa.Column("correlation_id", sa.String(64)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_webhook_logs_client_id", "webhook_logs", ["client_id"])
    op.create_index("ix_webhook_logs_unique_client_id", "webhook_logs", ["unique_client_id"])
    op.create_index("ix_webhook_logs_webhook_type", "webhook_logs", ["webhook_type"])
    op.create_index("ix_webhook_logs_correlation_id", "webhook_logs", ["correlation_id"])

    # Activity logs
    op.create_table(
        "activity_logs",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("client_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("clients.id"), nullable=False),
        sa.Column("activity_type", sa.String(100), nullable=False),
        sa.Column("activity_description", sa.Text),
        sa.Column("metadata", postgresql.JSONB),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_activity_logs_client_id", "activity_logs", ["client_id"])
    op.create_index("ix_activity_logs_created_at", "activity_logs", ["created_at"])


def downgrade() -> None:
    op.drop_table("activity_logs")
    op.drop_table("webhook_logs")
    op.drop_table("client_links")
    op.drop_table("clients")
    op.drop_table("users")
