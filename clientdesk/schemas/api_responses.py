"""
API response schemas for the dashboard, admin and auth endpoints.
Field names are camelCase on the wire to match the web frontend.
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(_CamelModel):
    token: str
    user_id: str
    role: str


class AdminClientSummary(_CamelModel):
    id: str
    unique_client_id: str
    company_name: str
    industry: Optional[str] = None
    email: str
    status: str
    onboarding_completed: bool
    onboarding_completed_at: Optional[datetime] = None
    monthly_budget_range: Optional[str] = None
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None
    link_count: int = 0
    activity_count: int = 0
    website_url: Optional[str] = None


class AdminClientListResponse(_CamelModel):
    clients: list[AdminClientSummary]
    total: int


class LinkSummary(_CamelModel):
    id: str
    link_type: str
    title: str
    url: str
    description: Optional[str] = None
    icon: Optional[str] = None
    generated_by_automation: bool = False
    created_at: Optional[datetime] = None


class DashboardClient(_CamelModel):
    id: str
    unique_client_id: str
    company_name: str
    industry: Optional[str] = None
    status: str
    onboarding_completed: bool
    onboarding_completed_at: Optional[datetime] = None
    email: str
    created_at: Optional[datetime] = None


class LinksByType(_CamelModel):
    documents: list[LinkSummary] = Field(default_factory=list)
    projects: list[LinkSummary] = Field(default_factory=list)
    data: list[LinkSummary] = Field(default_factory=list)
    other: list[LinkSummary] = Field(default_factory=list)


class DashboardStats(_CamelModel):
    total_links: int = 0
    document_count: int = 0
    project_count: int = 0
    data_count: int = 0


class DashboardResponse(_CamelModel):
    client: DashboardClient
    links: LinksByType
    stats: DashboardStats
