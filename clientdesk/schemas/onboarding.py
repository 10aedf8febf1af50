"""
Onboarding schemas - the public intake form and the handoff sent to automation.

The intake form is flat camelCase, mirroring the multi-step frontend. The
handoff regroups the same answers by step.
"""
from typing import Annotated, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator
from pydantic.alias_generators import to_camel

# Yes/no style answers. The form sends strings ("yes", "no", "not_sure") but
# older clients post booleans.
Answer = Optional[Union[bool, Annotated[str, StringConstraints(max_length=30)]]]


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class OnboardingSubmission(_CamelModel):
    """POST /api/v1/onboarding/submit body."""
    model_config = ConfigDict(extra="forbid")

    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=8, max_length=128)

    # Step 1: Business fundamentals
    company_name: str = Field(min_length=1, max_length=255)
    industry: Optional[str] = Field(default=None, max_length=100)
    website_url: Optional[str] = Field(default=None, max_length=500)
    company_description: Optional[str] = None
    employee_count: Optional[str] = Field(default=None, max_length=50)
    business_model: Optional[str] = Field(default=None, max_length=50)

    # Step 2: Marketing state
    worked_with_agency: Answer = None
    current_channels: Optional[list[str]] = None
    marketing_feedback: Optional[str] = None
    primary_challenges: Optional[str] = None

    # Step 3: Analytics & tracking
    has_google_analytics: Answer = None
    has_facebook_pixel: Answer = None
    tracking_tools: Optional[list[str]] = None
    can_provide_analytics_access: Answer = None
    analytics_notes: Optional[str] = None

    # Step 4: Social media & platforms
    social_platforms: Optional[list[str]] = None
    has_fb_business_manager: Answer = None
    has_google_ads: Answer = None

    # Step 5: Goals & objectives
    primary_goal: str = Field(min_length=1, max_length=255)
    success_definition: Optional[str] = None
    key_metrics: Optional[list[str]] = None
    revenue_target: Optional[str] = Field(default=None, max_length=100)
    target_cpa: Optional[str] = Field(default=None, max_length=50)
    target_roas: Optional[str] = Field(default=None, max_length=50)

    # Step 6: Audience & competitors
    ideal_customer_profile: str = Field(min_length=1)
    geographic_targeting: Optional[str] = None
    age_range: Optional[str] = Field(default=None, max_length=50)
    gender_targeting: Optional[str] = Field(default=None, max_length=30)
    competitors: Optional[str] = None
    competitor_strengths: Optional[str] = None

    # Step 7: Budget & resources
    monthly_budget_range: str = Field(min_length=1, max_length=50)
    has_creative_assets: Answer = None
    has_marketing_contact: Answer = None
    marketing_contact_name: Optional[str] = Field(default=None, max_length=100)
    marketing_contact_email: Optional[str] = Field(default=None, max_length=255)

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, v: str) -> str:
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v.lower()

    @field_validator(
        "worked_with_agency", "has_google_analytics", "has_facebook_pixel",
        "can_provide_analytics_access", "has_fb_business_manager", "has_google_ads",
        "has_creative_assets", "has_marketing_contact",
    )
    @classmethod
    def _answer_to_text(cls, v):
        if isinstance(v, bool):
            return "yes" if v else "no"
        return v or None

    @field_validator(
        "industry", "website_url", "company_description", "employee_count",
        "business_model", "marketing_feedback", "primary_challenges",
        "analytics_notes", "success_definition", "revenue_target", "target_cpa",
        "target_roas", "geographic_targeting", "age_range", "gender_targeting",
        "competitors", "competitor_strengths", "marketing_contact_name",
        "marketing_contact_email",
    )
    @classmethod
    def _blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    def profile_fields(self) -> dict:
        """Everything except credentials, keyed by Client column name."""
        return self.model_dump(exclude={"email", "password"})


class OnboardingResponse(_CamelModel):
    success: bool = True
    message: str = "Onboarding completed successfully"
    user_id: str
    client_id: str
    unique_client_id: str


# === Handoff payload sent to the automation endpoint ===

class BusinessInfo(_CamelModel):
    company_name: str
    industry: Optional[str] = Field(default=None, max_length=100)
    website_url: Optional[str] = Field(default=None, max_length=500)
    company_description: Optional[str] = None
    employee_count: Optional[str] = Field(default=None, max_length=50)
    business_model: Optional[str] = Field(default=None, max_length=50)


class MarketingState(_CamelModel):
    worked_with_agency: Optional[str] = None
    current_channels: Optional[list[str]] = None
    marketing_feedback: Optional[str] = None
    primary_challenges: Optional[str] = None


class AnalyticsInfo(_CamelModel):
    has_google_analytics: Optional[str] = None
    has_facebook_pixel: Optional[str] = None
    tracking_tools: Optional[list[str]] = None
    can_provide_analytics_access: Optional[str] = None
    analytics_notes: Optional[str] = None


class SocialMedia(_CamelModel):
    social_platforms: Optional[list[str]] = None
    has_fb_business_manager: Optional[str] = None
    has_google_ads: Optional[str] = None


class Goals(_CamelModel):
    primary_goal: str
    success_definition: Optional[str] = None
    key_metrics: Optional[list[str]] = None
    revenue_target: Optional[str] = Field(default=None, max_length=100)
    target_cpa: Optional[str] = Field(default=None, max_length=50)
    target_roas: Optional[str] = Field(default=None, max_length=50)


class Audience(_CamelModel):
    ideal_customer_profile: str
    geographic_targeting: Optional[str] = None
    age_range: Optional[str] = Field(default=None, max_length=50)
    gender_targeting: Optional[str] = Field(default=None, max_length=30)
    competitors: Optional[str] = None
    competitor_strengths: Optional[str] = None


class Budget(_CamelModel):
    monthly_budget_range: str
    has_creative_assets: Optional[str] = None
    has_marketing_contact: Optional[str] = None
    marketing_contact_name: Optional[str] = Field(default=None, max_length=100)
    marketing_contact_email: Optional[str] = Field(default=None, max_length=255)


class OnboardingData(_CamelModel):
    business_info: BusinessInfo
    marketing_state: MarketingState
    analytics: AnalyticsInfo
    social_media: SocialMedia
    goals: Goals
    audience: Audience
    budget: Budget


class OnboardingHandoff(_CamelModel):
    unique_client_id: str
    client_id: str
    email: str
    company_name: str
    industry: Optional[str] = Field(default=None, max_length=100)
    website_url: Optional[str] = Field(default=None, max_length=500)
    onboarding_data: OnboardingData

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
