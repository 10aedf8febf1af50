"""
Automation callback schemas - generated links posted back for a client.

Example body:
{
  "uniqueClientId": "CL-7K2Q9X",
  "clientId": "3f6c...",
  "secret": "shared-secret",
  "links": [
    {"type": "google_doc", "title": "Marketing Strategy", "url": "https://docs.google.com/...",
     "description": "Personalized strategy", "icon": "FileText", "workflowId": "wf_123"}
  ]
}
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from clientdesk.models.client_link import LINK_TYPES


class CallbackLink(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="forbid",
    )

    link_type: str = Field(default="other", alias="type")
    title: str = Field(min_length=1, max_length=255)
    url: str = Field(min_length=1)
    description: Optional[str] = None
    icon: Optional[str] = Field(default=None, max_length=50)
    workflow_id: Optional[str] = Field(default=None, max_length=100)

    @field_validator("link_type", mode="before")
    @classmethod
    def _known_type_or_other(cls, v):
        if isinstance(v, str) and v.strip().lower() in LINK_TYPES:
            return v.strip().lower()
        return "other"


class AutomationCallback(BaseModel):
    """POST /api/v1/webhooks/automation/callback body."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="forbid",
    )

    unique_client_id: Optional[str] = Field(default=None, max_length=20)
    client_id: Optional[str] = Field(default=None, max_length=64)
    secret: Optional[str] = None
    links: list[CallbackLink]

    @model_validator(mode="after")
    def _require_identifier(self):
        if not self.unique_client_id and not self.client_id:
            raise ValueError("Missing client identifier")
        return self


class CallbackResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    message: str = "Links saved successfully"
    links_created: int
    client_id: str
