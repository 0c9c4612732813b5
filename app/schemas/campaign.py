"""
Campaign Schemas

A campaign stores its rule set and the audience size computed when it was
saved. Delivery counters are carried for display only.
"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from app.schemas.customer import Customer
from app.schemas.segment import SegmentRule
from app.schemas.types import CamelModel, IdStr


class CampaignStatus(str, Enum):
    DRAFT = "draft"
    SCHEDULED = "scheduled"
    SENT = "sent"
    FAILED = "failed"


class Campaign(CamelModel):
    """Saved campaign."""
    id: IdStr
    name: str
    segment_rules: list[SegmentRule] = Field(default_factory=list)
    message: str
    created_at: date
    sent_count: int = Field(0, ge=0)
    delivered_count: int = Field(0, ge=0)
    failed_count: int = Field(0, ge=0)
    audience_size: int = Field(0, ge=0)
    status: CampaignStatus = CampaignStatus.DRAFT


class CampaignCreate(CamelModel):
    """Schema for creating a campaign from the campaign builder."""
    name: str = Field(..., max_length=200)
    message: str
    segment_rules: list[SegmentRule] = Field(..., min_length=1)

    @field_validator("name", "message")
    @classmethod
    def not_blank(cls, v: str, info) -> str:
        if not v.strip():
            raise ValueError(f"Campaign {info.field_name} is required")
        return v


class CampaignListResponse(CamelModel):
    items: list[Campaign]
    total: int


class CampaignDetailResponse(CamelModel):
    """Campaign plus a live recount of its audience."""
    campaign: Campaign
    current_audience_size: int
    targeted_customers: list[Customer]
    rule_descriptions: list[str]
    delivery_rate: Optional[float] = None
