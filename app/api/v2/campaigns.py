from fastapi import APIRouter, status, Query
from typing import Optional

from app.api.deps import Campaigns
from app.schemas.campaign import (
    Campaign,
    CampaignCreate,
    CampaignDetailResponse,
    CampaignListResponse,
    CampaignStatus,
)

router = APIRouter()


@router.get("", response_model=CampaignListResponse)
async def list_campaigns(
    campaigns: Campaigns,
    campaign_status: Optional[CampaignStatus] = Query(None, alias="status"),
):
    """List campaigns, optionally by status."""
    items = campaigns.list_campaigns(campaign_status)
    return CampaignListResponse(items=items, total=len(items))


@router.post("", response_model=Campaign, status_code=status.HTTP_201_CREATED)
async def create_campaign(
    campaign_data: CampaignCreate,
    campaigns: Campaigns,
):
    """Save a draft campaign; audience size is counted at save time."""
    return campaigns.create_campaign(campaign_data)


@router.get("/{campaign_id}", response_model=CampaignDetailResponse)
async def get_campaign(
    campaign_id: str,
    campaigns: Campaigns,
    preview_limit: int = Query(10, ge=0, le=100),
):
    """Campaign detail with a live audience recount and a customer sample."""
    return campaigns.campaign_detail(campaign_id, preview_limit=preview_limit)
