"""
Campaign Service

Saves campaigns with the audience size computed at save time and builds
the campaign detail view with a fresh recount through the rule engine.
"""

import logging
from datetime import date
from typing import Callable, Optional, Protocol, Sequence

from app.exceptions import NotFoundError
from app.schemas.campaign import (
    Campaign,
    CampaignCreate,
    CampaignDetailResponse,
    CampaignStatus,
)
from app.services.audience_service import AudienceService, CustomerSource
from app.services.segment_catalog import describe_rules

logger = logging.getLogger(__name__)

DETAIL_PREVIEW_LIMIT = 10


class CampaignStore(CustomerSource, Protocol):
    """Customer source that also keeps campaigns."""

    def get_campaigns(self) -> Sequence[Campaign]: ...

    def get_campaign(self, campaign_id: str) -> Optional[Campaign]: ...

    def add_campaign(
        self, data: CampaignCreate, audience_size: int, created_at: Optional[date] = None
    ) -> Campaign: ...


class CampaignService:
    """Campaign create/list/detail on top of the data store and rule engine."""

    def __init__(self, store: CampaignStore, clock: Callable[[], date] = date.today):
        self.store = store
        self.clock = clock
        self.audience = AudienceService(store, clock=clock)

    def list_campaigns(self, status: Optional[CampaignStatus] = None) -> list[Campaign]:
        campaigns = list(self.store.get_campaigns())
        if status is not None:
            campaigns = [c for c in campaigns if c.status == status]
        return campaigns

    def get_campaign(self, campaign_id: str) -> Campaign:
        campaign = self.store.get_campaign(campaign_id)
        if campaign is None:
            raise NotFoundError("Campaign", campaign_id, instance=f"/api/v2/campaigns/{campaign_id}")
        return campaign

    def create_campaign(self, data: CampaignCreate) -> Campaign:
        """Save a draft campaign; its audience size is fixed at this moment."""
        today = self.clock()
        audience_size = self.audience.audience_size(data.segment_rules, reference_date=today)
        campaign = self.store.add_campaign(data, audience_size=audience_size, created_at=today)
        logger.info(
            "Created campaign %s (%s) with audience of %d",
            campaign.id,
            campaign.name,
            audience_size,
        )
        return campaign

    def campaign_detail(self, campaign_id: str, preview_limit: int = DETAIL_PREVIEW_LIMIT) -> CampaignDetailResponse:
        """Campaign with a live recount and the first few targeted customers."""
        campaign = self.get_campaign(campaign_id)
        preview = self.audience.preview(campaign.segment_rules, limit=preview_limit)

        delivery_rate = None
        if campaign.sent_count:
            delivery_rate = round(campaign.delivered_count / campaign.sent_count * 100, 1)

        return CampaignDetailResponse(
            campaign=campaign,
            current_audience_size=preview.audience_size,
            targeted_customers=preview.sample,
            rule_descriptions=describe_rules(campaign.segment_rules),
            delivery_rate=delivery_rate,
        )
