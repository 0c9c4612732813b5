"""
FastAPI Dependencies

Provides dependency injection for the data store, the audience and
campaign services, and the clock used for recency rules. Tests override
get_store / get_today through app.dependency_overrides.
"""

from datetime import date
from typing import Annotated

from fastapi import Depends, Request

from app.data.mock_data import MockDataStore
from app.services.audience_service import AudienceService
from app.services.campaign_service import CampaignService


def get_store(request: Request) -> MockDataStore:
    """Data store created during app startup."""
    return request.app.state.store


def get_today() -> date:
    """Reference date for recency rules."""
    return date.today()


Store = Annotated[MockDataStore, Depends(get_store)]
Today = Annotated[date, Depends(get_today)]


def get_audience_service(store: Store, today: Today) -> AudienceService:
    return AudienceService(store, clock=lambda: today)


def get_campaign_service(store: Store, today: Today) -> CampaignService:
    return CampaignService(store, clock=lambda: today)


Audience = Annotated[AudienceService, Depends(get_audience_service)]
Campaigns = Annotated[CampaignService, Depends(get_campaign_service)]
