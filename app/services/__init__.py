# Services module
from app.services.segment_engine import (
    compare,
    count_matches,
    days_since,
    evaluate_rule,
    filter_customers,
    matches,
)
from app.services.audience_service import AudiencePreview, AudienceService
from app.services.campaign_service import CampaignService

__all__ = [
    # Rule engine
    "compare",
    "count_matches",
    "days_since",
    "evaluate_rule",
    "filter_customers",
    "matches",
    # Callers
    "AudiencePreview",
    "AudienceService",
    "CampaignService",
]
