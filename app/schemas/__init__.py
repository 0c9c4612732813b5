from app.schemas.customer import (
    Customer,
    CustomerListResponse,
    Order,
    OrderItem,
    OrderListResponse,
)
from app.schemas.segment import (
    Conjunction,
    LastPurchaseRule,
    NumericOperator,
    PurchaseCountRule,
    RuleField,
    SegmentRule,
    TagOperator,
    TagRule,
    TotalSpentRule,
    build_rule,
    parse_rule,
)
from app.schemas.campaign import (
    Campaign,
    CampaignCreate,
    CampaignDetailResponse,
    CampaignListResponse,
    CampaignStatus,
)

__all__ = [
    # Customer
    "Customer",
    "CustomerListResponse",
    "Order",
    "OrderItem",
    "OrderListResponse",
    # Segment rules
    "Conjunction",
    "LastPurchaseRule",
    "NumericOperator",
    "PurchaseCountRule",
    "RuleField",
    "SegmentRule",
    "TagOperator",
    "TagRule",
    "TotalSpentRule",
    "build_rule",
    "parse_rule",
    # Campaign
    "Campaign",
    "CampaignCreate",
    "CampaignDetailResponse",
    "CampaignListResponse",
    "CampaignStatus",
]
