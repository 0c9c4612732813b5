"""
In-memory customer, order and campaign store.

Stands in for the persistence layer: the dashboard only ever reads whole
collections and appends campaigns. Generated data is random unless a
seed is given (tests and MOCK_DATA_SEED).
"""

import logging
import random
import threading
from datetime import date, timedelta
from typing import Optional
from uuid import UUID

from app.schemas.campaign import Campaign, CampaignCreate, CampaignStatus
from app.schemas.customer import Customer, Order, OrderItem
from app.schemas.segment import (
    Conjunction,
    LastPurchaseRule,
    NumericOperator,
    TagOperator,
    TagRule,
    TotalSpentRule,
)
from app.services.segment_catalog import KNOWN_TAGS

logger = logging.getLogger(__name__)

PRODUCT_NAMES = ["T-shirt", "Jeans", "Sneakers", "Watch", "Bag", "Sunglasses", "Hat", "Socks"]


def _random_past_date(rng: random.Random, today: date, max_days_ago: int = 365) -> date:
    return today - timedelta(days=rng.randrange(max_days_ago))


def _uuid(rng: random.Random) -> str:
    return str(UUID(int=rng.getrandbits(128), version=4))


def generate_mock_customers(
    count: int = 100, rng: Optional[random.Random] = None, today: Optional[date] = None
) -> list[Customer]:
    """Random customers with 0-2 distinct tags each."""
    rng = rng or random.Random()
    today = today or date.today()

    customers = []
    for index in range(count):
        purchase_count = rng.randrange(20)
        total_spent = round(purchase_count * (rng.random() * 100 + 50))

        tags: list[str] = []
        for _ in range(rng.randrange(3)):
            tag = rng.choice(KNOWN_TAGS)
            if tag not in tags:
                tags.append(tag)

        customers.append(
            Customer(
                id=_uuid(rng),
                name=f"Customer {index + 1}",
                email=f"customer{index + 1}@example.com",
                total_spent=total_spent,
                purchase_count=purchase_count,
                last_purchase_date=_random_past_date(rng, today),
                tags=frozenset(tags),
            )
        )
    return customers


def generate_mock_orders(
    customers: list[Customer],
    count: int = 200,
    rng: Optional[random.Random] = None,
    today: Optional[date] = None,
) -> list[Order]:
    """Random orders spread over the last 180 days."""
    rng = rng or random.Random()
    today = today or date.today()
    if not customers:
        return []

    orders = []
    for _ in range(count):
        customer = rng.choice(customers)
        items = [
            OrderItem(
                id=_uuid(rng),
                name=rng.choice(PRODUCT_NAMES),
                price=rng.randrange(100) + 10,
                quantity=rng.randrange(3) + 1,
            )
            for _ in range(rng.randrange(5) + 1)
        ]
        orders.append(
            Order(
                id=_uuid(rng),
                customer_id=customer.id,
                order_date=_random_past_date(rng, today, 180),
                amount=sum(item.price * item.quantity for item in items),
                items=tuple(items),
            )
        )
    return orders


def generate_mock_campaigns(rng: Optional[random.Random] = None) -> list[Campaign]:
    """The three campaigns the dashboard ships with."""
    rng = rng or random.Random()
    return [
        Campaign(
            id=_uuid(rng),
            name="High Value Customers",
            segment_rules=[
                TotalSpentRule(id=_uuid(rng), operator=NumericOperator.GREATER_THAN, value=1000),
            ],
            message="Thank you for being a valued customer! Here's a 15% discount on your next purchase.",
            created_at=date(2024, 5, 1),
            sent_count=245,
            delivered_count=230,
            failed_count=15,
            audience_size=245,
            status=CampaignStatus.SENT,
        ),
        Campaign(
            id=_uuid(rng),
            name="Win-back Campaign",
            segment_rules=[
                LastPurchaseRule(
                    id=_uuid(rng),
                    operator=NumericOperator.GREATER_THAN,
                    value=90,
                    conjunction=Conjunction.AND,
                ),
                TotalSpentRule(id=_uuid(rng), operator=NumericOperator.GREATER_THAN, value=500),
            ],
            message="We miss you! Come back and enjoy 20% off your next order.",
            created_at=date(2024, 4, 15),
            sent_count=180,
            delivered_count=165,
            failed_count=15,
            audience_size=180,
            status=CampaignStatus.SENT,
        ),
        Campaign(
            id=_uuid(rng),
            name="New Summer Collection",
            segment_rules=[
                TagRule(id=_uuid(rng), operator=TagOperator.CONTAINS, value="frequent_buyer"),
            ],
            message=(
                "Be the first to shop our new summer collection! "
                "Exclusive early access for our best customers."
            ),
            created_at=date(2024, 5, 5),
            audience_size=320,
            status=CampaignStatus.DRAFT,
        ),
    ]


class MockDataStore:
    """
    Data-access collaborator for the dashboard.

    Collections are returned as tuples so callers can't mutate the store;
    only add_campaign writes.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        customer_count: int = 100,
        order_count: int = 200,
        customers: Optional[list[Customer]] = None,
        today: Optional[date] = None,
    ):
        self._rng = random.Random(seed)
        self._lock = threading.Lock()
        today = today or date.today()

        if customers is None:
            customers = generate_mock_customers(customer_count, self._rng, today)
        self._customers = tuple(customers)
        self._orders = tuple(generate_mock_orders(list(self._customers), order_count, self._rng, today))
        self._campaigns: list[Campaign] = generate_mock_campaigns(self._rng)

        logger.info(
            "Mock data initialized: %d customers, %d orders, %d campaigns",
            len(self._customers),
            len(self._orders),
            len(self._campaigns),
        )

    def get_customers(self) -> tuple[Customer, ...]:
        return self._customers

    def get_orders(self) -> tuple[Order, ...]:
        return self._orders

    def get_campaigns(self) -> tuple[Campaign, ...]:
        with self._lock:
            return tuple(self._campaigns)

    def get_campaign(self, campaign_id: str) -> Optional[Campaign]:
        with self._lock:
            for campaign in self._campaigns:
                if campaign.id == campaign_id:
                    return campaign
        return None

    def add_campaign(
        self, data: CampaignCreate, audience_size: int, created_at: Optional[date] = None
    ) -> Campaign:
        """Append a new draft campaign with zeroed delivery counters."""
        campaign = Campaign(
            id=_uuid(self._rng),
            name=data.name,
            message=data.message,
            segment_rules=list(data.segment_rules),
            audience_size=audience_size,
            created_at=created_at or date.today(),
            status=CampaignStatus.DRAFT,
        )
        with self._lock:
            self._campaigns.append(campaign)
        return campaign
