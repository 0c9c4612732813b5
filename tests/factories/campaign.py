"""
Campaign test factories.

CampaignCreateFactory builds the payload the campaign builder posts.
"""

import factory
from faker import Faker

from app.schemas.campaign import CampaignCreate
from app.schemas.segment import NumericOperator, TotalSpentRule

fake = Faker()


class CampaignCreateFactory(factory.Factory):
    """
    Factory for campaign builder payloads.

    Usage:
        data = CampaignCreateFactory()
        data = CampaignCreateFactory(segment_rules=[...])
    """

    class Meta:
        model = CampaignCreate

    name = factory.LazyFunction(lambda: fake.catch_phrase()[:200])
    message = factory.LazyFunction(fake.sentence)
    segment_rules = factory.LazyFunction(
        lambda: [TotalSpentRule(operator=NumericOperator.GREATER_THAN, value=1000)]
    )
