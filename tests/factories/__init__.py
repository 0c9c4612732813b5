"""
Test factories for generating realistic test data.

Uses factory_boy for declarative test data generation.
"""

from .customer import (
    REFERENCE_DATE,
    CustomerFactory,
    FrequentBuyerFactory,
    LapsedCustomerFactory,
)
from .campaign import CampaignCreateFactory

__all__ = [
    "REFERENCE_DATE",
    "CustomerFactory",
    "FrequentBuyerFactory",
    "LapsedCustomerFactory",
    "CampaignCreateFactory",
]
