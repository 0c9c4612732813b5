"""
Audience Service

What the builders need from the rule engine: the live audience size and a
short sample of matching customers, computed over whatever customer
source the app is wired to.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Optional, Protocol, Sequence

from app.config import settings
from app.schemas.customer import Customer
from app.services.segment_engine import count_matches, filter_customers

logger = logging.getLogger(__name__)


class CustomerSource(Protocol):
    """Anything that can hand over the current customer population."""

    def get_customers(self) -> Sequence[Customer]: ...


@dataclass
class AudiencePreview:
    """Audience size plus the first few matching customers."""

    audience_size: int
    reference_date: date
    sample: list[Customer] = field(default_factory=list)


class AudienceService:
    """
    Audience sizing and preview for segment and campaign builders.

    Usage:
        service = AudienceService(store)
        size = service.audience_size(rules)
        preview = service.preview(rules, limit=10)
    """

    def __init__(self, customer_source: CustomerSource, clock: Callable[[], date] = date.today):
        self.customer_source = customer_source
        self.clock = clock

    def audience_size(self, rules: Sequence[Any], reference_date: Optional[date] = None) -> int:
        """Number of customers matching ``rules``."""
        reference_date = reference_date or self.clock()
        size = count_matches(self.customer_source.get_customers(), rules, reference_date)
        logger.debug("Audience size %d for %d rules", size, len(rules))
        return size

    def matching_customers(self, rules: Sequence[Any], reference_date: Optional[date] = None) -> list[Customer]:
        reference_date = reference_date or self.clock()
        return filter_customers(self.customer_source.get_customers(), rules, reference_date)

    def preview(
        self,
        rules: Sequence[Any],
        limit: Optional[int] = None,
        reference_date: Optional[date] = None,
    ) -> AudiencePreview:
        """
        Preview an audience before saving.

        Args:
            rules: Rule set to preview
            limit: Maximum sample size (defaults to AUDIENCE_PREVIEW_LIMIT)
            reference_date: "Today" for recency rules

        Returns:
            AudiencePreview with the full count and a capped sample
        """
        if limit is None:
            limit = settings.AUDIENCE_PREVIEW_LIMIT
        if limit < 0:
            raise ValueError("Preview limit must be non-negative")

        reference_date = reference_date or self.clock()
        matched = self.matching_customers(rules, reference_date)
        return AudiencePreview(
            audience_size=len(matched),
            reference_date=reference_date,
            sample=matched[:limit],
        )
