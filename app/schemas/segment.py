"""
Segment Rule Schemas

A segment rule is a tagged variant keyed on ``field``: each field carries
its own correctly typed comparand and the closed set of operators valid
for it, so a rule like ``totalSpent contains "vip"`` can't be built.

Rule set format (ordered, joined left to right, no grouping):
[
    {"field": "totalSpent", "operator": ">", "value": 500, "conjunction": "AND"},
    {"field": "tag", "operator": "contains", "value": "frequent_buyer"}
]
"""

from __future__ import annotations

import logging
from datetime import date
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from app.schemas.customer import Customer
from app.schemas.types import CamelModel

logger = logging.getLogger(__name__)


class RuleField(str, Enum):
    TOTAL_SPENT = "totalSpent"
    PURCHASE_COUNT = "purchaseCount"
    LAST_PURCHASE = "lastPurchase"
    TAG = "tag"


class NumericOperator(str, Enum):
    GREATER_THAN = ">"
    LESS_THAN = "<"
    EQUALS = "="
    GREATER_THAN_OR_EQUALS = "≥"
    LESS_THAN_OR_EQUALS = "≤"


class TagOperator(str, Enum):
    CONTAINS = "contains"
    DOES_NOT_CONTAIN = "does_not_contain"


class Conjunction(str, Enum):
    AND = "AND"
    OR = "OR"


# Keyboard spellings accepted on input
OPERATOR_ALIASES = {">=": "≥", "<=": "≤", "==": "="}


class RuleBase(BaseModel):
    """Fields shared by every rule variant."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()), description="Stable id for UI editing")
    conjunction: Optional[Conjunction] = Field(
        None, description="Joiner to the next rule; ignored on the last rule, defaults to AND"
    )

    @field_validator("conjunction", mode="before")
    @classmethod
    def normalize_conjunction(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.upper()
        return v


class NumericRuleBase(RuleBase):
    operator: NumericOperator
    value: float = Field(..., strict=True, allow_inf_nan=False)

    @field_validator("operator", mode="before")
    @classmethod
    def normalize_operator(cls, v: Any) -> Any:
        if isinstance(v, str):
            return OPERATOR_ALIASES.get(v, v)
        return v


class TotalSpentRule(NumericRuleBase):
    """Compare lifetime spend against ``value`` (monetary units)."""
    field: Literal["totalSpent"] = "totalSpent"


class PurchaseCountRule(NumericRuleBase):
    """Compare number of purchases against ``value``."""
    field: Literal["purchaseCount"] = "purchaseCount"


class LastPurchaseRule(NumericRuleBase):
    """
    Compare days since last purchase against ``value``.

    ``>`` 90 means "last purchase more than 90 days ago"; ``<`` 30 means
    "purchased within the last 30 days". The builder only offers > and <,
    but every numeric operator evaluates.
    """
    field: Literal["lastPurchase"] = "lastPurchase"


class TagRule(RuleBase):
    """Tag membership: ``contains`` / ``does_not_contain`` a single tag."""
    field: Literal["tag"] = "tag"
    operator: TagOperator
    value: str = Field(..., strict=True, min_length=1)


SegmentRule = Annotated[
    Union[TotalSpentRule, PurchaseCountRule, LastPurchaseRule, TagRule],
    Field(discriminator="field"),
]

RULE_TYPES = (TotalSpentRule, PurchaseCountRule, LastPurchaseRule, TagRule)

_rule_adapter: TypeAdapter = TypeAdapter(SegmentRule)


def build_rule(data: Any) -> RuleBase:
    """Validate a mapping into a typed rule. Raises pydantic.ValidationError."""
    return _rule_adapter.validate_python(data)


def parse_rule(raw: Any) -> Optional[RuleBase]:
    """
    Leniently turn a stored rule into a typed rule.

    Returns None (and logs) instead of raising when the rule is malformed,
    e.g. an unknown field or an operator that doesn't apply to the field.
    """
    if isinstance(raw, RULE_TYPES):
        return raw
    try:
        return _rule_adapter.validate_python(raw)
    except ValidationError as e:
        logger.warning(
            "Ignoring malformed segment rule %r (%d validation errors)",
            raw,
            e.error_count(),
        )
        return None


# ============================================
# API request / response schemas
# ============================================


class SegmentCountRequest(CamelModel):
    """Rule set whose audience size should be counted."""
    rules: list[SegmentRule] = Field(default_factory=list)


class SegmentCountResponse(CamelModel):
    audience_size: int


class SegmentPreviewRequest(CamelModel):
    """Rule set to preview, with an optional cap on the sample size."""
    rules: list[SegmentRule] = Field(default_factory=list)
    limit: Optional[int] = Field(None, ge=0, le=100)


class SegmentPreviewResponse(CamelModel):
    audience_size: int
    sample: list[Customer]
    reference_date: date


class OperatorOption(CamelModel):
    value: str
    label: str


class FieldOption(CamelModel):
    field: RuleField
    label: str
    value_type: Literal["number", "days", "tag"]
    operators: list[OperatorOption]


class SegmentFieldsResponse(CamelModel):
    fields: list[FieldOption]
    tags: list[str]
