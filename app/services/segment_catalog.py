"""
Segment Rule Catalog

Field and operator option lists for the rule builders, plus the plain
English rendering of rules shown on the campaign detail page.
"""

import re
from typing import Any, Mapping, Optional

from app.schemas.segment import (
    Conjunction,
    FieldOption,
    NumericOperator,
    OperatorOption,
    RuleField,
    TagOperator,
    TotalSpentRule,
)

# Tag vocabulary used by the customer store
KNOWN_TAGS = [
    "high_value",
    "frequent_buyer",
    "new_customer",
    "churned",
    "promotional_sensitive",
    "discount_lover",
]

FIELD_OPTIONS: dict[str, str] = {
    RuleField.TOTAL_SPENT.value: "Total Spent",
    RuleField.PURCHASE_COUNT.value: "Purchase Count",
    RuleField.LAST_PURCHASE.value: "Last Purchase",
    RuleField.TAG.value: "Customer Tag",
}

_NUMERIC_OPTIONS = [
    (NumericOperator.GREATER_THAN.value, ">"),
    (NumericOperator.LESS_THAN.value, "<"),
    (NumericOperator.EQUALS.value, "="),
    (NumericOperator.GREATER_THAN_OR_EQUALS.value, ">="),
    (NumericOperator.LESS_THAN_OR_EQUALS.value, "<="),
]

_RECENCY_OPTIONS = [
    (NumericOperator.GREATER_THAN.value, "More than X days ago"),
    (NumericOperator.LESS_THAN.value, "Less than X days ago"),
]

_TAG_OPTIONS = [
    (TagOperator.CONTAINS.value, "Has tag"),
    (TagOperator.DOES_NOT_CONTAIN.value, "Does not have tag"),
]

_FALLBACK_OPTIONS = [
    (NumericOperator.GREATER_THAN.value, ">"),
    (NumericOperator.LESS_THAN.value, "<"),
    (NumericOperator.EQUALS.value, "="),
]

OPERATOR_WORDS = {
    ">": "greater than",
    "<": "less than",
    "=": "equals",
    "≥": "greater than or equal to",
    "≤": "less than or equal to",
    ">=": "greater than or equal to",
    "<=": "less than or equal to",
    "contains": "contains",
    "does_not_contain": "does not contain",
}

_VALUE_TYPES = {
    RuleField.TOTAL_SPENT.value: "number",
    RuleField.PURCHASE_COUNT.value: "number",
    RuleField.LAST_PURCHASE.value: "days",
    RuleField.TAG.value: "tag",
}


def operator_options(field: str) -> list[OperatorOption]:
    """Operators the builder offers for a field."""
    field = getattr(field, "value", field)
    if field in (RuleField.TOTAL_SPENT.value, RuleField.PURCHASE_COUNT.value):
        options = _NUMERIC_OPTIONS
    elif field == RuleField.LAST_PURCHASE.value:
        options = _RECENCY_OPTIONS
    elif field == RuleField.TAG.value:
        options = _TAG_OPTIONS
    else:
        options = _FALLBACK_OPTIONS
    return [OperatorOption(value=value, label=label) for value, label in options]


def field_options() -> list[FieldOption]:
    """Every rule field with its label and builder operators."""
    return [
        FieldOption(
            field=RuleField(name),
            label=label,
            value_type=_VALUE_TYPES[name],
            operators=operator_options(name),
        )
        for name, label in FIELD_OPTIONS.items()
    ]


def format_operator(operator: Any) -> str:
    op = getattr(operator, "value", operator)
    return OPERATOR_WORDS.get(op, str(op))


def format_field(field: Any) -> str:
    """camelCase field name to words: totalSpent -> total spent."""
    name = str(getattr(field, "value", field))
    return re.sub(r"([A-Z])", r" \1", name).lower()


def format_value(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(format_value(v) for v in value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def describe_rule(rule: Any) -> str:
    """
    Render a rule as "<field> is <operator> <value>".

    Works on stored mappings too, including malformed ones, since the
    detail page shows whatever the campaign was saved with.
    """
    if isinstance(rule, Mapping):
        field = rule.get("field", "")
        operator = rule.get("operator", "")
        value = rule.get("value", "")
    else:
        field = getattr(rule, "field", "")
        operator = getattr(rule, "operator", "")
        value = getattr(rule, "value", "")
    return f"{format_field(field)} is {format_operator(operator)} {format_value(value)}"


def describe_rules(rules: list[Any]) -> list[str]:
    """Describe a rule set, prefixing each rule after the first with its joiner."""
    descriptions = []
    previous: Optional[Any] = None
    for rule in rules:
        text = describe_rule(rule)
        if previous is not None:
            conjunction = _joiner(previous)
            text = f"{conjunction} {text}"
        descriptions.append(text)
        previous = rule
    return descriptions


def _joiner(rule: Any) -> str:
    raw = rule.get("conjunction") if isinstance(rule, Mapping) else getattr(rule, "conjunction", None)
    if raw is None:
        return Conjunction.AND.value
    return str(getattr(raw, "value", raw)).upper()


def default_rule() -> TotalSpentRule:
    """The rule a new builder starts with."""
    return TotalSpentRule(operator=NumericOperator.GREATER_THAN, value=0, conjunction=Conjunction.AND)
