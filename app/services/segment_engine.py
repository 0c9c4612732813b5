"""
Segment Rule Engine

Single shared evaluator for audience segmentation. The segment builder,
the campaign builder and the campaign detail recount all go through here.

EVALUATION SEMANTICS:
- A rule set is an ordered list of rules. Each rule's ``conjunction``
  joins it to the NEXT rule (missing = AND, ignored on the last rule).
- Rules combine strictly left to right with no precedence and no
  grouping: ``A AND B OR C`` is ``(A AND B) OR C``. Saved campaigns
  rely on this.
- Every rule is evaluated exactly once per customer.
- Fail-closed: an empty rule set, an unknown field, an operator that
  doesn't apply to the field, or an unparseable stored rule all mean
  "no match". Nothing in here raises for bad rules.

The engine is pure: no state, no writes. "Today" for recency rules is an
explicit ``reference_date``; when omitted it is read once per call so a
whole population is judged against the same day.
"""

import logging
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional, Sequence

from app.schemas.customer import Customer
from app.schemas.segment import (
    Conjunction,
    LastPurchaseRule,
    PurchaseCountRule,
    RuleBase,
    TagOperator,
    TagRule,
    TotalSpentRule,
    parse_rule,
)

logger = logging.getLogger(__name__)


def compare(a: float, operator: Any, b: float) -> bool:
    """Numeric comparison. Unknown operators never match."""
    op = getattr(operator, "value", operator)
    if op == ">":
        return a > b
    elif op == "<":
        return a < b
    elif op == "=":
        # Exact equality; values are whole units in practice
        return a == b
    elif op == "≥":
        return a >= b
    elif op == "≤":
        return a <= b
    return False


def days_since(last_purchase_date: date, reference_date: date) -> int:
    """
    Whole days between the last purchase and the reference date.

    Absolute difference, so a future-dated purchase counts by distance
    too. Same day is 0, yesterday is 1.
    """
    if isinstance(last_purchase_date, datetime):
        last_purchase_date = last_purchase_date.date()
    if isinstance(reference_date, datetime):
        reference_date = reference_date.date()
    return abs((reference_date - last_purchase_date).days)


def evaluate_rule(customer: Customer, rule: Any, reference_date: date) -> bool:
    """Evaluate one rule (typed or stored mapping) against one customer."""
    return _evaluate(customer, parse_rule(rule), reference_date)


def _evaluate(customer: Customer, rule: Optional[RuleBase], reference_date: date) -> bool:
    if isinstance(rule, TotalSpentRule):
        return compare(customer.total_spent, rule.operator, rule.value)
    elif isinstance(rule, PurchaseCountRule):
        return compare(customer.purchase_count, rule.operator, rule.value)
    elif isinstance(rule, LastPurchaseRule):
        diff_days = days_since(customer.last_purchase_date, reference_date)
        return compare(diff_days, rule.operator, rule.value)
    elif isinstance(rule, TagRule):
        if rule.operator == TagOperator.CONTAINS:
            return rule.value in customer.tags
        elif rule.operator == TagOperator.DOES_NOT_CONTAIN:
            return rule.value not in customer.tags
        return False
    # Unknown or malformed rule
    return False


def _conjunction_of(rule: Any) -> Conjunction:
    """Joiner stored on a rule, defaulting to AND."""
    if isinstance(rule, Mapping):
        raw = rule.get("conjunction")
    else:
        raw = getattr(rule, "conjunction", None)
    if raw is None:
        return Conjunction.AND
    if isinstance(raw, Conjunction):
        return raw
    return Conjunction.OR if str(raw).upper() == "OR" else Conjunction.AND


def _prepare(rules: Optional[Sequence[Any]]) -> list[tuple[Optional[RuleBase], Conjunction]]:
    """
    Parse a rule set once per evaluation call.

    The conjunction is read from the raw rule so that a malformed rule
    still joins its neighbours the way the author wrote it.
    """
    if not rules:
        return []
    return [(parse_rule(rule), _conjunction_of(rule)) for rule in rules]


def _matches(
    customer: Customer,
    prepared: list[tuple[Optional[RuleBase], Conjunction]],
    reference_date: date,
) -> bool:
    if not prepared:
        return False

    result = _evaluate(customer, prepared[0][0], reference_date)
    for i in range(1, len(prepared)):
        conjunction = prepared[i - 1][1]
        next_result = _evaluate(customer, prepared[i][0], reference_date)
        if conjunction == Conjunction.AND:
            result = result and next_result
        else:
            result = result or next_result
    return result


def matches(
    customer: Customer,
    rules: Sequence[Any],
    reference_date: Optional[date] = None,
) -> bool:
    """
    Check whether a customer belongs to the audience defined by ``rules``.

    Args:
        customer: Customer to test
        rules: Ordered rule set (typed rules or stored rule mappings)
        reference_date: "Today" for recency rules; defaults to date.today()

    Returns:
        True if the left-to-right fold of the rules is true. An empty rule
        set matches nobody.
    """
    if reference_date is None:
        reference_date = date.today()
    return _matches(customer, _prepare(rules), reference_date)


def filter_customers(
    customers: Iterable[Customer],
    rules: Sequence[Any],
    reference_date: Optional[date] = None,
) -> list[Customer]:
    """Customers matching ``rules``, in input order."""
    if reference_date is None:
        reference_date = date.today()
    prepared = _prepare(rules)
    if not prepared:
        return []
    return [c for c in customers if _matches(c, prepared, reference_date)]


def count_matches(
    customers: Iterable[Customer],
    rules: Sequence[Any],
    reference_date: Optional[date] = None,
) -> int:
    """Audience size for ``rules``; same as len(filter_customers(...))."""
    if reference_date is None:
        reference_date = date.today()
    prepared = _prepare(rules)
    if not prepared:
        return 0
    count = sum(1 for c in customers if _matches(c, prepared, reference_date))
    logger.debug("Rule set of %d rules matched %d customers", len(prepared), count)
    return count
