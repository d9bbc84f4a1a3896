"""Evaluate step conditions against a visitor (pure, no I/O)."""

from __future__ import annotations

from app.domain.entities.workflow import Condition, ConditionSet, DomainCondition, EmailCondition
from app.domain.enums import ConditionLogic
from app.domain.value_objects.core import VisitorIdentity


def _in_values(candidate: str | None, values: tuple[str, ...]) -> bool:
    if not candidate:
        return False
    needle = candidate.strip().lower()
    return any(needle == v.strip().lower() for v in values)


def evaluate_condition(condition: Condition, visitor: VisitorIdentity) -> bool:
    """Return True if visitor satisfies a single condition.

    Email conditions compare the full address, domain conditions the part
    after the last '@'. Comparison is case-insensitive and exact. A visitor
    without an email never matches.
    """
    if isinstance(condition, EmailCondition):
        return _in_values(visitor.email, condition.values)
    if isinstance(condition, DomainCondition):
        return _in_values(visitor.domain, condition.values)
    return False


def evaluate_conditions(condition_set: ConditionSet, visitor: VisitorIdentity) -> bool:
    """Combine the conditions of a step with its logic.

    An empty condition set never matches, whatever the logic.
    """
    if condition_set.is_empty:
        return False
    results = (evaluate_condition(c, visitor) for c in condition_set.items)
    if condition_set.logic is ConditionLogic.AND:
        return all(results)
    return any(results)
