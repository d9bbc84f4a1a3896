"""Parse raw step JSON into typed conditions and route actions.

Steps arrive as JSON (API bodies, stored JSON columns). They are parsed once
here into the closed union of EmailCondition / DomainCondition and a single
RouteAction. Strict mode is used when saving steps and raises
ValidationException; lenient mode is used when reading stored rows and drops
what it cannot understand, so a damaged step can only match fewer visitors.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from app.domain.entities.workflow import (
    Condition,
    ConditionSet,
    DomainCondition,
    EmailCondition,
    RouteAction,
)
from app.domain.enums import ActionType, ConditionLogic, ConditionOperator, ConditionType
from app.domain.exceptions import ValidationException
from app.domain.value_objects.core import is_valid_id, normalize_domain, normalize_email
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

ALLOW_LIST_REQUIRED_MESSAGE = "At least one email or domain is required"


class _Skip(Exception):
    """Internal: item is malformed (raised as ValidationException in strict mode)."""

    def __init__(self, message: str, field: str) -> None:
        self.message = message
        self.field = field
        super().__init__(message)


def _dedupe(values: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(values))


def _coerce_values(raw: Any) -> list[str]:
    """Single strings count as a one-element list; non-strings are dropped."""
    if isinstance(raw, str):
        return [raw]
    if isinstance(raw, (list, tuple)):
        return [v for v in raw if isinstance(v, str)]
    return []


def _normalize_values(
    condition_type: ConditionType, raw_values: list[str], *, strict: bool
) -> tuple[str, ...]:
    normalize = normalize_email if condition_type is ConditionType.EMAIL else normalize_domain
    out: list[str] = []
    for raw in raw_values:
        if not raw.strip():
            continue
        try:
            out.append(normalize(raw))
        except ValueError as e:
            if strict:
                raise _Skip(str(e), "conditions") from e
    return _dedupe(out)


def _make_condition(condition_type: ConditionType, values: tuple[str, ...]) -> Condition:
    if condition_type is ConditionType.EMAIL:
        return EmailCondition(values=values)
    return DomainCondition(values=values)


def _parse_item(item: Any, *, strict: bool) -> Condition:
    if not isinstance(item, dict):
        raise _Skip("Condition must be an object", "conditions")
    try:
        condition_type = ConditionType(str(item.get("type", "")).strip().lower())
    except ValueError as e:
        raise _Skip(f"Unknown condition type: {item.get('type')!r}", "conditions") from e
    operator = item.get("operator", ConditionOperator.IN_LIST.value)
    if operator != ConditionOperator.IN_LIST.value:
        raise _Skip(f"Unsupported condition operator: {operator!r}", "conditions")
    values = _normalize_values(condition_type, _coerce_values(item.get("value")), strict=strict)
    if not values:
        raise _Skip("Condition value must not be empty", "conditions")
    return _make_condition(condition_type, values)


def _parse_logic(raw: Any) -> ConditionLogic:
    if raw is None:
        return ConditionLogic.OR
    try:
        return ConditionLogic(str(raw).strip().upper())
    except ValueError as e:
        raise _Skip(f"Condition logic must be AND or OR, got {raw!r}", "conditions") from e


def parse_conditions(raw: Any, *, strict: bool = True) -> ConditionSet:
    """Parse {"logic": ..., "items": [...]} into a ConditionSet.

    Args:
        raw: Decoded JSON value.
        strict: Raise on any malformed part instead of dropping it.

    Returns:
        ConditionSet. In lenient mode it may be empty (and then never matches).

    Raises:
        ValidationException: In strict mode, for a malformed set or item, or
            when no item remains.
    """
    if not isinstance(raw, dict):
        if strict:
            raise ValidationException("Conditions must be an object", field="conditions")
        return ConditionSet()

    try:
        logic = _parse_logic(raw.get("logic"))
    except _Skip as e:
        if strict:
            raise ValidationException(e.message, field=e.field) from e
        # Unknown logic on a stored row: nothing can be trusted to match.
        logger.warning("Stored step has invalid condition logic %r; ignoring conditions", raw.get("logic"))
        return ConditionSet()

    raw_items = raw.get("items")
    if not isinstance(raw_items, list):
        if strict:
            raise ValidationException("Condition items must be a list", field="conditions")
        raw_items = []

    items: list[Condition] = []
    dropped = False
    for raw_item in raw_items:
        try:
            items.append(_parse_item(raw_item, strict=strict))
        except _Skip as e:
            if strict:
                raise ValidationException(e.message, field=e.field) from e
            logger.warning("Dropping malformed stored condition: %s", e.message)
            dropped = True

    # Under AND a dropped item would widen the match; the whole set fails instead.
    if dropped and logic is ConditionLogic.AND:
        logger.warning("Stored AND step has malformed conditions; ignoring conditions")
        return ConditionSet()
    if strict and not items:
        raise ValidationException("At least one condition is required", field="conditions")
    return ConditionSet(logic=logic, items=tuple(items))


def _parse_action(item: Any) -> RouteAction:
    if not isinstance(item, dict):
        raise _Skip("Action must be an object", "actions")
    if item.get("type") != ActionType.ROUTE.value:
        raise _Skip(f"Unsupported action type: {item.get('type')!r}", "actions")
    target = item.get("target_link_id", item.get("targetLinkId"))
    if not is_valid_id(target):
        raise _Skip("Route action needs a valid target_link_id", "actions")
    document_id = item.get("target_document_id", item.get("targetDocumentId"))
    dataroom_id = item.get("target_dataroom_id", item.get("targetDataroomId"))
    return RouteAction(
        target_link_id=target,
        target_document_id=document_id if isinstance(document_id, str) else None,
        target_dataroom_id=dataroom_id if isinstance(dataroom_id, str) else None,
    )


def parse_actions(raw: Any, *, strict: bool = True) -> RouteAction | None:
    """Parse the actions list of a step into its single RouteAction.

    Strict mode requires exactly one well-formed route action. Lenient mode
    only looks at the first action and returns it when it is a well-formed
    route, else None.

    Raises:
        ValidationException: In strict mode, when the list is not exactly
            one valid route action.
    """
    if not isinstance(raw, list):
        if strict:
            raise ValidationException("Actions must be a list", field="actions")
        return None
    if strict:
        if len(raw) != 1:
            raise ValidationException("Exactly one route action is required", field="actions")
        try:
            return _parse_action(raw[0])
        except _Skip as e:
            raise ValidationException(e.message, field=e.field) from e
    if not raw:
        return None
    try:
        return _parse_action(raw[0])
    except _Skip as e:
        logger.warning("Ignoring malformed stored action: %s", e.message)
    return None


def parse_allow_list(lines: Iterable[str]) -> ConditionSet:
    """Build an OR condition set from allow-list lines.

    '@acme.com' is a domain (the '@' is presentation only), anything else is
    an email. Blank lines are ignored.

    Raises:
        ValidationException: If a line is malformed or no entry remains.
    """
    emails: list[str] = []
    domains: list[str] = []
    for line in lines:
        entry = line.strip()
        if not entry:
            continue
        try:
            if entry.startswith("@"):
                domains.append(normalize_domain(entry))
            else:
                emails.append(normalize_email(entry))
        except ValueError as e:
            raise ValidationException(str(e), field="allow_list") from e

    items: list[Condition] = []
    if emails:
        items.append(EmailCondition(values=_dedupe(emails)))
    if domains:
        items.append(DomainCondition(values=_dedupe(domains)))
    if not items:
        raise ValidationException(ALLOW_LIST_REQUIRED_MESSAGE, field="allow_list")
    return ConditionSet(logic=ConditionLogic.OR, items=tuple(items))


def build_allow_list(condition_set: ConditionSet) -> list[str]:
    """Return the allow-list entries a condition set admits (domains as '@domain')."""
    entries: list[str] = []
    for item in condition_set.items:
        if isinstance(item, DomainCondition):
            entries.extend(f"@{d}" for d in item.values)
        else:
            entries.extend(item.values)
    return list(dict.fromkeys(entries))
