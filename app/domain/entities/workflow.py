"""Workflow domain entities.

A workflow owns an ordered list of routing steps. Each step carries a
condition set (closed union of email/domain membership conditions) and a
single route action naming the link that matching visitors are sent to.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, ClassVar

from app.domain.enums import ActionType, ConditionLogic, ConditionOperator, ConditionType

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


@dataclass(frozen=True)
class EmailCondition:
    """Visitor e-mail must be one of values (lower-cased)."""

    values: tuple[str, ...]
    type: ClassVar[ConditionType] = ConditionType.EMAIL

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "operator": ConditionOperator.IN_LIST.value,
            "value": list(self.values),
        }


@dataclass(frozen=True)
class DomainCondition:
    """Visitor e-mail domain must be one of values (lower-cased, no '@')."""

    values: tuple[str, ...]
    type: ClassVar[ConditionType] = ConditionType.DOMAIN

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "operator": ConditionOperator.IN_LIST.value,
            "value": list(self.values),
        }


Condition = EmailCondition | DomainCondition


@dataclass(frozen=True)
class ConditionSet:
    """Conditions of one step combined with AND / OR logic."""

    logic: ConditionLogic = ConditionLogic.OR
    items: tuple[Condition, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.items

    def to_dict(self) -> dict[str, Any]:
        return {
            "logic": self.logic.value,
            "items": [item.to_dict() for item in self.items],
        }


@dataclass(frozen=True)
class RouteAction:
    """Send matching visitors to target_link_id.

    target_document_id / target_dataroom_id are copied from the target link
    when the step is saved so callers can open the content without a lookup.
    """

    target_link_id: str
    target_document_id: str | None = None
    target_dataroom_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": ActionType.ROUTE.value,
            "target_link_id": self.target_link_id,
        }
        if self.target_document_id:
            data["target_document_id"] = self.target_document_id
        if self.target_dataroom_id:
            data["target_dataroom_id"] = self.target_dataroom_id
        return data


@dataclass(frozen=True)
class WorkflowStepEntity:
    """One routing rule of a workflow.

    step_order defines priority (lower runs first); ties are broken by
    created_at then id so evaluation order never depends on storage order.
    action is None only for stored rows whose action JSON could not be parsed.
    """

    id: str
    workflow_id: str
    name: str
    step_order: int
    conditions: ConditionSet
    action: RouteAction | None
    created_at: datetime | None = None

    @property
    def target_link_id(self) -> str | None:
        return self.action.target_link_id if self.action else None

    def sort_key(self) -> tuple[int, datetime, str]:
        return (self.step_order, self.created_at or _EPOCH, self.id)

    def actions_to_list(self) -> list[dict[str, Any]]:
        return [self.action.to_dict()] if self.action else []


@dataclass
class WorkflowEntity:
    """Workflow definition: entry link plus ordered routing steps."""

    id: str
    team_id: str
    name: str
    description: str | None
    is_active: bool
    entry_link_id: str
    created_at: datetime | None = None
    steps: list[WorkflowStepEntity] = field(default_factory=list)

    def belongs_to_team(self, team_id: str) -> bool:
        """Return whether this workflow belongs to the given team."""
        return self.team_id == team_id
