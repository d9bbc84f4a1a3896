"""Domain entities and aggregates.

Pure domain models; no ORM or persistence concerns.
"""

from app.domain.entities.entry_code import EntryCodeEntity
from app.domain.entities.link import CustomDomainEntity, LinkEntity
from app.domain.entities.team import TeamEntity
from app.domain.entities.workflow import (
    Condition,
    ConditionSet,
    DomainCondition,
    EmailCondition,
    RouteAction,
    WorkflowEntity,
    WorkflowStepEntity,
)

__all__ = [
    "Condition",
    "ConditionSet",
    "CustomDomainEntity",
    "DomainCondition",
    "EmailCondition",
    "EntryCodeEntity",
    "LinkEntity",
    "RouteAction",
    "TeamEntity",
    "WorkflowEntity",
    "WorkflowStepEntity",
]
