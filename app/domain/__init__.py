"""Domain layer: entities, value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.enums import (
    ActionType,
    ConditionLogic,
    ConditionOperator,
    ConditionType,
    LinkType,
    WorkflowExecutionStatus,
)
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    InvalidVerificationCodeException,
    LinkroomException,
    PlanUpgradeRequiredException,
    ResourceNotFoundException,
    ValidationException,
)

__all__ = [
    # Enums
    "ActionType",
    "ConditionLogic",
    "ConditionOperator",
    "ConditionType",
    "LinkType",
    "WorkflowExecutionStatus",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "InvalidVerificationCodeException",
    "LinkroomException",
    "PlanUpgradeRequiredException",
    "ResourceNotFoundException",
    "ValidationException",
]
