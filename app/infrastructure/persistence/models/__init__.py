"""Persistence models: ORM entities and mixins."""

from app.infrastructure.persistence.models.entry_code import WorkflowEntryCode
from app.infrastructure.persistence.models.link import Domain, Link
from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    SoftDeleteMixin,
    TeamMixin,
    TeamScopedModel,
    TimestampMixin,
)
from app.infrastructure.persistence.models.team import Team, User, UserTeam
from app.infrastructure.persistence.models.workflow import (
    Workflow,
    WorkflowExecution,
    WorkflowStep,
)

__all__ = [
    "CuidMixin",
    "Domain",
    "Link",
    "SoftDeleteMixin",
    "Team",
    "TeamMixin",
    "TeamScopedModel",
    "TimestampMixin",
    "User",
    "UserTeam",
    "Workflow",
    "WorkflowEntryCode",
    "WorkflowExecution",
    "WorkflowStep",
]
