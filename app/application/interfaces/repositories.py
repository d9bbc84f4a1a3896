"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference domain entities or application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from datetime import datetime

    from app.application.dtos.workflow import (
        WorkflowExecutionCreate,
        WorkflowExecutionResult,
    )
    from app.domain.entities.entry_code import EntryCodeEntity
    from app.domain.entities.link import CustomDomainEntity, LinkEntity
    from app.domain.entities.team import TeamEntity
    from app.domain.entities.workflow import (
        ConditionSet,
        RouteAction,
        WorkflowEntity,
        WorkflowStepEntity,
    )
    from app.domain.enums import LinkType


# Workflow repository interface
class IWorkflowRepository(Protocol):
    """Protocol for workflow repository (DIP)."""

    async def get_by_id(self, workflow_id: str) -> WorkflowEntity | None:
        """Return workflow by ID (any team)."""

    async def get_by_id_and_team(
        self, workflow_id: str, team_id: str
    ) -> WorkflowEntity | None:
        """Return workflow by ID if it belongs to team."""

    async def get_by_entry_link(self, entry_link_id: str) -> WorkflowEntity | None:
        """Return the workflow whose entry link is entry_link_id."""

    async def list_by_team(
        self, team_id: str, skip: int = 0, limit: int = 100
    ) -> list[WorkflowEntity]:
        """Return workflows for team (newest first)."""

    async def create_workflow(
        self,
        team_id: str,
        name: str,
        description: str | None,
        entry_link_id: str,
    ) -> WorkflowEntity:
        """Create an active workflow bound to entry_link_id."""

    async def update_workflow(
        self,
        workflow_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        is_active: bool | None = None,
    ) -> WorkflowEntity | None:
        """Update the given fields; None leaves a field unchanged."""

    async def delete_workflow(self, workflow_id: str) -> bool:
        """Delete workflow (steps and executions cascade). Return False if missing."""


class IWorkflowStepRepository(Protocol):
    """Protocol for workflow step repository (DIP)."""

    async def list_steps(self, workflow_id: str) -> list[WorkflowStepEntity]:
        """Return steps ordered by (step_order, created_at, id)."""

    async def get_by_id_and_workflow(
        self, step_id: str, workflow_id: str
    ) -> WorkflowStepEntity | None:
        """Return step by ID if it belongs to workflow."""

    async def max_step_order(self, workflow_id: str) -> int | None:
        """Return the highest step_order of workflow, or None when it has no steps."""

    async def count_by_workflow(self, workflow_id: str) -> int:
        """Return the number of steps of workflow."""

    async def create_step(
        self,
        workflow_id: str,
        name: str,
        step_order: int,
        conditions: ConditionSet,
        action: RouteAction,
    ) -> WorkflowStepEntity:
        """Persist a new step."""

    async def update_step(
        self,
        step_id: str,
        *,
        name: str | None = None,
        conditions: ConditionSet | None = None,
        action: RouteAction | None = None,
        step_order: int | None = None,
    ) -> WorkflowStepEntity | None:
        """Update the given fields; None leaves a field unchanged."""

    async def delete_step(self, step_id: str) -> bool:
        """Delete step. Return False if missing."""

    async def set_step_orders(self, orders: dict[str, int]) -> None:
        """Assign step_order per step id in one statement batch."""


class ILinkRepository(Protocol):
    """Protocol for the link collaborator (DIP)."""

    async def resolve_link(self, link_id: str, team_id: str) -> LinkEntity | None:
        """Return link if it exists, belongs to team and is neither archived nor deleted."""

    async def get_by_id(self, link_id: str) -> LinkEntity | None:
        """Return link by ID regardless of team or state."""

    async def get_by_domain_slug(self, domain_slug: str, slug: str) -> LinkEntity | None:
        """Return the live link published at https://{domain_slug}/{slug}."""

    async def slug_in_use(self, domain_slug: str, slug: str) -> bool:
        """Return whether any link (including archived) uses slug on domain_slug."""

    async def create_link(
        self,
        team_id: str,
        link_type: LinkType,
        name: str,
        *,
        domain_id: str | None = None,
        domain_slug: str | None = None,
        slug: str | None = None,
        email_protected: bool = False,
        email_authenticated: bool = False,
    ) -> LinkEntity:
        """Create a link."""

    async def set_allow_list(self, link_id: str, allow_list: list[str]) -> None:
        """Replace the link's allow list."""

    async def retire_link(self, link_id: str, new_slug: str | None) -> None:
        """Archive and soft-delete link, renaming its slug to new_slug."""


class IDomainRepository(Protocol):
    """Protocol for the custom-domain collaborator (DIP)."""

    async def get_by_slug_and_team(
        self, slug: str, team_id: str
    ) -> CustomDomainEntity | None:
        """Return the custom domain if it is registered by team."""


class ITeamRepository(Protocol):
    """Protocol for the team collaborator (DIP)."""

    async def get_by_id(self, team_id: str) -> TeamEntity | None:
        """Return team by ID."""

    async def is_member(self, team_id: str, user_id: str) -> bool:
        """Return whether user belongs to team."""


class IWorkflowExecutionRepository(Protocol):
    """Protocol for workflow execution records (DIP)."""

    async def record(self, data: WorkflowExecutionCreate) -> WorkflowExecutionResult:
        """Persist an execution record."""

    async def list_by_workflow(
        self, workflow_id: str, skip: int = 0, limit: int = 100
    ) -> list[WorkflowExecutionResult]:
        """Return executions of workflow (newest first)."""


class IEntryCodeRepository(Protocol):
    """Protocol for entry-link verification codes (stored hashed)."""

    async def replace(
        self, identifier: str, code_hash: str, expires_at: datetime
    ) -> EntryCodeEntity:
        """Drop every code issued for identifier and store a new one."""

    async def find(self, identifier: str, code_hash: str) -> EntryCodeEntity | None:
        """Return the code issued for identifier with code_hash (used or not)."""

    async def mark_used(self, code_id: str, used_at: datetime) -> None:
        """Redeem the code so it cannot be used again."""
