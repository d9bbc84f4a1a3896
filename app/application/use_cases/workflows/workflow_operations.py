"""Workflow operations: create (with entry link), get, list, update, delete, executions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.application.dtos.workflow import (
    WorkflowCreate,
    WorkflowExecutionResult,
    WorkflowSummary,
    WorkflowUpdate,
)
from app.domain.enums import LinkType
from app.domain.exceptions import (
    PlanUpgradeRequiredException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.value_objects.core import ensure_valid_id, normalize_domain, normalize_slug
from app.shared.telemetry.logging import get_logger
from app.shared.utils.generators import retired_slug

if TYPE_CHECKING:
    from app.application.interfaces.repositories import (
        IDomainRepository,
        ILinkRepository,
        ITeamRepository,
        IWorkflowExecutionRepository,
        IWorkflowRepository,
        IWorkflowStepRepository,
    )
    from app.domain.entities.workflow import WorkflowEntity

logger = get_logger(__name__)

ENTRY_LINK_NAME_SUFFIX = " - Entry Link"


class WorkflowService:
    """Create and manage a team's workflows and their entry links."""

    def __init__(
        self,
        workflow_repo: IWorkflowRepository,
        step_repo: IWorkflowStepRepository,
        link_repo: ILinkRepository,
        domain_repo: IDomainRepository,
        team_repo: ITeamRepository,
        execution_repo: IWorkflowExecutionRepository,
        *,
        excluded_plans: frozenset[str] = frozenset({"free", "pro"}),
        public_base_url: str = "http://localhost:3000",
    ) -> None:
        self.workflow_repo = workflow_repo
        self.step_repo = step_repo
        self.link_repo = link_repo
        self.domain_repo = domain_repo
        self.team_repo = team_repo
        self.execution_repo = execution_repo
        self.excluded_plans = excluded_plans
        self.public_base_url = public_base_url

    async def _get_workflow(self, team_id: str, workflow_id: str) -> WorkflowEntity:
        ensure_valid_id(team_id, "team_id")
        ensure_valid_id(workflow_id, "workflow_id")
        workflow = await self.workflow_repo.get_by_id_and_team(workflow_id, team_id)
        if not workflow:
            raise ResourceNotFoundException("workflow", workflow_id)
        return workflow

    async def _summary(
        self, workflow: WorkflowEntity, *, with_steps: bool = False
    ) -> WorkflowSummary:
        entry_link = await self.link_repo.get_by_id(workflow.entry_link_id)
        entry_url = entry_link.public_url(self.public_base_url) if entry_link else None
        if with_steps:
            steps = sorted(
                await self.step_repo.list_steps(workflow.id), key=lambda s: s.sort_key()
            )
            return WorkflowSummary(workflow, entry_link, entry_url, len(steps), steps)
        count = await self.step_repo.count_by_workflow(workflow.id)
        return WorkflowSummary(workflow, entry_link, entry_url, count)

    async def list_workflows(
        self, team_id: str, skip: int = 0, limit: int = 100
    ) -> list[WorkflowSummary]:
        """Return the team's workflows, newest first, with step counts."""
        ensure_valid_id(team_id, "team_id")
        workflows = await self.workflow_repo.list_by_team(team_id, skip=skip, limit=limit)
        return [await self._summary(w) for w in workflows]

    async def get_workflow(self, team_id: str, workflow_id: str) -> WorkflowSummary:
        """Return workflow with its ordered steps and entry URL."""
        workflow = await self._get_workflow(team_id, workflow_id)
        return await self._summary(workflow, with_steps=True)

    async def create_workflow(
        self, team_id: str, data: WorkflowCreate
    ) -> WorkflowSummary:
        """Create a workflow and its email-gated entry link.

        Args:
            team_id: Owning team.
            data: Name, description and optional custom domain + slug.

        Returns:
            Summary of the new (active, step-less) workflow.

        Raises:
            ValidationException: Malformed id, empty name, domain without slug
                (or the reverse), foreign domain or slug already in use.
            ResourceNotFoundException: If the team does not exist.
            PlanUpgradeRequiredException: If the team's plan excludes workflows.
        """
        ensure_valid_id(team_id, "team_id")
        name = (data.name or "").strip()
        if not name:
            raise ValidationException("Workflow name is required", field="name")
        if bool(data.domain) != bool(data.slug):
            raise ValidationException(
                "domain and slug must be provided together", field="domain"
            )

        team = await self.team_repo.get_by_id(team_id)
        if not team:
            raise ResourceNotFoundException("team", team_id)
        if team.has_plan_in(self.excluded_plans):
            raise PlanUpgradeRequiredException(team.plan)

        domain_id: str | None = None
        domain_slug: str | None = None
        slug: str | None = None
        if data.domain and data.slug:
            try:
                domain_slug = normalize_domain(data.domain)
                slug = normalize_slug(data.slug)
            except ValueError as e:
                raise ValidationException(str(e), field="domain") from e
            domain = await self.domain_repo.get_by_slug_and_team(domain_slug, team_id)
            if not domain:
                raise ValidationException(
                    "Domain not found or not associated with this team", field="domain"
                )
            if await self.link_repo.slug_in_use(domain_slug, slug):
                raise ValidationException(
                    "This slug is already in use on the selected domain", field="slug"
                )
            domain_id = domain.id

        entry_link = await self.link_repo.create_link(
            team_id,
            LinkType.WORKFLOW_LINK,
            f"{name}{ENTRY_LINK_NAME_SUFFIX}",
            domain_id=domain_id,
            domain_slug=domain_slug,
            slug=slug,
            email_protected=True,
            email_authenticated=True,
        )
        workflow = await self.workflow_repo.create_workflow(
            team_id=team_id,
            name=name,
            description=(data.description or "").strip() or None,
            entry_link_id=entry_link.id,
        )
        logger.info(
            "Created workflow %s for team %s (entry link %s)",
            workflow.id,
            team_id,
            entry_link.id,
        )
        return WorkflowSummary(
            workflow, entry_link, entry_link.public_url(self.public_base_url), 0
        )

    async def update_workflow(
        self, team_id: str, workflow_id: str, data: WorkflowUpdate
    ) -> WorkflowSummary:
        """Update name, description or active flag. The entry link never changes."""
        await self._get_workflow(team_id, workflow_id)
        name: str | None = None
        if data.name is not None:
            name = data.name.strip()
            if not name:
                raise ValidationException("Workflow name is required", field="name")
        updated = await self.workflow_repo.update_workflow(
            workflow_id,
            name=name,
            description=data.description,
            is_active=data.is_active,
        )
        if not updated:
            raise ResourceNotFoundException("workflow", workflow_id)
        return await self._summary(updated)

    async def set_active(
        self, team_id: str, workflow_id: str, is_active: bool
    ) -> WorkflowSummary:
        """Enable or disable routing for a workflow."""
        summary = await self.update_workflow(
            team_id, workflow_id, WorkflowUpdate(is_active=is_active)
        )
        logger.info(
            "Workflow %s %s", workflow_id, "activated" if is_active else "deactivated"
        )
        return summary

    async def delete_workflow(self, team_id: str, workflow_id: str) -> None:
        """Delete the workflow and retire its entry link.

        The entry link is archived and soft-deleted; its slug is renamed to
        '{slug}-DELETED-{suffix}' so the slug can be used again.
        """
        workflow = await self._get_workflow(team_id, workflow_id)
        entry_link = await self.link_repo.get_by_id(workflow.entry_link_id)
        await self.workflow_repo.delete_workflow(workflow_id)
        if entry_link:
            await self.link_repo.retire_link(entry_link.id, retired_slug(entry_link.slug))
        logger.info("Deleted workflow %s of team %s", workflow_id, team_id)

    async def list_executions(
        self, team_id: str, workflow_id: str, skip: int = 0, limit: int = 100
    ) -> list[WorkflowExecutionResult]:
        """Return the workflow's entry resolutions, newest first."""
        await self._get_workflow(team_id, workflow_id)
        return await self.execution_repo.list_by_workflow(workflow_id, skip=skip, limit=limit)
