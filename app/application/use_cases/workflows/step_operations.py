"""Workflow step operations: list, create, update, delete, reorder."""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.application.services.step_definition_parser import (
    build_allow_list,
    parse_actions,
    parse_allow_list,
    parse_conditions,
)
from app.domain.entities.workflow import ConditionSet, RouteAction
from app.domain.exceptions import ResourceNotFoundException, ValidationException
from app.domain.value_objects.core import ensure_valid_id
from app.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from app.application.dtos.workflow import StepDraft, StepPatch
    from app.application.interfaces.repositories import (
        ILinkRepository,
        IWorkflowRepository,
        IWorkflowStepRepository,
    )
    from app.domain.entities.workflow import WorkflowEntity, WorkflowStepEntity

logger = get_logger(__name__)


class WorkflowStepService:
    """Maintain the ordered routing steps of a team's workflow.

    Every id is format-checked before any repository call. Saving a step
    also replaces the target link's allow list with the step's emails and
    domains, so the target admits exactly the visitors routed to it.
    """

    def __init__(
        self,
        workflow_repo: IWorkflowRepository,
        step_repo: IWorkflowStepRepository,
        link_repo: ILinkRepository,
    ) -> None:
        self.workflow_repo = workflow_repo
        self.step_repo = step_repo
        self.link_repo = link_repo

    async def _get_workflow(self, team_id: str, workflow_id: str) -> WorkflowEntity:
        workflow = await self.workflow_repo.get_by_id_and_team(workflow_id, team_id)
        if not workflow:
            raise ResourceNotFoundException("workflow", workflow_id)
        return workflow

    async def _get_step(self, workflow_id: str, step_id: str) -> WorkflowStepEntity:
        step = await self.step_repo.get_by_id_and_workflow(step_id, workflow_id)
        if not step:
            raise ResourceNotFoundException("workflow_step", step_id)
        return step

    @staticmethod
    def _clean_name(name: str) -> str:
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValidationException("Step name is required", field="name")
        return cleaned

    @staticmethod
    def _conditions_from(
        conditions: dict | None, allow_list: list[str] | None
    ) -> ConditionSet:
        if conditions is not None and allow_list is not None:
            raise ValidationException(
                "Provide either conditions or allow_list, not both", field="conditions"
            )
        if allow_list is not None:
            return parse_allow_list(allow_list)
        return parse_conditions(conditions, strict=True)

    async def _resolve_action(self, team_id: str, raw_actions: list) -> RouteAction:
        """Parse the route action and fill in the target's document/dataroom ids."""
        action = parse_actions(raw_actions, strict=True)
        if action is None:
            raise ValidationException("Exactly one route action is required", field="actions")
        link = await self.link_repo.resolve_link(action.target_link_id, team_id)
        if link is None or not link.belongs_to_team(team_id):
            raise ValidationException(
                "Target link not found in this team", field="actions"
            )
        if not link.is_routable:
            raise ValidationException(
                "Target link must be a document or dataroom link", field="actions"
            )
        return RouteAction(
            target_link_id=link.id,
            target_document_id=link.document_id,
            target_dataroom_id=link.dataroom_id,
        )

    async def _sync_allow_list(self, target_link_id: str, conditions: ConditionSet) -> None:
        await self.link_repo.set_allow_list(target_link_id, build_allow_list(conditions))

    async def list_steps(self, team_id: str, workflow_id: str) -> list[WorkflowStepEntity]:
        """Return steps in evaluation order."""
        ensure_valid_id(team_id, "team_id")
        ensure_valid_id(workflow_id, "workflow_id")
        await self._get_workflow(team_id, workflow_id)
        steps = await self.step_repo.list_steps(workflow_id)
        return sorted(steps, key=lambda s: s.sort_key())

    async def create_step(
        self, team_id: str, workflow_id: str, draft: StepDraft
    ) -> WorkflowStepEntity:
        """Append a step after the current last one.

        Raises:
            ValidationException: Malformed ids, empty name, invalid conditions
                or action, or a target link outside the team.
            ResourceNotFoundException: If the workflow is not in the team.
        """
        ensure_valid_id(team_id, "team_id")
        ensure_valid_id(workflow_id, "workflow_id")
        name = self._clean_name(draft.name)
        if draft.conditions is None and draft.allow_list is None:
            raise ValidationException(
                "Either conditions or allow_list is required", field="conditions"
            )
        conditions = self._conditions_from(draft.conditions, draft.allow_list)
        await self._get_workflow(team_id, workflow_id)
        action = await self._resolve_action(team_id, draft.actions)

        current_max = await self.step_repo.max_step_order(workflow_id)
        step_order = 0 if current_max is None else current_max + 1
        step = await self.step_repo.create_step(
            workflow_id=workflow_id,
            name=name,
            step_order=step_order,
            conditions=conditions,
            action=action,
        )
        await self._sync_allow_list(action.target_link_id, conditions)
        logger.info(
            "Created step %s (order %d) in workflow %s -> link %s",
            step.id,
            step_order,
            workflow_id,
            action.target_link_id,
        )
        return step

    async def update_step(
        self, team_id: str, workflow_id: str, step_id: str, patch: StepPatch
    ) -> WorkflowStepEntity:
        """Apply a partial update; step_order only changes when given.

        Raises:
            ValidationException: As for create_step, or a negative step_order.
            ResourceNotFoundException: If the workflow or step is not found.
        """
        ensure_valid_id(team_id, "team_id")
        ensure_valid_id(workflow_id, "workflow_id")
        ensure_valid_id(step_id, "step_id")
        name = self._clean_name(patch.name) if patch.name is not None else None
        conditions: ConditionSet | None = None
        if patch.conditions is not None or patch.allow_list is not None:
            conditions = self._conditions_from(patch.conditions, patch.allow_list)
        if patch.step_order is not None and patch.step_order < 0:
            raise ValidationException("step_order must not be negative", field="step_order")

        await self._get_workflow(team_id, workflow_id)
        existing = await self._get_step(workflow_id, step_id)
        action = (
            await self._resolve_action(team_id, patch.actions)
            if patch.actions is not None
            else None
        )

        updated = await self.step_repo.update_step(
            step_id,
            name=name,
            conditions=conditions,
            action=action,
            step_order=patch.step_order,
        )
        if not updated:
            raise ResourceNotFoundException("workflow_step", step_id)

        if conditions is not None or action is not None:
            target = action or existing.action
            if target is not None:
                await self._sync_allow_list(
                    target.target_link_id, conditions or existing.conditions
                )
        return updated

    async def delete_step(self, team_id: str, workflow_id: str, step_id: str) -> None:
        """Delete a step. Remaining steps keep their step_order (gaps are fine)."""
        ensure_valid_id(team_id, "team_id")
        ensure_valid_id(workflow_id, "workflow_id")
        ensure_valid_id(step_id, "step_id")
        await self._get_workflow(team_id, workflow_id)
        await self._get_step(workflow_id, step_id)
        await self.step_repo.delete_step(step_id)
        logger.info("Deleted step %s from workflow %s", step_id, workflow_id)

    async def reorder_steps(
        self, team_id: str, workflow_id: str, step_ids: list[str]
    ) -> list[WorkflowStepEntity]:
        """Renumber steps 0..n-1 following step_ids.

        step_ids must list every current step of the workflow exactly once.

        Raises:
            ValidationException: Malformed ids or not a permutation of the
                workflow's steps.
            ResourceNotFoundException: If the workflow is not in the team.
        """
        ensure_valid_id(team_id, "team_id")
        ensure_valid_id(workflow_id, "workflow_id")
        for sid in step_ids:
            ensure_valid_id(sid, "step_ids")
        if len(set(step_ids)) != len(step_ids):
            raise ValidationException("step_ids contains duplicates", field="step_ids")

        await self._get_workflow(team_id, workflow_id)
        current = await self.step_repo.list_steps(workflow_id)
        if set(step_ids) != {s.id for s in current}:
            raise ValidationException(
                "step_ids must list every step of the workflow exactly once",
                field="step_ids",
            )
        await self.step_repo.set_step_orders(
            {sid: order for order, sid in enumerate(step_ids)}
        )
        steps = await self.step_repo.list_steps(workflow_id)
        return sorted(steps, key=lambda s: s.sort_key())
