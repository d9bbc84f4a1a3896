"""Workflow router: pick the target link for a visitor (implements IWorkflowRouter)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.application.dtos.workflow import IntegrityWarning, RoutingDecision, StepEvaluation
from app.application.services.condition_evaluator import evaluate_conditions
from app.domain.exceptions import ResourceNotFoundException
from app.domain.value_objects.core import ensure_valid_id
from app.shared.telemetry.logging import get_logger
from app.shared.telemetry.tracing import add_span_attributes, traced

if TYPE_CHECKING:
    from app.application.interfaces.repositories import (
        ILinkRepository,
        IWorkflowRepository,
        IWorkflowStepRepository,
    )
    from app.domain.entities.link import LinkEntity
    from app.domain.entities.workflow import WorkflowEntity, WorkflowStepEntity
    from app.domain.value_objects.core import VisitorIdentity

logger = get_logger(__name__)

SKIP_NO_ACTION = "step has no route action"
SKIP_TARGET_MISSING = "target link not found, archived or deleted"
SKIP_TARGET_FOREIGN = "target link belongs to another team"
SKIP_TARGET_NOT_ROUTABLE = "target link is not a document or dataroom link"


class WorkflowRouter:
    """First-match-wins router over a workflow's ordered steps.

    Stateless: every call re-reads the steps, so edits apply to the next
    visitor. A step whose target cannot be used is skipped with a warning
    and evaluation continues with the next step.
    """

    def __init__(
        self,
        workflow_repo: IWorkflowRepository,
        step_repo: IWorkflowStepRepository,
        link_repo: ILinkRepository,
    ) -> None:
        self._workflow_repo = workflow_repo
        self._step_repo = step_repo
        self._link_repo = link_repo

    async def route(self, workflow_id: str, visitor: VisitorIdentity) -> RoutingDecision:
        """Return the routing decision for visitor in workflow_id.

        Raises:
            ValidationException: If workflow_id is malformed.
            ResourceNotFoundException: If the workflow does not exist.
        """
        ensure_valid_id(workflow_id, "workflow_id")
        workflow = await self._workflow_repo.get_by_id(workflow_id)
        if not workflow:
            raise ResourceNotFoundException("workflow", workflow_id)
        return await self.decide(workflow, visitor)

    @traced("workflow.route")
    async def decide(
        self, workflow: WorkflowEntity, visitor: VisitorIdentity
    ) -> RoutingDecision:
        """Evaluate steps in order and return the first usable match."""
        add_span_attributes(workflow_id=workflow.id, workflow_active=workflow.is_active)
        if not workflow.is_active:
            logger.debug("Workflow %s is inactive; not routing", workflow.id)
            return RoutingDecision.no_match()

        steps = sorted(
            await self._step_repo.list_steps(workflow.id),
            key=lambda s: s.sort_key(),
        )
        evaluations: list[StepEvaluation] = []
        warnings: list[IntegrityWarning] = []

        for step in steps:
            if not evaluate_conditions(step.conditions, visitor):
                evaluations.append(
                    StepEvaluation(step.id, step.step_order, conditions_matched=False)
                )
                continue

            target, reason = await self._usable_target(workflow, step)
            if target is None:
                warning = IntegrityWarning(
                    workflow_id=workflow.id,
                    step_id=step.id,
                    target_link_id=step.target_link_id,
                    reason=reason,
                )
                logger.warning(warning.message)
                warnings.append(warning)
                evaluations.append(
                    StepEvaluation(
                        step.id, step.step_order, conditions_matched=True, skipped_reason=reason
                    )
                )
                continue

            evaluations.append(
                StepEvaluation(step.id, step.step_order, conditions_matched=True, routed=True)
            )
            add_span_attributes(matched=True, step_id=step.id, target_link_id=target.id)
            return RoutingDecision.match(step, target, tuple(evaluations), tuple(warnings))

        add_span_attributes(matched=False)
        return RoutingDecision.no_match(tuple(evaluations), tuple(warnings))

    async def _usable_target(
        self, workflow: WorkflowEntity, step: WorkflowStepEntity
    ) -> tuple[LinkEntity | None, str]:
        if step.action is None:
            return None, SKIP_NO_ACTION
        link = await self._link_repo.resolve_link(step.action.target_link_id, workflow.team_id)
        if link is None or not link.is_available:
            return None, SKIP_TARGET_MISSING
        if not link.belongs_to_team(workflow.team_id):
            return None, SKIP_TARGET_FOREIGN
        if not link.is_routable:
            return None, SKIP_TARGET_NOT_ROUTABLE
        return link, ""
