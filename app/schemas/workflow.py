"""Workflow and workflow step API schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.application.dtos.workflow import (
    RoutingDecision,
    WorkflowExecutionResult,
    WorkflowSummary,
)
from app.domain.entities.workflow import WorkflowStepEntity


class WorkflowCreateRequest(BaseModel):
    """Request body for creating a workflow (and its entry link)."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    domain: str | None = Field(default=None, max_length=253, description="Custom domain, e.g. docs.acme.com")
    slug: str | None = Field(default=None, max_length=100, description="Path on the custom domain")


class WorkflowUpdateRequest(BaseModel):
    """Request body for updating a workflow (partial). The entry link is fixed."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    is_active: bool | None = None


class WorkflowActiveRequest(BaseModel):
    """Request body for PUT /workflows/{id}/active."""

    is_active: bool


class WorkflowStepCreateRequest(BaseModel):
    """Request body for adding a step.

    Send either conditions ({"logic": "OR", "items": [...]}) or allow_list
    (one entry per item: "jane@acme.com" or "@acme.com").
    """

    name: str = Field(..., min_length=1, max_length=255)
    conditions: dict[str, Any] | None = None
    allow_list: list[str] | None = Field(default=None, max_length=1000)
    actions: list[dict[str, Any]] = Field(..., min_length=1)


class WorkflowStepUpdateRequest(BaseModel):
    """Request body for updating a step (partial)."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    conditions: dict[str, Any] | None = None
    allow_list: list[str] | None = Field(default=None, max_length=1000)
    actions: list[dict[str, Any]] | None = Field(default=None, min_length=1)
    step_order: int | None = Field(default=None, ge=0)


class WorkflowStepReorderRequest(BaseModel):
    """Request body for reordering: every step id of the workflow, in the new order."""

    step_ids: list[str]


class RouteRequest(BaseModel):
    """Request body for a routing dry run."""

    email: EmailStr | None = None


class WorkflowStepResponse(BaseModel):
    """Workflow step response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    workflow_id: str
    name: str
    step_order: int
    conditions: dict[str, Any]
    actions: list[dict[str, Any]]
    created_at: datetime | None

    @classmethod
    def from_entity(cls, step: WorkflowStepEntity) -> WorkflowStepResponse:
        return cls(
            id=step.id,
            workflow_id=step.workflow_id,
            name=step.name,
            step_order=step.step_order,
            conditions=step.conditions.to_dict(),
            actions=step.actions_to_list(),
            created_at=step.created_at,
        )


class WorkflowResponse(BaseModel):
    """Workflow response (steps included on detail only)."""

    id: str
    team_id: str
    name: str
    description: str | None
    is_active: bool
    entry_link_id: str
    entry_url: str | None
    step_count: int
    created_at: datetime | None
    steps: list[WorkflowStepResponse] | None = None

    @classmethod
    def from_summary(
        cls, summary: WorkflowSummary, *, include_steps: bool = False
    ) -> WorkflowResponse:
        w = summary.workflow
        return cls(
            id=w.id,
            team_id=w.team_id,
            name=w.name,
            description=w.description,
            is_active=w.is_active,
            entry_link_id=w.entry_link_id,
            entry_url=summary.entry_url,
            step_count=summary.step_count,
            created_at=w.created_at,
            steps=(
                [WorkflowStepResponse.from_entity(s) for s in summary.steps]
                if include_steps
                else None
            ),
        )


class WorkflowExecutionResponse(BaseModel):
    """Workflow execution (entry resolution) response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    workflow_id: str
    visitor_email: str | None
    status: str
    matched: bool
    target_link_id: str | None
    execution_log: list[dict[str, Any]]
    error_message: str | None
    started_at: datetime | None
    completed_at: datetime | None

    @classmethod
    def from_result(cls, result: WorkflowExecutionResult) -> WorkflowExecutionResponse:
        return cls.model_validate(result)


class IntegrityWarningResponse(BaseModel):
    """Step skipped because its target link cannot be used."""

    step_id: str
    target_link_id: str | None
    reason: str


class RouteResponse(BaseModel):
    """Routing dry-run result."""

    matched: bool
    step_id: str | None
    target_link_id: str | None
    evaluations: list[dict[str, Any]]
    warnings: list[IntegrityWarningResponse]

    @classmethod
    def from_decision(cls, decision: RoutingDecision) -> RouteResponse:
        return cls(
            matched=decision.matched,
            step_id=decision.step.id if decision.step else None,
            target_link_id=decision.target_link_id,
            evaluations=[e.to_log_entry() for e in decision.evaluations],
            warnings=[
                IntegrityWarningResponse(
                    step_id=w.step_id, target_link_id=w.target_link_id, reason=w.reason
                )
                for w in decision.warnings
            ],
        )
