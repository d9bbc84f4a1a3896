"""DTOs for workflow administration, routing decisions and entry resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from app.domain.entities.link import LinkEntity
from app.domain.entities.workflow import WorkflowEntity, WorkflowStepEntity


@dataclass(frozen=True)
class WorkflowCreate:
    """Command: create a workflow and its entry link.

    domain and slug are optional but must be given together.
    """

    name: str
    description: str | None = None
    domain: str | None = None
    slug: str | None = None


@dataclass(frozen=True)
class WorkflowUpdate:
    """Command: partial workflow update. The entry link cannot be changed.

    None leaves a field unchanged; an empty description clears it.
    """

    name: str | None = None
    description: str | None = None
    is_active: bool | None = None


@dataclass(frozen=True)
class StepDraft:
    """Command: new routing step (raw conditions/actions as received).

    Exactly one of conditions / allow_list must be set. allow_list holds one
    entry per line: 'jane@acme.com' or '@acme.com'.
    """

    name: str
    actions: list[dict[str, Any]]
    conditions: dict[str, Any] | None = None
    allow_list: list[str] | None = None


@dataclass(frozen=True)
class StepPatch:
    """Command: partial step update. step_order changes only when given."""

    name: str | None = None
    conditions: dict[str, Any] | None = None
    allow_list: list[str] | None = None
    actions: list[dict[str, Any]] | None = None
    step_order: int | None = None


@dataclass(frozen=True)
class StepEvaluation:
    """Per-step trace of one routing decision (stored in the execution log)."""

    step_id: str
    step_order: int
    conditions_matched: bool
    routed: bool = False
    skipped_reason: str | None = None

    def to_log_entry(self) -> dict[str, Any]:
        entry: dict[str, Any] = {
            "step_id": self.step_id,
            "step_order": self.step_order,
            "conditions_matched": self.conditions_matched,
            "routed": self.routed,
        }
        if self.skipped_reason:
            entry["skipped_reason"] = self.skipped_reason
        return entry


@dataclass(frozen=True)
class IntegrityWarning:
    """Non-fatal data problem found while routing (e.g. deleted target link).

    Logged and recorded; routing continues with the next step.
    """

    workflow_id: str
    step_id: str
    target_link_id: str | None
    reason: str

    @property
    def message(self) -> str:
        return (
            f"Step {self.step_id} of workflow {self.workflow_id} skipped: "
            f"{self.reason} (target_link_id={self.target_link_id})"
        )


@dataclass(frozen=True)
class RoutingDecision:
    """Result of routing one visitor through a workflow."""

    matched: bool
    step: WorkflowStepEntity | None = None
    target_link: LinkEntity | None = None
    evaluations: tuple[StepEvaluation, ...] = ()
    warnings: tuple[IntegrityWarning, ...] = ()

    @property
    def target_link_id(self) -> str | None:
        return self.target_link.id if self.target_link else None

    @classmethod
    def no_match(
        cls,
        evaluations: tuple[StepEvaluation, ...] = (),
        warnings: tuple[IntegrityWarning, ...] = (),
    ) -> RoutingDecision:
        return cls(matched=False, evaluations=evaluations, warnings=warnings)

    @classmethod
    def match(
        cls,
        step: WorkflowStepEntity,
        target_link: LinkEntity,
        evaluations: tuple[StepEvaluation, ...] = (),
        warnings: tuple[IntegrityWarning, ...] = (),
    ) -> RoutingDecision:
        return cls(
            matched=True,
            step=step,
            target_link=target_link,
            evaluations=evaluations,
            warnings=warnings,
        )


@dataclass(frozen=True)
class EntryResolution:
    """What to render for a visitor who opened a workflow entry link.

    link is the routed target on a match and the entry link otherwise; its
    own access rules (password, NDA, allow list) still apply downstream.
    """

    workflow_id: str
    entry_link: LinkEntity
    decision: RoutingDecision
    link: LinkEntity
    url: str
    execution_id: str | None = None

    @property
    def matched(self) -> bool:
        return self.decision.matched


@dataclass(frozen=True)
class EntryCodeIssued:
    """A verification code was sent to email for entry_link_id."""

    entry_link_id: str
    email: str
    expires_at: datetime


@dataclass(frozen=True)
class WorkflowSummary:
    """Workflow read-model for list/detail responses."""

    workflow: WorkflowEntity
    entry_link: LinkEntity | None
    entry_url: str | None
    step_count: int
    steps: list[WorkflowStepEntity] = field(default_factory=list)


@dataclass(frozen=True)
class WorkflowExecutionCreate:
    """Execution record to persist after an entry resolution."""

    workflow_id: str
    visitor_email: str | None
    status: str
    matched: bool
    target_link_id: str | None
    execution_log: list[dict[str, Any]]
    started_at: datetime
    completed_at: datetime
    error_message: str | None = None


@dataclass(frozen=True)
class WorkflowExecutionResult:
    """Execution read-model."""

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
