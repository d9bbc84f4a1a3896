"""Application DTOs (no ORM dependency)."""

from app.application.dtos.workflow import (
    EntryCodeIssued,
    EntryResolution,
    IntegrityWarning,
    RoutingDecision,
    StepDraft,
    StepEvaluation,
    StepPatch,
    WorkflowCreate,
    WorkflowExecutionCreate,
    WorkflowExecutionResult,
    WorkflowSummary,
    WorkflowUpdate,
)

__all__ = [
    "EntryCodeIssued",
    "EntryResolution",
    "IntegrityWarning",
    "RoutingDecision",
    "StepDraft",
    "StepEvaluation",
    "StepPatch",
    "WorkflowCreate",
    "WorkflowExecutionCreate",
    "WorkflowExecutionResult",
    "WorkflowSummary",
    "WorkflowUpdate",
]
