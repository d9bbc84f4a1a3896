"""Workflow use cases: administration, step maintenance, entry resolution."""

from app.application.use_cases.workflows.entry_resolution import EntryResolver
from app.application.use_cases.workflows.step_operations import WorkflowStepService
from app.application.use_cases.workflows.workflow_operations import WorkflowService

__all__ = [
    "EntryResolver",
    "WorkflowService",
    "WorkflowStepService",
]
