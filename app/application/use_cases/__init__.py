"""Application use cases: one entry point per workflow operation."""

from app.application.use_cases.workflows import (
    EntryResolver,
    WorkflowService,
    WorkflowStepService,
)

__all__ = [
    "EntryResolver",
    "WorkflowService",
    "WorkflowStepService",
]
