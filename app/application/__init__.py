"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repositories).
"""

from app.application.interfaces import (
    IDomainRepository,
    ILinkRepository,
    ITeamRepository,
    IWorkflowExecutionRepository,
    IWorkflowRepository,
    IWorkflowRouter,
    IWorkflowStepRepository,
)
from app.application.services.workflow_router import WorkflowRouter
from app.application.use_cases.workflows import (
    EntryResolver,
    WorkflowService,
    WorkflowStepService,
)

__all__ = [
    "EntryResolver",
    "IDomainRepository",
    "ILinkRepository",
    "ITeamRepository",
    "IWorkflowExecutionRepository",
    "IWorkflowRepository",
    "IWorkflowRouter",
    "IWorkflowStepRepository",
    "WorkflowRouter",
    "WorkflowService",
    "WorkflowStepService",
]
