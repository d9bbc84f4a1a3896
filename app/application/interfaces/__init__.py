"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure or app.api.
"""

from app.application.interfaces.repositories import (
    IDomainRepository,
    IEntryCodeRepository,
    ILinkRepository,
    ITeamRepository,
    IWorkflowExecutionRepository,
    IWorkflowRepository,
    IWorkflowStepRepository,
)
from app.application.interfaces.services import IEntryCodeNotifier, IWorkflowRouter

__all__ = [
    "IDomainRepository",
    "IEntryCodeNotifier",
    "IEntryCodeRepository",
    "ILinkRepository",
    "ITeamRepository",
    "IWorkflowExecutionRepository",
    "IWorkflowRepository",
    "IWorkflowRouter",
    "IWorkflowStepRepository",
]
