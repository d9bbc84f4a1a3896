"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.entry_code_repo import EntryCodeRepository
from app.infrastructure.persistence.repositories.execution_repo import (
    WorkflowExecutionRepository,
)
from app.infrastructure.persistence.repositories.link_repo import (
    DomainRepository,
    LinkRepository,
)
from app.infrastructure.persistence.repositories.step_repo import WorkflowStepRepository
from app.infrastructure.persistence.repositories.team_repo import TeamRepository
from app.infrastructure.persistence.repositories.workflow_repo import WorkflowRepository

__all__ = [
    "BaseRepository",
    "DomainRepository",
    "EntryCodeRepository",
    "LinkRepository",
    "TeamRepository",
    "WorkflowExecutionRepository",
    "WorkflowRepository",
    "WorkflowStepRepository",
]
